"""
Order and gateway configuration lookups used by the checkout routes.
"""

from typing import List, Optional
from sqlalchemy.orm import Session

from app.database.models.order import Order
from app.database.models.payment_gateway import PaymentGateway
from app.database.repositories.repository import BaseRepository


class OrderRepository(BaseRepository[Order]):
    def __init__(self, session: Session):
        super().__init__(session, Order)


class PaymentGatewayRepository(BaseRepository[PaymentGateway]):
    def __init__(self, session: Session):
        super().__init__(session, PaymentGateway)

    def get_enabled(self, gateway_id: str) -> Optional[PaymentGateway]:
        gateway = self.get_by_id(gateway_id)
        if gateway is None or not gateway.status:
            return None
        return gateway

    def get_by_plugin(self, plugin: str) -> List[PaymentGateway]:
        return (
            self.session.query(PaymentGateway)
            .filter(PaymentGateway.plugin == plugin)
            .order_by(PaymentGateway.id)
            .all()
        )
