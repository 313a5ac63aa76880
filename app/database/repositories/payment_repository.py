"""
Payment Repository

Record store used by the gateway integration: create pending payments, look
them up by (remote_id, order_id, state) and persist state transitions.
"""

from typing import List
from sqlalchemy.orm import Session

from app.database.models.payment import Payment
from app.database.repositories.repository import BaseRepository
from app.utils.enums import PaymentState


class PaymentRepository(BaseRepository[Payment]):
    """
    Repository for Payment model.

    Example:
        repo = PaymentRepository(session)
        payment = repo.create(
            state="authorization",
            amount=Decimal("5000"),
            currency_code="TMN",
            remote_id="d2e353189823079e1e4181772cff5292",
            order_id=42,
            payment_gateway_id="idpay",
        )
        pending = repo.find_pending(remote_id=payment.remote_id, order_id=42)
    """

    def __init__(self, session: Session):
        super().__init__(session, Payment)

    def find_pending(self, remote_id: str, order_id: int) -> List[Payment]:
        """
        Payments still awaiting reconciliation for a processor transaction.

        Returns every match; callers decide what more than one row means.
        """
        return self.find_many(
            remote_id=remote_id,
            order_id=order_id,
            state=PaymentState.AUTHORIZATION,
        )

    def list_for_order(self, order_id: int) -> List[Payment]:
        return (
            self.session.query(Payment)
            .filter(Payment.order_id == order_id)
            .order_by(Payment.created_at.desc(), Payment.id.desc())
            .all()
        )
