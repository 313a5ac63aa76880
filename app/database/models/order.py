"""Order model - the checkout context a payment is taken against."""

import secrets
from decimal import Decimal
from typing import Optional

from sqlalchemy import ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database.models.model_base import SqlAlchemyModel


def generate_redirect_key() -> str:
    return secrets.token_urlsafe(32)


class Order(SqlAlchemyModel):
    __tablename__ = "orders"

    total_number: Mapped[Decimal] = mapped_column(
        Numeric(19, 6),
        nullable=False,
        default=0,
    )
    currency_code: Mapped[str] = mapped_column(String(3), nullable=False, default="IRR")

    payment_gateway_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("payment_gateways.id", ondelete="SET NULL"),
    )
    # Embedded in the return URL so a callback cannot be replayed against another order.
    payment_redirect_key: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        default=generate_redirect_key,
    )

    payment_gateway = relationship("PaymentGateway")
    payments = relationship(
        "Payment",
        back_populates="order",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Order id={self.id} total={self.total_number} {self.currency_code}>"
