"""Payment model - one attempt to pay an order through an off-site gateway."""

from decimal import Decimal
from typing import Optional

from sqlalchemy import ForeignKey, Index, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from app.database.models.model_base import SqlAlchemyModel
from app.payments.exceptions import InvalidStateTransition
from app.utils.enums import PaymentState

# authorization is the only non-terminal state.
ALLOWED_TRANSITIONS = {
    PaymentState.AUTHORIZATION: {PaymentState.COMPLETED, PaymentState.FAILED},
}


class Payment(SqlAlchemyModel):
    __tablename__ = "payments"
    __table_args__ = (
        Index("ix_payments_remote_order_state", "remote_id", "order_id", "state"),
    )

    order_id: Mapped[int] = mapped_column(
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    payment_gateway_id: Mapped[str] = mapped_column(
        ForeignKey("payment_gateways.id"),
        nullable=False,
    )

    amount: Mapped[Decimal] = mapped_column(Numeric(19, 6), nullable=False)
    currency_code: Mapped[str] = mapped_column(String(3), nullable=False)

    state: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=PaymentState.AUTHORIZATION,
    )  # authorization, completed, failed
    remote_id: Mapped[Optional[str]] = mapped_column(String(255), index=True)
    remote_state: Mapped[Optional[str]] = mapped_column(Text)

    order = relationship("Order", back_populates="payments")
    payment_gateway = relationship("PaymentGateway")

    @validates("state")
    def _check_transition(self, key: str, value: str) -> str:
        current = self.state
        if current is None or current == value:
            return value
        if value not in ALLOWED_TRANSITIONS.get(current, set()):
            raise InvalidStateTransition(
                f"Payment {self.id} cannot move from {current} to {value}"
            )
        return value

    @property
    def is_terminal(self) -> bool:
        return self.state not in ALLOWED_TRANSITIONS

    def __repr__(self) -> str:
        return f"<Payment id={self.id} order_id={self.order_id} state={self.state}>"
