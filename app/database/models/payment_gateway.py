from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    String,
    Text,
    func,
)
from sqlalchemy.orm import (
    Mapped,
    mapped_column,
)

from app.database.session import Base
from app.utils.enums import GatewayMode


class PaymentGateway(Base):
    """A configured gateway instance (plugin + credentials + mode)."""

    __tablename__ = "payment_gateways"

    id: Mapped[str] = mapped_column(
        String(100),
        primary_key=True,
    )

    label: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    plugin: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    mode: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        default=GatewayMode.TEST,
    )

    api_key: Mapped[str] = mapped_column(
        Text,
        default="",
    )

    status: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<PaymentGateway id={self.id} plugin={self.plugin} mode={self.mode}>"
