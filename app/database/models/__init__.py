"""Database models package - import all models so Alembic can discover them."""

from app.database.models.model_base import SqlAlchemyModel
from app.database.models.payment_gateway import PaymentGateway
from app.database.models.order import Order
from app.database.models.payment import Payment

__all__ = [
    "SqlAlchemyModel",
    "PaymentGateway",
    "Order",
    "Payment",
]
