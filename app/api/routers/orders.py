"""
Orders Router - payment history of an order.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.schemas.payment import PaymentItem, PaymentListResponse
from app.database.repositories.order_repository import OrderRepository
from app.database.repositories.payment_repository import PaymentRepository
from app.database.session import get_db

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/orders/{order_id}/payments", response_model=PaymentListResponse)
def list_order_payments(order_id: int, db: Session = Depends(get_db)):
    """List payments for an order, newest first."""
    if not OrderRepository(db).exists(order_id):
        raise HTTPException(status_code=404, detail="Order not found")
    payments = PaymentRepository(db).list_for_order(order_id)
    return PaymentListResponse(
        payments=[PaymentItem.model_validate(p) for p in payments]
    )
