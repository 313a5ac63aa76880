"""
Checkout Router - off-site payment start and customer return.

    POST      /checkout/{order_id}/payment                       -> redirect to the processor
    GET|POST  /checkout/{order_id}/payment/return/{redirect_key} -> verify and finalize
"""

import logging
import os
import secrets

import requests
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from app.api.dependencies import get_http_session, get_messages
from app.api.schemas.payment import (
    CheckoutResponse,
    ErrorResponse,
    Messages,
    PaymentItem,
    PaymentReturnResponse,
)
from app.database.models.order import Order
from app.database.models.payment import Payment
from app.database.models.payment_gateway import PaymentGateway
from app.database.repositories.order_repository import OrderRepository, PaymentGatewayRepository
from app.database.session import get_db
from app.payments import CheckoutContext, MessageBag, Price, get_payment_gateway
from app.payments.idpay.schemas import CallbackParams

logger = logging.getLogger(__name__)

router = APIRouter()

# Absolute base for callback URLs when the API sits behind a proxy.
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "").rstrip("/")

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    402: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
}


def build_return_url(request: Request, order: Order) -> str:
    path = f"/checkout/{order.id}/payment/return/{order.payment_redirect_key}"
    if PUBLIC_BASE_URL:
        return f"{PUBLIC_BASE_URL}{path}"
    return str(request.url_for(
        "payment_return",
        order_id=str(order.id),
        redirect_key=order.payment_redirect_key,
    ))


def _load_order(db: Session, order_id: int) -> Order:
    order = OrderRepository(db).get_by_id(order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


def _load_gateway(db: Session, order: Order) -> PaymentGateway:
    gateway = None
    if order.payment_gateway_id:
        gateway = PaymentGatewayRepository(db).get_enabled(order.payment_gateway_id)
    if gateway is None:
        raise HTTPException(status_code=400, detail="Order has no enabled payment gateway")
    return gateway


@router.post(
    "/checkout/{order_id}/payment",
    response_model=CheckoutResponse,
    responses=ERROR_RESPONSES,
)
def start_payment(
    order_id: int,
    request: Request,
    db: Session = Depends(get_db),
    http: requests.Session = Depends(get_http_session),
    messages: MessageBag = Depends(get_messages),
):
    """Create the remote payment and return where to send the customer."""
    order = _load_order(db, order_id)
    gateway = get_payment_gateway(_load_gateway(db, order), db, messages, http=http)

    checkout = CheckoutContext(
        order_id=order.id,
        total=Price(number=order.total_number, currency_code=order.currency_code),
        return_url=build_return_url(request, order),
    )
    target = gateway.initiate(checkout)

    return CheckoutResponse(
        order_id=order.id,
        redirect_url=target.url,
        redirect_method=target.method,
        data=target.data,
        messages=Messages(**messages.as_dict()),
    )


def _finish_return(
    db: Session,
    order_id: int,
    redirect_key: str,
    callback: CallbackParams,
    http: requests.Session,
    messages: MessageBag,
) -> Payment:
    order = _load_order(db, order_id)
    if not secrets.compare_digest(
        redirect_key.encode("utf-8"),
        order.payment_redirect_key.encode("utf-8"),
    ):
        logger.warning(f"Payment return for order {order_id} with a wrong redirect key")
        raise HTTPException(status_code=403, detail="Invalid payment redirect key")

    gateway = get_payment_gateway(_load_gateway(db, order), db, messages, http=http)
    return gateway.reconcile(order.id, callback)


@router.api_route(
    "/checkout/{order_id}/payment/return/{redirect_key}",
    methods=["GET", "POST"],
    name="payment_return",
    response_model=PaymentReturnResponse,
    responses=ERROR_RESPONSES,
)
async def payment_return(
    order_id: int,
    redirect_key: str,
    request: Request,
    db: Session = Depends(get_db),
    http: requests.Session = Depends(get_http_session),
    messages: MessageBag = Depends(get_messages),
):
    """Customer is back from the processor; verify the payment server-side."""
    params = dict(request.query_params)
    if request.method == "POST":
        form = await request.form()
        params.update({key: value for key, value in form.items() if isinstance(value, str)})
    callback = CallbackParams.model_validate(params)

    # Database lookups and the inquiry call are blocking.
    payment = await run_in_threadpool(
        _finish_return, db, order_id, redirect_key, callback, http, messages
    )

    messages.add_status("Payment completed successfully.")
    return PaymentReturnResponse(
        payment=PaymentItem.model_validate(payment),
        messages=Messages(**messages.as_dict()),
    )
