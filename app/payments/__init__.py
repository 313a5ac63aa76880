"""
Payment gateways - off-site redirect integrations.

Usage:
    from app.payments import MessageBag, get_payment_gateway

    gateway = get_payment_gateway(gateway_row, session, MessageBag())
    target = gateway.initiate(checkout)
    ...
    payment = gateway.reconcile(order_id, request_params)

The gateway is picked by PaymentGateway.plugin; only "idpay_offsite_redirect"
ships today.
"""

from typing import Optional

import requests
from sqlalchemy.orm import Session

from app.payments.base import (
    CheckoutContext,
    MessageBag,
    MessageSink,
    OffsitePaymentGateway,
    PaymentGatewayConfiguration,
    Price,
    RedirectTarget,
)
from app.payments.exceptions import (
    InvalidStateTransition,
    PaymentFailed,
    PaymentGatewayError,
    PaymentIntegrityError,
    PaymentNotFoundError,
    PaymentValidationError,
    SecurityError,
    UpstreamError,
)


def get_payment_gateway(
    gateway,
    session: Session,
    messages: MessageSink,
    http: Optional[requests.Session] = None,
) -> OffsitePaymentGateway:
    """Return the gateway implementation for a configured PaymentGateway row."""
    # Imported here: the gateway pulls in the models, which import our exceptions.
    from app.database.repositories.payment_repository import PaymentRepository
    from app.payments.idpay.gateway import PLUGIN_ID, IDPayGateway

    configuration = PaymentGatewayConfiguration(
        gateway_id=gateway.id,
        api_key=gateway.api_key or "",
        mode=gateway.mode,
    )
    if gateway.plugin == PLUGIN_ID:
        return IDPayGateway(
            configuration=configuration,
            payments=PaymentRepository(session),
            messages=messages,
            http=http,
        )
    raise ValueError(f"Unknown payment gateway plugin: {gateway.plugin}")


__all__ = [
    "get_payment_gateway",
    "OffsitePaymentGateway",
    "CheckoutContext",
    "MessageBag",
    "MessageSink",
    "PaymentGatewayConfiguration",
    "Price",
    "RedirectTarget",
    "PaymentGatewayError",
    "PaymentValidationError",
    "SecurityError",
    "PaymentNotFoundError",
    "PaymentIntegrityError",
    "InvalidStateTransition",
    "UpstreamError",
    "PaymentFailed",
]
