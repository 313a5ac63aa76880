"""
IDPay off-site redirect gateway.

Checkout (initiate):
    1. Convert the order total to the integer Rial amount IDPay expects.
    2. POST /payment with the order id, amount and return URL.
    3. Store a Payment in "authorization" keyed by the returned remote id.
    4. Hand back the payment link; the browser is sent there with a POST form.

Return (reconcile):
    1. Refuse callbacks whose order_id is not the order being returned to.
    2. Load the single "authorization" payment for (remote id, order id).
    3. Ask IDPay for the real status with POST /payment/inquiry; the status
       posted by the browser is never used.
    4. status 100 -> "completed"; anything else -> "failed" + PaymentFailed.

Known gap: the inquiry and the save are not atomic. If the process dies in
between, the payment stays in "authorization" and must be reconciled by hand
(a repeated inquiry for the same remote id is safe).
"""

import logging
from typing import Any, Mapping, Optional, Union

import requests

from app.database.models.payment import Payment
from app.database.repositories.payment_repository import PaymentRepository
from app.payments.base import (
    CheckoutContext,
    MessageSink,
    OffsitePaymentGateway,
    PaymentGatewayConfiguration,
    Price,
    RedirectTarget,
)
from app.payments.exceptions import (
    PaymentFailed,
    PaymentIntegrityError,
    PaymentNotFoundError,
    PaymentValidationError,
    SecurityError,
    UpstreamError,
)
from app.payments.idpay.client import IDPayClient
from app.payments.idpay.schemas import CallbackParams, CreatePaymentRequest
from app.utils.enums import (
    IDPAY_STATUS_VERIFIED,
    TOMAN_CURRENCY_CODE,
    TOMAN_TO_RIAL,
    PaymentState,
    RedirectMethod,
)

logger = logging.getLogger(__name__)

PLUGIN_ID = "idpay_offsite_redirect"


def to_gateway_amount(price: Price) -> int:
    """
    Integer amount to send to IDPay.

    Every currency code is treated as Rial except TMN (Iranian Toman, an
    unofficial code), which is converted to Rials by multiplying by 10.
    """
    amount = int(price.number)
    if price.currency_code == TOMAN_CURRENCY_CODE:
        amount *= TOMAN_TO_RIAL
    return amount


class IDPayGateway(OffsitePaymentGateway):
    """
    IDPay (https://idpay.ir) off-site payments.

    Collaborators are passed in by the caller:
    - payments: record store for Payment rows
    - messages: user-facing error channel
    - client: IDPayClient; built from the configuration when omitted
    """

    def __init__(
        self,
        configuration: PaymentGatewayConfiguration,
        payments: PaymentRepository,
        messages: MessageSink,
        client: Optional[IDPayClient] = None,
        http: Optional[requests.Session] = None,
    ):
        self.configuration = configuration
        self.payments = payments
        self.messages = messages
        self.client = client or IDPayClient(
            api_key=configuration.api_key,
            sandbox=configuration.sandbox,
            session=http,
        )

    def initiate(self, checkout: CheckoutContext) -> RedirectTarget:
        if not checkout.return_url:
            raise PaymentValidationError(f"Order {checkout.order_id} has no return URL")

        amount = to_gateway_amount(checkout.total)
        if amount <= 0:
            raise PaymentValidationError(
                f"Order {checkout.order_id} total must be positive, got {checkout.total.number}"
            )

        request = CreatePaymentRequest(
            order_id=str(checkout.order_id),
            amount=amount,
            phone="",
            desc=f"Order number #{checkout.order_id}",
            callback=checkout.return_url,
        )

        try:
            created = self.client.create_payment(request)
        except UpstreamError as e:
            self._surface(e)
            raise

        # Stays in "authorization" until the return callback has been verified.
        payment = self.payments.create(
            state=PaymentState.AUTHORIZATION,
            amount=checkout.total.number,
            currency_code=checkout.total.currency_code,
            payment_gateway_id=self.configuration.gateway_id,
            order_id=checkout.order_id,
            remote_id=created.id,
        )
        logger.info(
            f"IDPay payment {payment.id} created for order {checkout.order_id} "
            f"(remote_id={created.id}, amount={amount}, sandbox={self.configuration.sandbox})"
        )
        return RedirectTarget(url=created.link, method=RedirectMethod.POST)

    def reconcile(
        self,
        order_id: int,
        callback: Union[CallbackParams, Mapping[str, Any]],
    ) -> Payment:
        if not isinstance(callback, CallbackParams):
            callback = CallbackParams.model_validate(dict(callback))

        if callback.order_id != str(order_id):
            logger.warning(
                f"Callback for order {order_id} carries order_id={callback.order_id!r} "
                f"(remote id {callback.id!r}); rejecting"
            )
            raise SecurityError("Abuse of transaction callback.")

        logger.info(
            f"IDPay return for order {order_id}: id={callback.id} track_id={callback.track_id} "
            f"status={callback.status} amount={callback.amount} date={callback.date}"
        )

        payment = self._load_pending(callback.id, order_id)

        try:
            result = self.client.inquire(payment.remote_id, payment.order_id)
        except UpstreamError as e:
            self._surface(e)
            raise

        payment.remote_state = result.describe()
        if result.status == IDPAY_STATUS_VERIFIED:
            payment.state = PaymentState.COMPLETED
            self.payments.save(payment)
            logger.info(f"Payment {payment.id} completed ({payment.remote_state})")
            return payment

        payment.state = PaymentState.FAILED
        self.payments.save(payment)
        logger.warning(f"Payment {payment.id} failed ({payment.remote_state})")
        raise PaymentFailed(result.status)

    def _load_pending(self, remote_id: Optional[str], order_id: int) -> Payment:
        if not remote_id:
            raise PaymentNotFoundError(remote_id, order_id)

        matches = self.payments.find_pending(remote_id=remote_id, order_id=order_id)
        if not matches:
            raise PaymentNotFoundError(remote_id, order_id)
        if len(matches) > 1:
            logger.error(
                f"{len(matches)} payments in authorization for "
                f"remote_id={remote_id} order_id={order_id}"
            )
            raise PaymentIntegrityError(remote_id, order_id, len(matches))
        return matches[0]

    def _surface(self, error: UpstreamError) -> None:
        """Show the processor's own message to the customer when it sent one."""
        if error.is_client_error and error.error_message:
            self.messages.add_error(error.error_message)
