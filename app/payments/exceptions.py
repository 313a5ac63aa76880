"""
Payment gateway errors.

Every failure of initiation or reconciliation is raised to the caller; the
gateways never retry. The API layer maps each class to an HTTP status in
app.core.exceptions.
"""

from typing import Optional


class PaymentGatewayError(Exception):
    """Base class for gateway integration failures."""


class PaymentValidationError(PaymentGatewayError):
    """Caller-supplied data failed a structural check."""


class SecurityError(PaymentValidationError):
    """Callback data failed a trust check (forged or cross-order callback)."""


class PaymentNotFoundError(PaymentGatewayError):
    """No pending payment matches the callback."""

    def __init__(self, remote_id: Optional[str], order_id: Optional[int]):
        self.remote_id = remote_id
        self.order_id = order_id
        super().__init__(
            f"Cannot find any payment with remote id: {remote_id} and order id: {order_id}"
            " in authorization state."
        )


class PaymentIntegrityError(PaymentGatewayError):
    """More than one pending payment matches a single processor transaction."""

    def __init__(self, remote_id: str, order_id: int, count: int):
        self.remote_id = remote_id
        self.order_id = order_id
        self.count = count
        super().__init__(
            f"{count} payments in authorization state share remote id: {remote_id}"
            f" and order id: {order_id}"
        )


class InvalidStateTransition(PaymentGatewayError):
    """A payment was asked to leave a terminal state."""


class UpstreamError(PaymentGatewayError):
    """
    The processor API failed or answered with an unusable body.

    http_code is None for transport failures (DNS, connection reset, timeout).
    error_code / error_message are only set when a 4xx carried the
    processor's structured error body.
    """

    def __init__(
        self,
        message: str,
        http_code: Optional[int] = None,
        error_code: Optional[int] = None,
        error_message: Optional[str] = None,
        url: Optional[str] = None,
    ):
        self.http_code = http_code
        self.error_code = error_code
        self.error_message = error_message
        self.url = url
        super().__init__(message)

    @property
    def is_client_error(self) -> bool:
        return self.http_code is not None and 400 <= self.http_code < 500

    @property
    def is_server_error(self) -> bool:
        return self.http_code is not None and self.http_code >= 500


class PaymentFailed(PaymentGatewayError):
    """The processor reported a non-success status for the transaction."""

    def __init__(self, status_code: int):
        self.status_code = status_code
        super().__init__(f"Payment failed with status code: {status_code}")
