"""
Off-site payment gateway - shared types and abstract base.

Implementations: IDPayGateway (app.payments.idpay).

A gateway receives everything it needs through its constructor (HTTP
session, payment repository, message sink, configuration) and exposes two
calls:

    initiate(checkout)              -> RedirectTarget
    reconcile(order_id, callback)   -> Payment
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Protocol

from app.utils.enums import GatewayMode, RedirectMethod

if TYPE_CHECKING:
    from app.database.models.payment import Payment


@dataclass(frozen=True)
class Price:
    """Amount plus ISO-style currency code (TMN tolerated)."""
    number: Decimal
    currency_code: str


@dataclass(frozen=True)
class CheckoutContext:
    """What a gateway may know about the order being paid."""
    order_id: int
    total: Price
    return_url: str  # absolute, embeds the order's redirect key


@dataclass(frozen=True)
class RedirectTarget:
    """Where to send the customer's browser."""
    url: str
    method: str = RedirectMethod.POST
    data: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class PaymentGatewayConfiguration:
    gateway_id: str
    api_key: str
    mode: str = GatewayMode.TEST

    @property
    def sandbox(self) -> bool:
        return self.mode == GatewayMode.TEST


class MessageSink(Protocol):
    """User-facing message channel (flash messages on the checkout page)."""

    def add_error(self, message: str) -> None:
        ...

    def add_status(self, message: str) -> None:
        ...


class MessageBag:
    """In-memory MessageSink collected per request and returned to the client."""

    def __init__(self) -> None:
        self.errors: List[str] = []
        self.statuses: List[str] = []

    def add_error(self, message: str) -> None:
        self.errors.append(message)

    def add_status(self, message: str) -> None:
        self.statuses.append(message)

    def as_dict(self) -> Dict[str, List[str]]:
        return {"errors": list(self.errors), "statuses": list(self.statuses)}


class OffsitePaymentGateway(ABC):
    """Abstract off-site redirect gateway."""

    @abstractmethod
    def initiate(self, checkout: CheckoutContext) -> RedirectTarget:
        """Create the remote payment, persist it pending, return the redirect."""
        pass

    @abstractmethod
    def reconcile(self, order_id: int, callback: Any) -> "Payment":
        """Verify a returning customer's payment server-side and finalize it."""
        pass
