"""Payment gateway port (abstract interface).

Defines the contract every payment gateway adapter implements, so that
PayPalGateway (production) and FakeGateway (dev/test) can be swapped without
changing any domain or application code.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class LineItem:
    name: str
    quantity: int
    unit_amount: str  # Decimal string, e.g. "10.00"


@dataclass(frozen=True)
class AuthorizationRequest:
    """What the gateway needs to know to ask the buyer for a payment."""

    reference_id: str
    description: str
    currency: str
    total: str
    item_total: str
    shipping: str
    items: tuple[LineItem, ...] = field(default_factory=tuple)
    return_url: str | None = None
    cancel_url: str | None = None


@dataclass(frozen=True)
class AuthorizationResult:
    success: bool
    gateway_order_id: str | None = None
    approval_url: str | None = None
    gateway_status: str | None = None
    failure_reason: str | None = None


@dataclass(frozen=True)
class CaptureResult:
    success: bool
    gateway_order_id: str | None = None
    gateway_status: str | None = None
    failure_reason: str | None = None


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def authorize(self, request: AuthorizationRequest) -> AuthorizationResult:
        """Register a payment with the gateway and obtain the buyer's approval link."""
        ...

    @abstractmethod
    def capture(self, gateway_order_id: str) -> CaptureResult:
        """Finalize a payment the buyer has approved."""
        ...
