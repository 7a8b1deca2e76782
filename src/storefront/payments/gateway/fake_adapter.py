"""Configurable fake payment gateway for development and testing.

No external calls are made. Behavior can be switched at runtime to succeed
or fail, either from tests or through /paypal/gateway/configure.
"""

from uuid import uuid4

from storefront.payments.gateway.port import (
    AuthorizationRequest,
    AuthorizationResult,
    CaptureResult,
    PaymentGateway,
)


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Payment declined"
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Payment declined") -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def authorize(self, request: AuthorizationRequest) -> AuthorizationResult:
        self.calls.append({"method": "authorize", "request": request})

        if self.should_succeed:
            gateway_order_id = f"FAKE-{uuid4().hex[:12].upper()}"
            return AuthorizationResult(
                success=True,
                gateway_order_id=gateway_order_id,
                approval_url=f"https://fake-gateway.local/checkoutnow?token={gateway_order_id}",
                gateway_status="CREATED",
            )
        return AuthorizationResult(success=False, gateway_status="FAILED", failure_reason=self.failure_reason)

    def capture(self, gateway_order_id: str) -> CaptureResult:
        self.calls.append({"method": "capture", "gateway_order_id": gateway_order_id})

        if self.should_succeed:
            return CaptureResult(success=True, gateway_order_id=gateway_order_id, gateway_status="COMPLETED")
        return CaptureResult(
            success=False,
            gateway_order_id=gateway_order_id,
            gateway_status="DECLINED",
            failure_reason=self.failure_reason,
        )
