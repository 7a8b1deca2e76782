"""PayPal REST (Orders v2) payment gateway adapter.

Each operation exchanges the client credentials for a bearer token first.
The token is used for that one call only and is never stored.
"""

import os

import httpx
import structlog

from storefront.payments.gateway.port import (
    AuthorizationRequest,
    AuthorizationResult,
    CaptureResult,
    PaymentGateway,
)

logger = structlog.get_logger(__name__)

SANDBOX_URL = "https://api-m.sandbox.paypal.com"
LIVE_URL = "https://api-m.paypal.com"


class PayPalError(Exception):
    """A PayPal call failed at the HTTP or API level."""


def base_url_for(mode: str) -> str:
    return LIVE_URL if mode == "live" else SANDBOX_URL


def _error_message(response: httpx.Response, fallback: str) -> str:
    try:
        data = response.json()
    except ValueError:
        return f"{fallback} (HTTP {response.status_code})"
    if not isinstance(data, dict):
        return f"{fallback} (HTTP {response.status_code})"
    details = data.get("details") or []
    if details and details[0].get("description"):
        return details[0]["description"]
    return data.get("message") or data.get("error_description") or f"{fallback} (HTTP {response.status_code})"


class PayPalGateway(PaymentGateway):
    def __init__(
        self,
        client_id: str,
        client_secret: str,
        base_url: str = SANDBOX_URL,
        brand_name: str = "SoundAndSafe",
        locale: str = "fr-FR",
        timeout: float = 15.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.base_url = base_url
        self.brand_name = brand_name
        self.locale = locale
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_environment(cls) -> "PayPalGateway":
        from storefront.utils.settings import setting

        return cls(
            client_id=os.environ.get("PAYPAL_CLIENT_ID", ""),
            client_secret=os.environ.get("PAYPAL_CLIENT_SECRET", ""),
            base_url=base_url_for(os.environ.get("PAYPAL_MODE", "sandbox")),
            brand_name=setting("BRAND_NAME"),
        )

    def _client(self) -> httpx.Client:
        return httpx.Client(base_url=self.base_url, timeout=self.timeout, transport=self.transport)

    def _access_token(self, client: httpx.Client) -> str:
        response = client.post(
            "/v1/oauth2/token",
            auth=(self.client_id, self.client_secret),
            data={"grant_type": "client_credentials"},
        )
        if response.status_code != 200:
            raise PayPalError(_error_message(response, "PayPal authentication failed"))
        try:
            return response.json()["access_token"]
        except (ValueError, KeyError, TypeError) as exc:
            raise PayPalError("PayPal returned a malformed token response") from exc

    def order_payload(self, request: AuthorizationRequest) -> dict:
        """The Orders v2 body for `request`: intent CAPTURE, one purchase unit."""
        currency = request.currency
        payload = {
            "intent": "CAPTURE",
            "purchase_units": [
                {
                    "reference_id": request.reference_id,
                    "description": request.description,
                    "amount": {
                        "currency_code": currency,
                        "value": request.total,
                        "breakdown": {
                            "item_total": {"currency_code": currency, "value": request.item_total},
                            "shipping": {"currency_code": currency, "value": request.shipping},
                        },
                    },
                    "items": [
                        {
                            "name": item.name,
                            "quantity": str(item.quantity),
                            "unit_amount": {"currency_code": currency, "value": item.unit_amount},
                        }
                        for item in request.items
                    ],
                }
            ],
            "application_context": {
                "brand_name": self.brand_name,
                "locale": self.locale,
                "shipping_preference": "NO_SHIPPING",
                "user_action": "PAY_NOW",
            },
        }
        if request.return_url:
            payload["application_context"]["return_url"] = request.return_url
        if request.cancel_url:
            payload["application_context"]["cancel_url"] = request.cancel_url
        return payload

    def authorize(self, request: AuthorizationRequest) -> AuthorizationResult:
        try:
            with self._client() as client:
                token = self._access_token(client)
                response = client.post(
                    "/v2/checkout/orders",
                    json=self.order_payload(request),
                    headers={"Authorization": f"Bearer {token}"},
                )
        except PayPalError as exc:
            logger.error("PayPal authentication failed", reference_id=request.reference_id, error=str(exc))
            return AuthorizationResult(success=False, gateway_status="FAILED", failure_reason=str(exc))
        except httpx.HTTPError as exc:
            logger.error("PayPal unreachable", reference_id=request.reference_id, error=str(exc))
            return AuthorizationResult(success=False, gateway_status="FAILED", failure_reason="PayPal is unreachable")

        if response.status_code not in (200, 201):
            reason = _error_message(response, "PayPal order creation failed")
            logger.error(
                "PayPal order creation failed",
                reference_id=request.reference_id,
                status_code=response.status_code,
                reason=reason,
            )
            return AuthorizationResult(success=False, gateway_status="FAILED", failure_reason=reason)

        try:
            data = response.json()
            gateway_order_id = data["id"]
            links = data.get("links") or []
        except (ValueError, KeyError, TypeError, AttributeError):
            logger.error("PayPal order response malformed", reference_id=request.reference_id)
            return AuthorizationResult(
                success=False, gateway_status="FAILED", failure_reason="PayPal returned a malformed order response"
            )

        approval_url = next(
            (link.get("href") for link in links if link.get("rel") in ("approve", "payer-action")),
            None,
        )
        logger.info("PayPal order created", reference_id=request.reference_id, paypal_order_id=gateway_order_id)
        return AuthorizationResult(
            success=True,
            gateway_order_id=gateway_order_id,
            approval_url=approval_url,
            gateway_status=data.get("status"),
        )

    def capture(self, gateway_order_id: str) -> CaptureResult:
        try:
            with self._client() as client:
                token = self._access_token(client)
                response = client.post(
                    f"/v2/checkout/orders/{gateway_order_id}/capture",
                    headers={"Authorization": f"Bearer {token}", "Content-Type": "application/json"},
                )
        except PayPalError as exc:
            logger.error("PayPal authentication failed", paypal_order_id=gateway_order_id, error=str(exc))
            return CaptureResult(success=False, gateway_order_id=gateway_order_id, failure_reason=str(exc))
        except httpx.HTTPError as exc:
            logger.error("PayPal unreachable", paypal_order_id=gateway_order_id, error=str(exc))
            return CaptureResult(
                success=False, gateway_order_id=gateway_order_id, failure_reason="PayPal is unreachable"
            )

        if response.status_code not in (200, 201):
            reason = _error_message(response, "PayPal capture failed")
            logger.error(
                "PayPal capture failed",
                paypal_order_id=gateway_order_id,
                status_code=response.status_code,
                reason=reason,
            )
            return CaptureResult(success=False, gateway_order_id=gateway_order_id, failure_reason=reason)

        try:
            status = response.json().get("status")
        except (ValueError, AttributeError):
            logger.error("PayPal capture response malformed", paypal_order_id=gateway_order_id)
            return CaptureResult(
                success=False,
                gateway_order_id=gateway_order_id,
                failure_reason="PayPal returned a malformed capture response",
            )
        if status != "COMPLETED":
            logger.warning("PayPal capture not completed", paypal_order_id=gateway_order_id, status=status)
            return CaptureResult(
                success=False,
                gateway_order_id=gateway_order_id,
                gateway_status=status,
                failure_reason=f"Payment capture not completed (status {status})",
            )

        logger.info("PayPal capture completed", paypal_order_id=gateway_order_id)
        return CaptureResult(success=True, gateway_order_id=gateway_order_id, gateway_status=status)
