"""PayPal adapter tests over httpx.MockTransport, without network access."""

import json

import httpx
import pytest

from storefront.payments.gateway.paypal_adapter import LIVE_URL, SANDBOX_URL, PayPalGateway, base_url_for
from storefront.payments.gateway.port import AuthorizationRequest, LineItem

pytestmark = pytest.mark.fast


def _request():
    return AuthorizationRequest(
        reference_id="ord-1",
        description="SoundAndSafe order SAS-1",
        currency="EUR",
        total="35.99",
        item_total="30.00",
        shipping="5.99",
        items=(LineItem(name="Ear defenders", quantity=3, unit_amount="10.00"),),
        return_url="http://localhost:5173/checkout/success",
        cancel_url="http://localhost:5173/checkout/cancel",
    )


class FakePayPal:
    """Records requests and answers like the PayPal REST API."""

    def __init__(self, order_status=201, capture_status="COMPLETED", token_status=200, order_body=None):
        self.requests: list[httpx.Request] = []
        self.order_status = order_status
        self.capture_status = capture_status
        self.token_status = token_status
        self.order_body = order_body

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/v1/oauth2/token":
            if self.token_status != 200:
                return httpx.Response(self.token_status, json={"error_description": "Client Authentication failed"})
            return httpx.Response(200, json={"access_token": "A21AA-token", "expires_in": 32400})

        if path == "/v2/checkout/orders":
            body = self.order_body or {
                "id": "5O190127TN364715T",
                "status": "CREATED",
                "links": [
                    {"href": "https://api-m.sandbox.paypal.com/v2/checkout/orders/5O19", "rel": "self"},
                    {"href": "https://www.sandbox.paypal.com/checkoutnow?token=5O19", "rel": "approve"},
                ],
            }
            return httpx.Response(self.order_status, json=body)

        if path.endswith("/capture"):
            return httpx.Response(201, json={"id": "5O190127TN364715T", "status": self.capture_status})

        return httpx.Response(404, json={"message": "Not found"})


def _gateway(paypal):
    return PayPalGateway(
        client_id="client-id",
        client_secret="secret",
        base_url=SANDBOX_URL,
        transport=httpx.MockTransport(paypal),
    )


class TestBaseUrl:
    def test_modes(self):
        assert base_url_for("live") == LIVE_URL
        assert base_url_for("sandbox") == SANDBOX_URL


class TestAuthorize:
    def test_creates_order_and_returns_approval_link(self):
        paypal = FakePayPal()
        result = _gateway(paypal).authorize(_request())

        assert result.success is True
        assert result.gateway_order_id == "5O190127TN364715T"
        assert result.approval_url == "https://www.sandbox.paypal.com/checkoutnow?token=5O19"

    def test_token_exchange_uses_client_credentials(self):
        paypal = FakePayPal()
        _gateway(paypal).authorize(_request())

        token_request = paypal.requests[0]
        assert token_request.url.path == "/v1/oauth2/token"
        assert token_request.headers["authorization"].startswith("Basic ")
        assert token_request.content == b"grant_type=client_credentials"

        order_request = paypal.requests[1]
        assert order_request.headers["authorization"] == "Bearer A21AA-token"

    def test_payload_breaks_down_amount(self):
        paypal = FakePayPal()
        _gateway(paypal).authorize(_request())

        payload = json.loads(paypal.requests[1].content)
        assert payload["intent"] == "CAPTURE"
        unit = payload["purchase_units"][0]
        assert unit["reference_id"] == "ord-1"
        assert unit["amount"] == {
            "currency_code": "EUR",
            "value": "35.99",
            "breakdown": {
                "item_total": {"currency_code": "EUR", "value": "30.00"},
                "shipping": {"currency_code": "EUR", "value": "5.99"},
            },
        }
        assert unit["items"] == [
            {"name": "Ear defenders", "quantity": "3", "unit_amount": {"currency_code": "EUR", "value": "10.00"}}
        ]
        context = payload["application_context"]
        assert context["shipping_preference"] == "NO_SHIPPING"
        assert context["user_action"] == "PAY_NOW"
        assert context["return_url"] == "http://localhost:5173/checkout/success"

    def test_payer_action_link_is_accepted(self):
        paypal = FakePayPal(
            order_body={
                "id": "ORDER-2",
                "status": "PAYER_ACTION_REQUIRED",
                "links": [{"href": "https://paypal.test/pay", "rel": "payer-action"}],
            }
        )
        assert _gateway(paypal).authorize(_request()).approval_url == "https://paypal.test/pay"

    def test_api_error_is_reported(self):
        paypal = FakePayPal(
            order_status=422,
            order_body={
                "name": "UNPROCESSABLE_ENTITY",
                "message": "The requested action could not be performed.",
                "details": [{"issue": "AMOUNT_MISMATCH", "description": "Should equal item_total + shipping."}],
            },
        )
        result = _gateway(paypal).authorize(_request())
        assert result.success is False
        assert result.failure_reason == "Should equal item_total + shipping."

    def test_authentication_failure(self):
        result = _gateway(FakePayPal(token_status=401)).authorize(_request())
        assert result.success is False
        assert result.failure_reason == "Client Authentication failed"

    def test_network_failure(self):
        def unreachable(request):
            raise httpx.ConnectError("connection refused", request=request)

        gateway = PayPalGateway("id", "secret", transport=httpx.MockTransport(unreachable))
        result = gateway.authorize(_request())
        assert result.success is False
        assert result.failure_reason == "PayPal is unreachable"


class TestCapture:
    def test_completed(self):
        paypal = FakePayPal()
        result = _gateway(paypal).capture("5O190127TN364715T")
        assert result.success is True
        assert paypal.requests[1].url.path == "/v2/checkout/orders/5O190127TN364715T/capture"

    def test_not_completed(self):
        result = _gateway(FakePayPal(capture_status="PENDING")).capture("5O19")
        assert result.success is False
        assert result.gateway_status == "PENDING"
        assert result.failure_reason == "Payment capture not completed (status PENDING)"


def _answering(token=None, order=None, capture=None):
    """A transport that returns the given raw 200 bodies."""

    def respond(request):
        path = request.url.path
        if path == "/v1/oauth2/token":
            body = token if token is not None else b'{"access_token": "A21AA-token"}'
        elif path == "/v2/checkout/orders":
            body = order if order is not None else b'{"id": "ORDER-3", "links": []}'
        else:
            body = capture if capture is not None else b'{"status": "COMPLETED"}'
        return httpx.Response(200, content=body, headers={"Content-Type": "application/json"})

    return PayPalGateway("id", "secret", transport=httpx.MockTransport(respond))


class TestMalformedResponses:
    def test_token_without_access_token(self):
        result = _answering(token=b'{"scope": "openid"}').authorize(_request())
        assert result.success is False
        assert result.failure_reason == "PayPal returned a malformed token response"

    def test_token_that_is_not_json(self):
        result = _answering(token=b"<html>maintenance</html>").capture("ORDER-3")
        assert result.success is False
        assert result.failure_reason == "PayPal returned a malformed token response"

    def test_order_without_id(self):
        result = _answering(order=b'{"status": "CREATED"}').authorize(_request())
        assert result.success is False
        assert result.failure_reason == "PayPal returned a malformed order response"

    def test_order_that_is_not_json(self):
        result = _answering(order=b"not json").authorize(_request())
        assert result.success is False
        assert result.failure_reason == "PayPal returned a malformed order response"

    def test_capture_that_is_not_json(self):
        result = _answering(capture=b"not json").capture("ORDER-3")
        assert result.success is False
        assert result.failure_reason == "PayPal returned a malformed capture response"
