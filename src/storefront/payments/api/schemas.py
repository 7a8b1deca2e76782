"""Pydantic request/response schemas for the PayPal API."""

from storefront.ordering.api.schemas import OrderResponse
from storefront.utils.schemas import CamelModel


class CreatePayPalOrderRequest(CamelModel):
    order_id: str


class CreatePayPalOrderResponse(CamelModel):
    paypal_order_id: str
    approval_url: str | None = None


class CapturePayPalOrderRequest(CamelModel):
    paypal_order_id: str


class CapturePayPalOrderResponse(CamelModel):
    success: bool
    order: OrderResponse


class ClientIdResponse(CamelModel):
    client_id: str | None = None


class ConfigureGatewayRequest(CamelModel):
    should_succeed: bool = True
    failure_reason: str = "Payment declined"


class GatewayConfigResponse(CamelModel):
    gateway: str
    should_succeed: bool
    failure_reason: str
