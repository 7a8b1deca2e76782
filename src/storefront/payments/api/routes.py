"""FastAPI routes for PayPal checkout."""

import os

from fastapi import APIRouter, Depends, HTTPException
from protean.utils.globals import current_domain

from storefront.identity.api.auth import CurrentUser, get_current_user
from storefront.ordering.api.schemas import OrderResponse
from storefront.ordering.order.order import Order
from storefront.payments.api.schemas import (
    CapturePayPalOrderRequest,
    CapturePayPalOrderResponse,
    ClientIdResponse,
    ConfigureGatewayRequest,
    CreatePayPalOrderRequest,
    CreatePayPalOrderResponse,
    GatewayConfigResponse,
)
from storefront.payments.gateway import get_gateway
from storefront.payments.gateway.fake_adapter import FakeGateway
from storefront.payments.payment.authorization import authorize_payment
from storefront.payments.payment.capture import capture_payment

paypal_router = APIRouter(prefix="/paypal", tags=["payments"])


@paypal_router.post("/create-order", response_model=CreatePayPalOrderResponse)
async def create_paypal_order(
    body: CreatePayPalOrderRequest, user: CurrentUser = Depends(get_current_user)
) -> CreatePayPalOrderResponse:
    """Register the order's payment with PayPal and return the buyer's approval link."""
    result = authorize_payment(body.order_id, user.id)
    return CreatePayPalOrderResponse(paypal_order_id=result["paypal_order_id"], approval_url=result["approval_url"])


@paypal_router.post("/capture-order", response_model=CapturePayPalOrderResponse)
async def capture_paypal_order(
    body: CapturePayPalOrderRequest, user: CurrentUser = Depends(get_current_user)
) -> CapturePayPalOrderResponse:
    """Capture an approved payment; the order becomes PAID."""
    order_id = capture_payment(body.paypal_order_id, user.id)
    order = current_domain.repository_for(Order).get(order_id)
    return CapturePayPalOrderResponse(success=True, order=OrderResponse.from_order(order))


@paypal_router.get("/client-id", response_model=ClientIdResponse)
async def get_client_id() -> ClientIdResponse:
    return ClientIdResponse(client_id=os.environ.get("PAYPAL_CLIENT_ID"))


@paypal_router.post("/gateway/configure", response_model=GatewayConfigResponse)
async def configure_gateway(body: ConfigureGatewayRequest) -> GatewayConfigResponse:
    """Configure the FakeGateway behavior (non-production only).

    This endpoint is only available when PROTEAN_ENV is not 'production'.
    It allows toggling success/failure behavior for manual API testing.
    """
    if os.environ.get("PROTEAN_ENV") == "production":
        raise HTTPException(status_code=403, detail="Gateway configuration not available in production")

    gateway = get_gateway()
    if not isinstance(gateway, FakeGateway):
        raise HTTPException(status_code=400, detail="Gateway configuration only available for FakeGateway")

    gateway.configure(should_succeed=body.should_succeed, failure_reason=body.failure_reason)
    return GatewayConfigResponse(
        gateway=type(gateway).__name__,
        should_succeed=gateway.should_succeed,
        failure_reason=gateway.failure_reason,
    )
