"""FastAPI endpoints for orders.

The authenticated user is resolved by the auth dependency and handed to each
command as `customer_id`; handlers never look it up themselves.
"""

import json

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.identity.api.auth import CurrentUser, get_current_user, require_admin
from storefront.ordering.api.schemas import OrderResponse, PlaceOrderRequest, UpdateStatusRequest
from storefront.ordering.order.cancellation import CancelOrder
from storefront.ordering.order.checkout import PlaceOrder
from storefront.ordering.order.order import Order
from storefront.ordering.order.queries import order_for
from storefront.ordering.order.status import UpdateOrderStatus
from storefront.utils.concurrency import process_with_retry

order_router = APIRouter(prefix="/orders", tags=["orders"])


def _order_response(order_id: str) -> OrderResponse:
    return OrderResponse.from_order(current_domain.repository_for(Order).get(order_id))


@order_router.post("", status_code=201, response_model=OrderResponse)
async def place_order(body: PlaceOrderRequest, user: CurrentUser = Depends(get_current_user)) -> OrderResponse:
    command = PlaceOrder(
        customer_id=user.id,
        address_id=body.address_id,
        items=json.dumps([{"product_id": line.product_id, "quantity": line.quantity} for line in body.items]),
        notes=body.notes,
    )
    order_id = process_with_retry(command)
    return _order_response(order_id)


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, user: CurrentUser = Depends(get_current_user)) -> OrderResponse:
    return OrderResponse.from_order(order_for(order_id, user.id, is_admin=user.is_admin))


@order_router.post("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(order_id: str, user: CurrentUser = Depends(get_current_user)) -> OrderResponse:
    process_with_retry(CancelOrder(order_id=order_id, customer_id=user.id))
    return _order_response(order_id)


@order_router.put("/{order_id}/status", response_model=OrderResponse, dependencies=[Depends(require_admin)])
async def update_order_status(order_id: str, body: UpdateStatusRequest) -> OrderResponse:
    process_with_retry(UpdateOrderStatus(order_id=order_id, status=body.status))
    return _order_response(order_id)
