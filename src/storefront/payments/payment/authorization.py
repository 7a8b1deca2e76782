"""Payment authorization: register an order's payment with the gateway.

The order keeps its PENDING status; only the gateway's reference is stored,
so the later capture can find the order again.

The gateway is called once, outside any command. Only the bookkeeping that
follows (`RecordAuthorization`) runs as a command, so a version conflict
re-runs the bookkeeping and never the gateway call.
"""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.errors import AccessDenied, PaymentGatewayError
from storefront.ordering.order.order import Order, OrderStatus
from storefront.ordering.order.pricing import to_money
from storefront.payments.gateway import get_gateway
from storefront.payments.gateway.port import AuthorizationRequest, LineItem
from storefront.utils.concurrency import process_with_retry
from storefront.utils.settings import setting

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class RecordAuthorization:
    order_id: Identifier(required=True)
    payment_reference: String(required=True, max_length=255)


@storefront.command_handler(part_of=Order)
class RecordAuthorizationHandler:
    @handle(RecordAuthorization)
    def record_authorization(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        if order.payment_reference == command.payment_reference:
            return str(order.id)

        order.record_authorization(command.payment_reference)
        repo.add(order)
        return str(order.id)


def authorization_request_for(order) -> AuthorizationRequest:
    client_url = setting("CLIENT_URL").rstrip("/")
    return AuthorizationRequest(
        reference_id=str(order.id),
        description=f"{setting('BRAND_NAME')} order {order.order_number}",
        currency=order.currency,
        total=str(to_money(order.total)),
        item_total=str(to_money(order.subtotal)),
        shipping=str(to_money(order.shipping)),
        items=tuple(
            LineItem(name=item.name, quantity=item.quantity, unit_amount=str(to_money(item.unit_price)))
            for item in order.items
        ),
        return_url=f"{client_url}/checkout/success",
        cancel_url=f"{client_url}/checkout/cancel",
    )


def authorize_payment(order_id, customer_id) -> dict:
    """Create the gateway order for a PENDING order owned by `customer_id`.

    Returns the gateway's order id and the buyer's approval link.
    """
    order = current_domain.repository_for(Order).get(order_id)

    if not order.is_owned_by(customer_id):
        raise AccessDenied("You can only pay for your own orders")
    if order.current_status != OrderStatus.PENDING:
        raise ValidationError({"status": [f"Order is not awaiting payment (status {order.status})"]})

    result = get_gateway().authorize(authorization_request_for(order))
    if not result.success:
        logger.error(
            "Payment authorization failed",
            order_id=str(order.id),
            reason=result.failure_reason,
        )
        raise PaymentGatewayError(result.failure_reason or "Payment authorization failed", result.gateway_status)

    process_with_retry(RecordAuthorization(order_id=str(order.id), payment_reference=result.gateway_order_id))
    logger.info(
        "Payment authorized",
        order_id=str(order.id),
        payment_reference=result.gateway_order_id,
    )
    return {"paypal_order_id": result.gateway_order_id, "approval_url": result.approval_url}
