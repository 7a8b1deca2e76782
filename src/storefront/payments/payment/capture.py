"""Payment capture: confirm an approved payment and mark the order PAID.

The gateway is the source of truth for the money. Locally the only edge is
PENDING → PAID, so capturing an order that is already PAID answers with a
confirmation and never calls the gateway a second time.

`capture_payment` calls the gateway exactly once. Marking the order PAID is
the `MarkOrderPaid` command, which may be re-run after a version conflict
and is a no-op on an order that is already PAID.
"""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.errors import AccessDenied, PaymentGatewayError
from storefront.ordering.order.order import Order, OrderStatus
from storefront.ordering.order.queries import order_by_payment_reference
from storefront.payments.gateway import get_gateway
from storefront.utils.concurrency import process_with_retry

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class MarkOrderPaid:
    order_id: Identifier(required=True)


@storefront.command_handler(part_of=Order)
class MarkOrderPaidHandler:
    @handle(MarkOrderPaid)
    def mark_order_paid(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        if order.current_status == OrderStatus.PAID:
            return str(order.id)

        order.mark_paid()
        repo.add(order)
        logger.info("Payment captured", order_id=str(order.id), order_number=order.order_number)
        return str(order.id)


def capture_payment(payment_reference, customer_id) -> str:
    """Capture the approved payment behind `payment_reference` and return the order id."""
    order = order_by_payment_reference(payment_reference)

    if not order.is_owned_by(customer_id):
        raise AccessDenied("You can only pay for your own orders")

    if order.current_status == OrderStatus.PAID:
        logger.info("Payment already captured", order_id=str(order.id))
        return str(order.id)
    if order.current_status != OrderStatus.PENDING:
        raise ValidationError({"status": [f"Cannot capture payment for order in {order.status} state"]})

    result = get_gateway().capture(payment_reference)
    if not result.success:
        logger.error(
            "Payment capture failed",
            order_id=str(order.id),
            gateway_status=result.gateway_status,
            reason=result.failure_reason,
        )
        raise PaymentGatewayError(result.failure_reason or "Payment capture failed", result.gateway_status)

    try:
        return process_with_retry(MarkOrderPaid(order_id=str(order.id)))
    except ValidationError:
        # The money has moved; the order left PENDING while the gateway was working
        logger.error(
            "Captured payment for an order that is no longer pending",
            order_id=str(order.id),
            payment_reference=payment_reference,
        )
        raise
