"""Customer-initiated order cancellation."""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.errors import AccessDenied
from storefront.inventory.ledger import InventoryLedger
from storefront.ordering.order.order import Order

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class CancelOrder:
    order_id: Identifier(required=True)
    customer_id: Identifier(required=True)


@storefront.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        if not order.is_owned_by(command.customer_id):
            logger.warning(
                "Cancellation refused: not the order's owner",
                order_id=str(command.order_id),
                customer_id=str(command.customer_id),
            )
            raise AccessDenied("You can only cancel your own orders")

        order.cancel(cancelled_by="Customer")
        InventoryLedger().release(order)
        repo.add(order)
        logger.info("Order cancelled", order_id=str(order.id), order_number=order.order_number)
