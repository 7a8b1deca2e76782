"""Checkout: turn a cart and a chosen address into a PENDING order.

The handler validates everything before it writes anything:

1. the cart is not empty and every quantity is at least 1
2. the address belongs to the customer
3. every product exists and is on sale
4. every product has enough stock

Only then does it create the order and withdraw stock. Both happen in the
handler's unit of work, so they commit together or not at all.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.customer.customer import Customer
from storefront.inventory.ledger import InventoryLedger
from storefront.ordering.order.numbering import generate_order_number
from storefront.ordering.order.order import Order
from storefront.ordering.order.pricing import price_cart
from storefront.utils.settings import setting

logger = structlog.get_logger(__name__)

MAX_NUMBER_ATTEMPTS = 5


@storefront.command(part_of="Order")
class PlaceOrder:
    customer_id: Identifier(required=True)
    address_id: Identifier(required=True)
    items: Text(required=True)  # JSON: [{"product_id": ..., "quantity": ...}]
    notes: Text()


def parse_cart(raw_items) -> dict[str, int]:
    """Cart lines as {product_id: quantity}, merging repeated products in first-seen order."""
    lines = json.loads(raw_items) if isinstance(raw_items, str) else list(raw_items or [])
    if not lines:
        raise ValidationError({"items": ["Cart is empty"]})

    merged: dict[str, int] = {}
    for line in lines:
        product_id = str(line.get("product_id") or "")
        quantity = line.get("quantity")
        if not product_id:
            raise ValidationError({"items": ["Every cart line needs a product"]})
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
            raise ValidationError({"items": ["Quantity must be at least 1"]})
        merged[product_id] = merged.get(product_id, 0) + quantity
    return merged


@storefront.command_handler(part_of=Order)
class CheckoutHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        lines = parse_cart(command.items)

        customer = current_domain.repository_for(Customer).get(command.customer_id)
        address = customer.address(command.address_id)
        if address is None:
            logger.info(
                "Checkout rejected: address not in customer's book",
                customer_id=str(command.customer_id),
                address_id=str(command.address_id),
            )
            raise ValidationError({"address_id": ["Invalid address"]})

        ledger = InventoryLedger()
        products = ledger.available_products(lines.keys())
        ledger.ensure_in_stock(lines, products)

        # Prices are read once, here, and frozen into the items
        items_data = [
            {
                "product_id": product_id,
                "name": products[product_id].name,
                "quantity": quantity,
                "unit_price": products[product_id].price,
            }
            for product_id, quantity in lines.items()
        ]
        pricing = price_cart((item["unit_price"], item["quantity"]) for item in items_data)

        order = Order.place(
            order_number=self._unused_order_number(),
            customer_id=command.customer_id,
            address_id=command.address_id,
            shipping_address={
                "first_name": address.first_name,
                "last_name": address.last_name,
                "street": address.street,
                "city": address.city,
                "postal_code": address.postal_code,
                "country": address.country,
                "phone": address.phone,
            },
            items_data=items_data,
            pricing=pricing,
            currency=setting("CURRENCY"),
            notes=command.notes,
        )
        current_domain.repository_for(Order).add(order)
        ledger.reserve(order.id, lines, products)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            order_number=order.order_number,
            customer_id=str(command.customer_id),
            total=order.total,
        )
        return str(order.id)

    def _unused_order_number(self) -> str:
        dao = current_domain.repository_for(Order)._dao
        for _ in range(MAX_NUMBER_ATTEMPTS):
            number = generate_order_number()
            if not dao.query.filter(order_number=number).all().items:
                return number
            logger.warning("Order number collision, regenerating", order_number=number)
        raise ValidationError({"order_number": ["Could not allocate a unique order number"]})
