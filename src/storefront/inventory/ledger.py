"""Inventory ledger: stock reservation and compensation for orders.

Stock lives on the Product aggregate. The ledger is the only place the order
workflow touches it: `reserve` takes units out when an order is placed and
`release` puts them back, once, when the order is cancelled or refunded.

All methods run inside the caller's unit of work, so a failure anywhere in
the enclosing command discards every stock change made through the ledger.
"""

import structlog
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from storefront.catalogue.product.product import Product

logger = structlog.get_logger(__name__)


class InventoryLedger:
    def __init__(self) -> None:
        self.products = current_domain.repository_for(Product)

    def available_products(self, product_ids) -> dict[str, Product]:
        """Load every product in `product_ids`, keyed by id.

        Raises a ValidationError naming the first product that is missing or
        withdrawn from sale.
        """
        products = {}
        for product_id in product_ids:
            try:
                product = self.products.get(product_id)
            except ObjectNotFoundError:
                product = None

            if product is None or not product.is_active:
                logger.info("Product unavailable for checkout", product_id=str(product_id))
                raise ValidationError({"items": [f"Product {product_id} is unavailable"]})
            products[str(product_id)] = product
        return products

    def ensure_in_stock(self, lines: dict[str, int], products: dict[str, Product]) -> None:
        for product_id, quantity in lines.items():
            product = products[product_id]
            if quantity > product.stock:
                logger.info(
                    "Insufficient stock for checkout",
                    product_id=product_id,
                    requested=quantity,
                    available=product.stock,
                )
                raise ValidationError({"items": [f"Insufficient stock for {product.name}"]})

    def reserve(self, order_id, lines: dict[str, int], products: dict[str, Product]) -> None:
        """Withdraw the ordered quantities from stock.

        Callers check availability first; `withdraw_stock` re-checks, so a
        product that changed underneath still cannot go negative.
        """
        for product_id, quantity in lines.items():
            product = products[product_id]
            product.withdraw_stock(quantity, order_id=order_id)
            self.products.add(product)
            logger.info(
                "Stock reserved",
                order_id=str(order_id),
                product_id=product_id,
                quantity=quantity,
                remaining=product.stock,
            )

    def release(self, order) -> bool:
        """Return an order's units to stock. Does nothing if they were already returned.

        Returns True when stock was restored by this call.
        """
        if order.stock_restored:
            logger.info("Stock already restored for order", order_id=str(order.id))
            return False

        for item in order.items:
            product = self.products.get(item.product_id)
            product.restore_stock(item.quantity, order_id=order.id)
            self.products.add(product)
            logger.info(
                "Stock restored",
                order_id=str(order.id),
                product_id=str(item.product_id),
                quantity=item.quantity,
                new_stock=product.stock,
            )

        order.mark_stock_restored()
        return True
