"""Product aggregate root.

A product is never deleted: withdrawing it from sale flips its status to
Inactive, which keeps order history pointing at a real record. `stock` is
the only field the order workflow touches, and only through
`withdraw_stock` / `restore_stock`.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text

from storefront.catalogue.product.events import (
    LowStockDetected,
    ProductActivated,
    ProductCreated,
    ProductDeactivated,
    StockReplenished,
    StockRestored,
    StockWithdrawn,
)
from storefront.domain import storefront


class ProductStatus(Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


@storefront.aggregate
class Product:
    """A sellable catalogue item with its own stock counter."""

    name: String(required=True, max_length=255)
    slug: String(required=True, max_length=200, unique=True)
    description: Text()
    category_id: Identifier()
    price: Float(required=True, min_value=0.0)
    compare_price: Float(min_value=0.0)
    stock: Integer(default=0, min_value=0)
    low_stock_alert: Integer(default=5, min_value=0)
    is_featured: Boolean(default=False)
    status: String(choices=ProductStatus, default=ProductStatus.ACTIVE.value)
    created_at: DateTime(default=datetime.now)
    updated_at: DateTime(default=datetime.now)

    @invariant.post
    def compare_price_must_exceed_price(self):
        if self.compare_price is not None and self.compare_price <= self.price:
            raise ValidationError({"compare_price": ["Compare-at price must be higher than the price"]})

    @classmethod
    def create(
        cls,
        name,
        slug,
        price,
        stock=0,
        low_stock_alert=5,
        category_id=None,
        description=None,
        compare_price=None,
        is_featured=False,
    ):
        now = datetime.now(UTC)
        product = cls(
            name=name,
            slug=slug,
            price=price,
            stock=stock,
            low_stock_alert=low_stock_alert,
            category_id=category_id,
            description=description,
            compare_price=compare_price,
            is_featured=is_featured,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductCreated(
                product_id=product.id,
                name=name,
                slug=slug,
                price=price,
                stock=stock,
                created_at=now,
            )
        )
        return product

    @property
    def is_active(self) -> bool:
        return self.status == ProductStatus.ACTIVE.value

    @property
    def is_low_on_stock(self) -> bool:
        return self.stock <= self.low_stock_alert

    # -------------------------------------------------------------------
    # Stock movements
    # -------------------------------------------------------------------
    def withdraw_stock(self, quantity, order_id=None):
        """Take `quantity` units out of stock for an order."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        if quantity > self.stock:
            raise ValidationError({"stock": [f"Insufficient stock for {self.name}"]})

        previous = self.stock
        now = datetime.now(UTC)
        self.stock = previous - quantity
        self.updated_at = now

        self.raise_(
            StockWithdrawn(
                product_id=self.id,
                order_id=order_id,
                quantity=quantity,
                previous_stock=previous,
                new_stock=self.stock,
                withdrawn_at=now,
            )
        )
        if self.is_low_on_stock:
            self.raise_(
                LowStockDetected(
                    product_id=self.id,
                    name=self.name,
                    current_stock=self.stock,
                    low_stock_alert=self.low_stock_alert,
                    detected_at=now,
                )
            )

    def restore_stock(self, quantity, order_id=None):
        """Put back units that a cancelled or refunded order had taken."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        previous = self.stock
        now = datetime.now(UTC)
        self.stock = previous + quantity
        self.updated_at = now

        self.raise_(
            StockRestored(
                product_id=self.id,
                order_id=order_id,
                quantity=quantity,
                previous_stock=previous,
                new_stock=self.stock,
                restored_at=now,
            )
        )

    def replenish(self, quantity):
        """Receive new units (administrator restock)."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        previous = self.stock
        now = datetime.now(UTC)
        self.stock = previous + quantity
        self.updated_at = now

        self.raise_(
            StockReplenished(
                product_id=self.id,
                quantity=quantity,
                previous_stock=previous,
                new_stock=self.stock,
                replenished_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Availability
    # -------------------------------------------------------------------
    def deactivate(self):
        if not self.is_active:
            raise ValidationError({"status": ["Product is already inactive"]})

        now = datetime.now(UTC)
        self.status = ProductStatus.INACTIVE.value
        self.updated_at = now
        self.raise_(ProductDeactivated(product_id=self.id, deactivated_at=now))

    def activate(self):
        if self.is_active:
            raise ValidationError({"status": ["Product is already active"]})

        now = datetime.now(UTC)
        self.status = ProductStatus.ACTIVE.value
        self.updated_at = now
        self.raise_(ProductActivated(product_id=self.id, activated_at=now))
