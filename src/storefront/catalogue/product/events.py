"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductCreated:
    """A product was added to the catalogue."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    slug: String(required=True)
    price: Float(required=True)
    stock: Integer(required=True)
    created_at: DateTime(required=True)


@storefront.event(part_of="Product")
class StockWithdrawn:
    """Units were taken out of stock for an order."""

    __version__ = 1

    product_id: Identifier(required=True)
    order_id: Identifier()
    quantity: Integer(required=True)
    previous_stock: Integer(required=True)
    new_stock: Integer(required=True)
    withdrawn_at: DateTime(required=True)


@storefront.event(part_of="Product")
class StockRestored:
    """Units reserved by a cancelled or refunded order went back into stock."""

    __version__ = 1

    product_id: Identifier(required=True)
    order_id: Identifier()
    quantity: Integer(required=True)
    previous_stock: Integer(required=True)
    new_stock: Integer(required=True)
    restored_at: DateTime(required=True)


@storefront.event(part_of="Product")
class StockReplenished:
    """An administrator received new units into stock."""

    __version__ = 1

    product_id: Identifier(required=True)
    quantity: Integer(required=True)
    previous_stock: Integer(required=True)
    new_stock: Integer(required=True)
    replenished_at: DateTime(required=True)


@storefront.event(part_of="Product")
class LowStockDetected:
    """Stock fell to or below the product's alert threshold."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    current_stock: Integer(required=True)
    low_stock_alert: Integer(required=True)
    detected_at: DateTime(required=True)


@storefront.event(part_of="Product")
class ProductDeactivated:
    """The product was withdrawn from sale (soft delete)."""

    __version__ = 1

    product_id: Identifier(required=True)
    deactivated_at: DateTime(required=True)


@storefront.event(part_of="Product")
class ProductActivated:
    """A previously withdrawn product is on sale again."""

    __version__ = 1

    product_id: Identifier(required=True)
    activated_at: DateTime(required=True)
