"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """A cart was turned into a PENDING order and its stock reserved."""

    __version__ = 1

    order_id: Identifier(required=True)
    order_number: String(required=True)
    customer_id: Identifier(required=True)
    items: Text(required=True)  # JSON: [{product_id, name, quantity, unit_price}]
    item_count: Integer(required=True)
    subtotal: Float(required=True)
    shipping: Float(required=True)
    total: Float(required=True)
    currency: String(required=True)
    placed_at: DateTime(required=True)


@storefront.event(part_of="Order")
class PaymentAuthorized:
    __version__ = 1

    order_id: Identifier(required=True)
    payment_reference: String(required=True)
    amount: Float(required=True)
    authorized_at: DateTime(required=True)


@storefront.event(part_of="Order")
class OrderPaid:
    __version__ = 1

    order_id: Identifier(required=True)
    payment_reference: String(required=True)
    amount: Float(required=True)
    paid_at: DateTime(required=True)


@storefront.event(part_of="Order")
class OrderCancelled:
    __version__ = 1

    order_id: Identifier(required=True)
    previous_status: String(required=True)
    cancelled_by: String(required=True)
    cancelled_at: DateTime(required=True)


@storefront.event(part_of="Order")
class OrderStatusChanged:
    """Raised for every administrator-driven status change."""

    __version__ = 1

    order_id: Identifier(required=True)
    previous_status: String(required=True)
    new_status: String(required=True)
    changed_at: DateTime(required=True)


@storefront.event(part_of="Order")
class OrderStockRestored:
    __version__ = 1

    order_id: Identifier(required=True)
    status: String(required=True)
    restored_at: DateTime(required=True)
