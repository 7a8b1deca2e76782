"""Order aggregate, the core of the ordering workflow.

State Machine:
    PENDING → PAID → PROCESSING → SHIPPED → DELIVERED
    PENDING, PAID → CANCELLED (customer)
    any state → any state (administrator)

CANCELLED, DELIVERED and REFUNDED are terminal for customers only. Entering
CANCELLED or REFUNDED hands the order's units back to stock; `stock_restored`
records that this happened so it can never happen twice.

Items and amounts are fixed when the order is placed.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from storefront.domain import storefront
from storefront.ordering.order.events import (
    OrderCancelled,
    OrderPaid,
    OrderPlaced,
    OrderStatusChanged,
    OrderStockRestored,
    PaymentAuthorized,
)
from storefront.ordering.order.pricing import to_money


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"
    REFUNDED = "REFUNDED"


_TERMINAL_STATES = {OrderStatus.CANCELLED, OrderStatus.DELIVERED, OrderStatus.REFUNDED}

# States from which a customer may cancel
_CANCELLABLE_STATES = {OrderStatus.PENDING, OrderStatus.PAID}

# Entering one of these returns the order's units to stock
_COMPENSATING_STATES = {OrderStatus.CANCELLED, OrderStatus.REFUNDED}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class ShippingAddress:
    """The delivery address as it was at checkout.

    Copied from the customer's address book so that later edits to the book
    never change where a past order went.
    """

    first_name: String(required=True, max_length=100)
    last_name: String(required=True, max_length=100)
    street: String(required=True, max_length=255)
    city: String(required=True, max_length=100)
    postal_code: String(required=True, max_length=20)
    country: String(required=True, max_length=100)
    phone: String(max_length=30)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderItem:
    """A product snapshot: name and unit price as they were when ordered."""

    product_id: Identifier(required=True)
    name: String(required=True, max_length=255)
    quantity: Integer(required=True, min_value=1)
    unit_price: Float(required=True, min_value=0.0)

    @property
    def line_total(self):
        return to_money(self.unit_price) * self.quantity


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    order_number: String(required=True, max_length=50, unique=True)
    customer_id: Identifier(required=True)
    address_id: Identifier(required=True)
    shipping_address: ValueObject(ShippingAddress)
    items: HasMany(OrderItem)
    subtotal: Float(required=True, min_value=0.0)
    shipping: Float(required=True, min_value=0.0)
    total: Float(required=True, min_value=0.0)
    currency: String(max_length=3, default="EUR")
    status: String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_reference: String(max_length=255)
    stock_restored: Boolean(default=False)
    notes: Text()
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def total_is_subtotal_plus_shipping(self):
        if to_money(self.total) != to_money(self.subtotal) + to_money(self.shipping):
            raise ValidationError({"total": ["Total must equal subtotal plus shipping"]})

    @invariant.post
    def subtotal_matches_items(self):
        if not self.items:
            return
        if sum(item.line_total for item in self.items) != to_money(self.subtotal):
            raise ValidationError({"subtotal": ["Subtotal must equal the sum of the items"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        order_number,
        customer_id,
        address_id,
        shipping_address,
        items_data,
        pricing,
        currency,
        notes=None,
    ):
        """Create a PENDING order from checkout data.

        Args:
            shipping_address: Dict of ShippingAddress fields.
            items_data: List of dicts with product_id, name, quantity, unit_price.
            pricing: A CartPricing for the same items.
        """
        if not items_data:
            raise ValidationError({"items": ["Cart is empty"]})

        now = datetime.now(UTC)
        order = cls(
            order_number=order_number,
            customer_id=customer_id,
            address_id=address_id,
            shipping_address=ShippingAddress(**shipping_address),
            items=[OrderItem(**item) for item in items_data],
            subtotal=float(pricing.subtotal),
            shipping=float(pricing.shipping),
            total=float(pricing.total),
            currency=currency,
            status=OrderStatus.PENDING.value,
            notes=notes,
            created_at=now,
            updated_at=now,
        )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order_number,
                customer_id=str(customer_id),
                items=json.dumps(items_data),
                item_count=sum(item["quantity"] for item in items_data),
                subtotal=order.subtotal,
                shipping=order.shipping,
                total=order.total,
                currency=currency,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def current_status(self) -> OrderStatus:
        return OrderStatus(self.status)

    @property
    def is_terminal(self) -> bool:
        return self.current_status in _TERMINAL_STATES

    @property
    def awaits_stock_restoration(self) -> bool:
        return self.current_status in _COMPENSATING_STATES and not self.stock_restored

    def is_owned_by(self, customer_id) -> bool:
        return str(self.customer_id) == str(customer_id)

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    def _assert_pending(self, action):
        if self.current_status != OrderStatus.PENDING:
            raise ValidationError({"status": [f"Cannot {action} order in {self.status} state"]})

    def record_authorization(self, payment_reference):
        """Remember the gateway's reference for this order. The status does not change."""
        self._assert_pending("pay for")

        now = datetime.now(UTC)
        self.payment_reference = payment_reference
        self.updated_at = now
        self.raise_(
            PaymentAuthorized(
                order_id=str(self.id),
                payment_reference=payment_reference,
                amount=self.total,
                authorized_at=now,
            )
        )

    def mark_paid(self):
        self._assert_pending("capture payment for")

        now = datetime.now(UTC)
        self.status = OrderStatus.PAID.value
        self.updated_at = now
        self.raise_(
            OrderPaid(
                order_id=str(self.id),
                payment_reference=self.payment_reference,
                amount=self.total,
                paid_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Cancellation and administrative transitions
    # -------------------------------------------------------------------
    def cancel(self, cancelled_by="Customer"):
        current = self.current_status
        if current not in _CANCELLABLE_STATES:
            raise ValidationError({"status": [f"Cannot cancel order in {current.value} state"]})

        now = datetime.now(UTC)
        self.status = OrderStatus.CANCELLED.value
        self.updated_at = now
        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                previous_status=current.value,
                cancelled_by=cancelled_by,
                cancelled_at=now,
            )
        )

    def change_status(self, target) -> bool:
        """Administrator status change. Returns False when `target` is the current status."""
        try:
            new_status = OrderStatus(target)
        except ValueError:
            raise ValidationError({"status": ["Invalid status"]}) from None

        current = self.current_status
        if new_status == current:
            return False

        now = datetime.now(UTC)
        self.status = new_status.value
        self.updated_at = now
        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=current.value,
                new_status=new_status.value,
                changed_at=now,
            )
        )
        return True

    def mark_stock_restored(self):
        if self.stock_restored:
            raise ValidationError({"stock_restored": ["Stock was already restored for this order"]})

        now = datetime.now(UTC)
        self.stock_restored = True
        self.updated_at = now
        self.raise_(OrderStockRestored(order_id=str(self.id), status=self.status, restored_at=now))
