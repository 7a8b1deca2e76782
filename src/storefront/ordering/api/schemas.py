"""Pydantic request/response schemas for the Ordering API."""

from datetime import datetime

from storefront.utils.schemas import CamelModel


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------
class CartLineSchema(CamelModel):
    product_id: str
    quantity: int


class PlaceOrderRequest(CamelModel):
    items: list[CartLineSchema]
    address_id: str
    notes: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [{"productId": "prod-001", "quantity": 3}],
                    "addressId": "addr-001",
                }
            ]
        }
    }


class UpdateStatusRequest(CamelModel):
    status: str


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------
class OrderItemSchema(CamelModel):
    id: str
    product_id: str
    name: str
    quantity: int
    unit_price: float


class ShippingAddressSchema(CamelModel):
    first_name: str
    last_name: str
    street: str
    city: str
    postal_code: str
    country: str
    phone: str | None = None


class OrderResponse(CamelModel):
    id: str
    order_number: str
    customer_id: str
    address_id: str
    shipping_address: ShippingAddressSchema | None = None
    items: list[OrderItemSchema]
    subtotal: float
    shipping: float
    total: float
    currency: str
    status: str
    payment_reference: str | None = None
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_order(cls, order) -> "OrderResponse":
        address = order.shipping_address
        return cls(
            id=str(order.id),
            order_number=order.order_number,
            customer_id=str(order.customer_id),
            address_id=str(order.address_id),
            shipping_address=(
                ShippingAddressSchema(
                    first_name=address.first_name,
                    last_name=address.last_name,
                    street=address.street,
                    city=address.city,
                    postal_code=address.postal_code,
                    country=address.country,
                    phone=address.phone,
                )
                if address
                else None
            ),
            items=[
                OrderItemSchema(
                    id=str(item.id),
                    product_id=str(item.product_id),
                    name=item.name,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                )
                for item in order.items
            ],
            subtotal=order.subtotal,
            shipping=order.shipping,
            total=order.total,
            currency=order.currency,
            status=order.status,
            payment_reference=order.payment_reference,
            notes=order.notes,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )
