"""Order lookups used by the HTTP layer and the payment capture flow."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.errors import AccessDenied
from storefront.ordering.order.order import Order


def order_for(order_id, customer_id, is_admin=False) -> Order:
    """The order, provided `customer_id` owns it or the caller is an administrator."""
    order = current_domain.repository_for(Order).get(order_id)
    if not (is_admin or order.is_owned_by(customer_id)):
        raise AccessDenied("You can only view your own orders")
    return order


def order_by_payment_reference(payment_reference) -> Order:
    orders = (
        current_domain.repository_for(Order)._dao.query.filter(payment_reference=payment_reference).all().items
    )
    if not orders:
        raise ObjectNotFoundError(f"No order with payment reference `{payment_reference}`")
    return orders[0]
