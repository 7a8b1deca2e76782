"""Order totals.

Amounts are computed with Decimal and rounded half-up to cents, then stored
as floats on the Order.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from storefront.utils.settings import setting

CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class CartPricing:
    subtotal: Decimal
    shipping: Decimal

    @property
    def total(self) -> Decimal:
        return self.subtotal + self.shipping


def shipping_for(subtotal: Decimal) -> Decimal:
    """Free at or above the threshold, flat fee below it."""
    if subtotal >= to_money(setting("FREE_SHIPPING_THRESHOLD")):
        return to_money(0)
    return to_money(setting("SHIPPING_FEE"))


def price_cart(lines) -> CartPricing:
    """Price `(unit_price, quantity)` pairs."""
    subtotal = sum((to_money(unit_price) * quantity for unit_price, quantity in lines), Decimal("0"))
    subtotal = to_money(subtotal)
    return CartPricing(subtotal=subtotal, shipping=shipping_for(subtotal))
