"""Human-readable order numbers: `<PREFIX>-<base36 millis>-<4 random chars>`."""

import secrets
import string
import time

from storefront.utils.settings import setting

_ALPHABET = string.digits + string.ascii_uppercase


def to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_ALPHABET[remainder])
    return "".join(reversed(digits))


def generate_order_number(now_ms: int | None = None) -> str:
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(4))
    return f"{setting('ORDER_NUMBER_PREFIX')}-{to_base36(now_ms)}-{suffix}"
