"""Shop settings read from the `[custom]` table of domain.toml.

Each setting has an in-code default so that a missing key never breaks
checkout; environment variables with the same name take precedence.
"""

import os

from storefront.domain import storefront

DEFAULTS = {
    "BRAND_NAME": "SoundAndSafe",
    "CURRENCY": "EUR",
    "FREE_SHIPPING_THRESHOLD": 50.0,
    "SHIPPING_FEE": 5.99,
    "ORDER_NUMBER_PREFIX": "SAS",
    "CLIENT_URL": "http://localhost:5173",
}


def setting(name: str):
    if name in os.environ:
        raw = os.environ[name]
        return type(DEFAULTS[name])(raw) if name in DEFAULTS else raw

    custom = storefront.config.get("custom") or {}
    if name in custom:
        return custom[name]
    return DEFAULTS[name]
