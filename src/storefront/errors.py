"""Storefront-specific exceptions.

Domain rule violations use Protean's ValidationError and missing records
ObjectNotFoundError; the classes here cover what Protean has no type for.
"""


class AccessDenied(Exception):
    """The authenticated customer may not act on this resource."""


class PaymentGatewayError(Exception):
    """The payment gateway refused or failed an authorization or capture.

    The message carries the gateway's own wording so it can be surfaced
    verbatim to the caller.
    """

    def __init__(self, message: str, gateway_status: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.gateway_status = gateway_status

    def __str__(self) -> str:
        return self.message


def first_message(messages) -> str:
    """Flatten a Protean error payload ({field: [msg, ...]}) to a single message."""
    if isinstance(messages, dict):
        for value in messages.values():
            if isinstance(value, list | tuple) and value:
                return str(value[0])
            if value:
                return str(value)
        return "Invalid request"
    return str(messages)
