"""Domain events for the Customer aggregate."""

from protean.fields import DateTime, Identifier, String

from storefront.domain import storefront


@storefront.event(part_of="Customer")
class CustomerRegistered:
    """A new customer account was created."""

    __version__ = 1

    customer_id: Identifier(required=True)
    email: String(required=True)
    first_name: String(required=True)
    last_name: String(required=True)
    role: String(required=True)
    registered_at: DateTime(required=True)


@storefront.event(part_of="Customer")
class AddressAdded:
    __version__ = 1

    customer_id: Identifier(required=True)
    address_id: Identifier(required=True)
    city: String(required=True)
    country: String(required=True)
    is_default: String(required=True)


@storefront.event(part_of="Customer")
class DefaultAddressChanged:
    __version__ = 1

    customer_id: Identifier(required=True)
    address_id: Identifier(required=True)
    previous_default_address_id: Identifier()
