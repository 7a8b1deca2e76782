"""Customer aggregate root with its Address entities."""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, HasMany, String

from storefront.domain import storefront
from storefront.identity.customer.events import AddressAdded, CustomerRegistered, DefaultAddressChanged

MAX_ADDRESSES = 10


class CustomerRole(Enum):
    CUSTOMER = "Customer"
    ADMIN = "Admin"


@storefront.entity(part_of="Customer")
class Address:
    """A delivery address in a customer's address book.

    Orders copy the fields they need at checkout, so editing an address never
    rewrites where a past order was shipped.
    """

    label: String(max_length=50)
    first_name: String(required=True, max_length=100)
    last_name: String(required=True, max_length=100)
    street: String(required=True, max_length=255)
    city: String(required=True, max_length=100)
    postal_code: String(required=True, max_length=20)
    country: String(required=True, max_length=100, default="France")
    phone: String(max_length=30)
    is_default: Boolean(default=False)


@storefront.aggregate
class Customer:
    email: String(required=True, max_length=254, unique=True)
    first_name: String(required=True, max_length=100)
    last_name: String(required=True, max_length=100)
    role: String(choices=CustomerRole, default=CustomerRole.CUSTOMER.value)
    password_hash: String(max_length=255)
    addresses: HasMany(Address)
    registered_at: DateTime(default=datetime.now)

    @invariant.post
    def addresses_cannot_exceed_maximum(self):
        if len(self.addresses) > MAX_ADDRESSES:
            raise ValidationError({"addresses": [f"Cannot have more than {MAX_ADDRESSES} addresses"]})

    @invariant.post
    def exactly_one_default_address_when_addresses_exist(self):
        if not self.addresses:
            return
        defaults = [a for a in self.addresses if a.is_default]
        if len(defaults) != 1:
            raise ValidationError({"addresses": ["Exactly one address must be marked as default"]})

    @classmethod
    def register(cls, email, first_name, last_name, role=CustomerRole.CUSTOMER.value, password_hash=None):
        now = datetime.now(UTC)
        customer = cls(
            email=email.strip().lower(),
            first_name=first_name,
            last_name=last_name,
            role=role,
            password_hash=password_hash,
            registered_at=now,
        )
        customer.raise_(
            CustomerRegistered(
                customer_id=customer.id,
                email=customer.email,
                first_name=first_name,
                last_name=last_name,
                role=role,
                registered_at=now,
            )
        )
        return customer

    @property
    def is_admin(self) -> bool:
        return self.role == CustomerRole.ADMIN.value

    def address(self, address_id):
        """The address with `address_id`, or None if it is not in this address book."""
        return next((a for a in self.addresses if str(a.id) == str(address_id)), None)

    def add_address(
        self,
        first_name,
        last_name,
        street,
        city,
        postal_code,
        country="France",
        label=None,
        phone=None,
        is_default=False,
    ):
        # First address is always default
        if not self.addresses:
            is_default = True

        with atomic_change(self):
            if is_default:
                for addr in self.addresses:
                    if addr.is_default:
                        addr.is_default = False

            address = Address(
                label=label,
                first_name=first_name,
                last_name=last_name,
                street=street,
                city=city,
                postal_code=postal_code,
                country=country or "France",
                phone=phone,
                is_default=is_default,
            )
            self.add_addresses(address)

        self.raise_(
            AddressAdded(
                customer_id=self.id,
                address_id=address.id,
                city=city,
                country=address.country,
                is_default=str(is_default),
            )
        )
        return address

    def set_default_address(self, address_id):
        address = self.address(address_id)
        if address is None:
            raise ValidationError({"addresses": [f"Address {address_id} not found"]})

        previous_default = next((a for a in self.addresses if a.is_default), None)

        with atomic_change(self):
            for addr in self.addresses:
                if addr.is_default:
                    addr.is_default = False
            address.is_default = True

        self.raise_(
            DefaultAddressChanged(
                customer_id=self.id,
                address_id=address.id,
                previous_default_address_id=previous_default.id if previous_default else None,
            )
        )
