"""Customer registration and address book commands."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.customer.credentials import customer_with_email
from storefront.identity.customer.customer import Customer, CustomerRole


@storefront.command(part_of="Customer")
class RegisterCustomer:
    email: String(required=True, max_length=254)
    first_name: String(required=True, max_length=100)
    last_name: String(required=True, max_length=100)
    role: String(choices=CustomerRole, default=CustomerRole.CUSTOMER.value)
    password_hash: String(max_length=255)


@storefront.command(part_of="Customer")
class AddAddress:
    customer_id: Identifier(required=True)
    label: String(max_length=50)
    first_name: String(required=True, max_length=100)
    last_name: String(required=True, max_length=100)
    street: String(required=True, max_length=255)
    city: String(required=True, max_length=100)
    postal_code: String(required=True, max_length=20)
    country: String(max_length=100)
    phone: String(max_length=30)
    is_default: Boolean(default=False)


@storefront.command(part_of="Customer")
class SetDefaultAddress:
    customer_id: Identifier(required=True)
    address_id: Identifier(required=True)


@storefront.command_handler(part_of=Customer)
class RegisterCustomerHandler:
    @handle(RegisterCustomer)
    def register_customer(self, command):
        if customer_with_email(command.email) is not None:
            raise ValidationError({"email": ["Email is already registered"]})

        customer = Customer.register(
            email=command.email,
            first_name=command.first_name,
            last_name=command.last_name,
            role=command.role or CustomerRole.CUSTOMER.value,
            password_hash=command.password_hash,
        )
        current_domain.repository_for(Customer).add(customer)
        return str(customer.id)


@storefront.command_handler(part_of=Customer)
class ManageAddressesHandler:
    @handle(AddAddress)
    def add_address(self, command):
        repo = current_domain.repository_for(Customer)
        customer = repo.get(command.customer_id)
        address = customer.add_address(
            first_name=command.first_name,
            last_name=command.last_name,
            street=command.street,
            city=command.city,
            postal_code=command.postal_code,
            country=command.country,
            label=command.label,
            phone=command.phone,
            is_default=bool(command.is_default),
        )
        repo.add(customer)
        return str(address.id)

    @handle(SetDefaultAddress)
    def set_default_address(self, command):
        repo = current_domain.repository_for(Customer)
        customer = repo.get(command.customer_id)
        customer.set_default_address(command.address_id)
        repo.add(customer)
