"""Pydantic request/response schemas for the Identity API.

These are external contracts, separate from internal Protean commands.
"""

from pydantic import Field

from storefront.utils.schemas import CamelModel


class RegisterCustomerRequest(CamelModel):
    email: str = Field(min_length=3, max_length=254)
    password: str = Field(min_length=8, max_length=128)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)


class LoginRequest(CamelModel):
    email: str = Field(min_length=3, max_length=254)
    password: str = Field(min_length=1, max_length=128)


class AddAddressRequest(CamelModel):
    label: str | None = None
    first_name: str
    last_name: str
    street: str
    city: str
    postal_code: str
    country: str = "France"
    phone: str | None = None
    is_default: bool = False


class RegistrationResponse(CamelModel):
    customer_id: str
    token: str


class AddressSchema(CamelModel):
    id: str
    label: str | None = None
    first_name: str
    last_name: str
    street: str
    city: str
    postal_code: str
    country: str
    phone: str | None = None
    is_default: bool


class CustomerProfile(CamelModel):
    id: str
    email: str
    first_name: str
    last_name: str
    role: str
    addresses: list[AddressSchema] = []

    @classmethod
    def from_customer(cls, customer) -> "CustomerProfile":
        return cls(
            id=str(customer.id),
            email=customer.email,
            first_name=customer.first_name,
            last_name=customer.last_name,
            role=customer.role,
            addresses=[
                AddressSchema(
                    id=str(a.id),
                    label=a.label,
                    first_name=a.first_name,
                    last_name=a.last_name,
                    street=a.street,
                    city=a.city,
                    postal_code=a.postal_code,
                    country=a.country,
                    phone=a.phone,
                    is_default=bool(a.is_default),
                )
                for a in customer.addresses
            ],
        )


class LoginResponse(CamelModel):
    token: str
    customer: CustomerProfile


class AddressIdResponse(CamelModel):
    address_id: str


class StatusResponse(CamelModel):
    status: str
