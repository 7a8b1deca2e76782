"""FastAPI endpoints for customers, their address books and login."""

from fastapi import APIRouter, Depends, HTTPException
from protean.utils.globals import current_domain

from storefront.identity.api.auth import CurrentUser, create_access_token, get_current_user
from storefront.identity.api.schemas import (
    AddAddressRequest,
    AddressIdResponse,
    CustomerProfile,
    LoginRequest,
    LoginResponse,
    RegisterCustomerRequest,
    RegistrationResponse,
    StatusResponse,
)
from storefront.identity.customer.credentials import authenticate, hash_password
from storefront.identity.customer.customer import Customer
from storefront.identity.customer.registration import AddAddress, RegisterCustomer, SetDefaultAddress

router = APIRouter(prefix="/customers", tags=["customers"])
auth_router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("", status_code=201, response_model=RegistrationResponse)
async def register_customer(body: RegisterCustomerRequest) -> RegistrationResponse:
    command = RegisterCustomer(
        email=body.email,
        first_name=body.first_name,
        last_name=body.last_name,
        password_hash=hash_password(body.password),
    )
    customer_id = current_domain.process(command, asynchronous=False)
    return RegistrationResponse(customer_id=customer_id, token=create_access_token(customer_id))


@router.post("/me/addresses", status_code=201, response_model=AddressIdResponse)
async def add_address(body: AddAddressRequest, user: CurrentUser = Depends(get_current_user)) -> AddressIdResponse:
    command = AddAddress(
        customer_id=user.id,
        label=body.label,
        first_name=body.first_name,
        last_name=body.last_name,
        street=body.street,
        city=body.city,
        postal_code=body.postal_code,
        country=body.country,
        phone=body.phone,
        is_default=body.is_default,
    )
    address_id = current_domain.process(command, asynchronous=False)
    return AddressIdResponse(address_id=address_id)


@router.put("/me/addresses/{address_id}/default", response_model=StatusResponse)
async def set_default_address(address_id: str, user: CurrentUser = Depends(get_current_user)) -> StatusResponse:
    current_domain.process(SetDefaultAddress(customer_id=user.id, address_id=address_id), asynchronous=False)
    return StatusResponse(status="default_address_set")


@auth_router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest) -> LoginResponse:
    """Exchange an email and password for a bearer token."""
    customer = authenticate(body.email, body.password)
    if customer is None:
        raise HTTPException(status_code=401, detail="Invalid email or password")
    return LoginResponse(token=create_access_token(str(customer.id)), customer=CustomerProfile.from_customer(customer))


@auth_router.get("/me", response_model=CustomerProfile)
async def me(user: CurrentUser = Depends(get_current_user)) -> CustomerProfile:
    return CustomerProfile.from_customer(current_domain.repository_for(Customer).get(user.id))
