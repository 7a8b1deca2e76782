"""Password hashing and credential checks for customer login.

Only hashes are stored. Passwords are hashed before a command is built, so
a raw password never travels through the domain.
"""

import structlog
from passlib.context import CryptContext
from protean.utils.globals import current_domain

from storefront.identity.customer.customer import Customer

logger = structlog.get_logger(__name__)

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str | None) -> bool:
    if not password_hash:
        return False
    return pwd_context.verify(password, password_hash)


def customer_with_email(email: str) -> Customer | None:
    customers = (
        current_domain.repository_for(Customer)._dao.query.filter(email=email.strip().lower()).all().items
    )
    return customers[0] if customers else None


def authenticate(email: str, password: str) -> Customer | None:
    """The customer for `email` if `password` matches, else None."""
    customer = customer_with_email(email)
    if customer is None or not verify_password(password, customer.password_hash):
        logger.info("Login refused", email=email.strip().lower())
        return None
    return customer
