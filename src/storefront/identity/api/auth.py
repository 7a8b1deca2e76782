"""Bearer-token authentication for the HTTP API.

Tokens are HS256 JWTs whose `sub` claim is the customer id. The customer is
loaded on every request so that role changes take effect immediately.
"""

import os
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import structlog
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.identity.customer.customer import Customer

logger = structlog.get_logger(__name__)

ALGORITHM = "HS256"
DEFAULT_EXPIRY = timedelta(days=7)

bearer_scheme = HTTPBearer(scheme_name="Bearer", description="JWT access token", auto_error=False)


@dataclass(frozen=True)
class CurrentUser:
    id: str
    email: str
    role: str
    is_admin: bool


def jwt_secret() -> str:
    secret = os.environ.get("JWT_SECRET")
    if secret:
        return secret
    if os.environ.get("PROTEAN_ENV") == "production":
        raise RuntimeError("JWT_SECRET must be set in production")
    return "storefront-dev-secret"


def create_access_token(customer_id: str, expires_in: timedelta = DEFAULT_EXPIRY) -> str:
    now = datetime.now(UTC)
    claims = {"sub": str(customer_id), "iat": now, "exp": now + expires_in}
    return jwt.encode(claims, jwt_secret(), algorithm=ALGORITHM)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> CurrentUser:
    if credentials is None:
        raise HTTPException(status_code=401, detail="Authentication required")

    try:
        payload = jwt.decode(credentials.credentials, jwt_secret(), algorithms=[ALGORITHM])
    except JWTError as exc:
        logger.info("Rejected bearer token", reason=str(exc))
        raise HTTPException(status_code=401, detail="Invalid or expired token") from exc

    customer_id = payload.get("sub")
    if not customer_id:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    try:
        customer = current_domain.repository_for(Customer).get(customer_id)
    except ObjectNotFoundError as exc:
        raise HTTPException(status_code=401, detail="Unknown user") from exc

    return CurrentUser(id=str(customer.id), email=customer.email, role=customer.role, is_admin=customer.is_admin)


async def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Administrator access required")
    return user
