"""Identity API package."""

from storefront.identity.api.routes import auth_router, router

__all__ = ["auth_router", "router"]
