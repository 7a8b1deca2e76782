"""Storefront FastAPI application.

Processes commands synchronously via HTTP. Each request runs inside the
storefront domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the domain.toml overlay (e.g. "production" → PostgreSQL).
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront.domain import storefront
from storefront.utils.logging import bind_request_context, clear_request_context
from storefront.utils.settings import setting

storefront.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Storefront API",
    description="Catalogue, checkout, PayPal payments and order management",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[setting("CLIENT_URL")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the storefront domain context and bind request details to the log context."""
    bind_request_context(method=request.method, path=request.url.path)
    try:
        with storefront.domain_context():
            return await call_next(request)
    finally:
        clear_request_context()


# ---------------------------------------------------------------------------
# Error handlers and routers
# ---------------------------------------------------------------------------
from storefront.catalogue.api import category_router, product_router  # noqa: E402
from storefront.identity.api import auth_router  # noqa: E402
from storefront.identity.api import router as identity_router  # noqa: E402
from storefront.ordering.api import order_router  # noqa: E402
from storefront.payments.api import paypal_router  # noqa: E402
from storefront.utils.http import register_error_handlers  # noqa: E402

register_error_handlers(app)

app.include_router(auth_router)
app.include_router(identity_router)
app.include_router(product_router)
app.include_router(category_router)
app.include_router(order_router)
app.include_router(paypal_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": storefront.name})
