import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Select the config overlay before the domain module is first imported."""
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def storefront_bed():
    from protean.integrations.pytest import DomainFixture

    from storefront.domain import storefront

    bed = DomainFixture(storefront)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(storefront_bed):
    """Run every test inside the domain context and clean up infrastructure afterwards."""
    from protean import current_domain

    from storefront.payments.gateway import reset_gateway

    with storefront_bed.domain_context():
        yield

        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()

    reset_gateway()


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------
@pytest.fixture()
def make_product():
    """Create an active product through its command and return its id."""
    from protean import current_domain

    from storefront.catalogue.product.management import CreateProduct

    counter = {"n": 0}

    def _make(name="Ear defenders", price=10.0, stock=5, low_stock_alert=2, **kwargs):
        counter["n"] += 1
        return current_domain.process(
            CreateProduct(
                name=name,
                slug=kwargs.pop("slug", f"product-{counter['n']}"),
                price=price,
                stock=stock,
                low_stock_alert=low_stock_alert,
                **kwargs,
            ),
            asynchronous=False,
        )

    return _make


@pytest.fixture()
def make_customer():
    """Register a customer with one (default) address. Returns (customer_id, address_id)."""
    from protean import current_domain

    from storefront.identity.customer.registration import AddAddress, RegisterCustomer

    counter = {"n": 0}

    def _make(role="Customer"):
        counter["n"] += 1
        customer_id = current_domain.process(
            RegisterCustomer(
                email=f"customer{counter['n']}@example.com",
                first_name="Alice",
                last_name="Martin",
                role=role,
            ),
            asynchronous=False,
        )
        address_id = current_domain.process(
            AddAddress(
                customer_id=customer_id,
                first_name="Alice",
                last_name="Martin",
                street="12 rue des Lilas",
                city="Lyon",
                postal_code="69003",
                country="France",
            ),
            asynchronous=False,
        )
        return customer_id, address_id

    return _make


@pytest.fixture()
def customer(make_customer):
    return make_customer()


@pytest.fixture()
def admin(make_customer):
    return make_customer(role="Admin")


@pytest.fixture()
def fake_gateway():
    from storefront.payments.gateway import set_gateway
    from storefront.payments.gateway.fake_adapter import FakeGateway

    gateway = FakeGateway()
    set_gateway(gateway)
    return gateway


@pytest.fixture()
def auth_headers():
    """Bearer-token headers for a customer id."""
    from storefront.identity.api.auth import create_access_token

    def _headers(customer_id):
        return {"Authorization": f"Bearer {create_access_token(customer_id)}"}

    return _headers


@pytest.fixture()
def client():
    """TestClient over every router, with the production error handlers."""
    from fastapi import FastAPI, Request
    from fastapi.testclient import TestClient

    from storefront.catalogue.api import category_router, product_router
    from storefront.domain import storefront
    from storefront.identity.api import auth_router
    from storefront.identity.api import router as identity_router
    from storefront.ordering.api import order_router
    from storefront.payments.api import paypal_router
    from storefront.utils.http import register_error_handlers

    app = FastAPI()

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        with storefront.domain_context():
            return await call_next(request)

    register_error_handlers(app)
    for router in (auth_router, identity_router, product_router, category_router, order_router, paypal_router):
        app.include_router(router)
    return TestClient(app)
