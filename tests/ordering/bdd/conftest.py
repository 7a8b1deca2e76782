"""Shared BDD fixtures and step definitions for the checkout lifecycle."""

import json

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then

from storefront.catalogue.product.product import Product
from storefront.ordering.order.checkout import PlaceOrder
from storefront.ordering.order.order import Order
from storefront.payments.payment.authorization import authorize_payment
from storefront.payments.payment.capture import capture_payment


@pytest.fixture()
def products():
    """Product ids by the name used in the scenario."""
    return {}


@pytest.fixture()
def context():
    return {}


@pytest.fixture()
def shopper(customer):
    """(customer_id, address_id) of the scenario's customer."""
    return customer


@pytest.fixture()
def place(shopper):
    """Check out `quantity` of one product for the scenario's customer."""

    def _place(product_id, quantity):
        customer_id, address_id = shopper
        return current_domain.process(
            PlaceOrder(
                customer_id=customer_id,
                address_id=address_id,
                items=json.dumps([{"product_id": product_id, "quantity": quantity}]),
            ),
            asynchronous=False,
        )

    return _place


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a product "{name}" priced {price:f} with {stock:d} in stock'))
def _(make_product, products, name, price, stock):
    products[name] = make_product(name=name, price=price, stock=stock)


@given("a customer with an address")
def _(shopper):
    assert shopper


@given(parsers.cfparse('the customer has ordered {quantity:d} of "{name}"'))
def _(place, products, context, quantity, name):
    context["order_id"] = place(products[name], quantity)


@given("the payment is authorized")
def _(shopper, context, fake_gateway):
    result = authorize_payment(context["order_id"], shopper[0])
    context["payment_reference"] = result["paypal_order_id"]


@given("the order is paid through the gateway")
def _(shopper, context, fake_gateway):
    result = authorize_payment(context["order_id"], shopper[0])
    capture_payment(result["paypal_order_id"], shopper[0])


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the order is {status}"))
def _(context, status):
    assert current_domain.repository_for(Order).get(context["order_id"]).status == status


@then(parsers.cfparse("the order subtotal is {subtotal:f}, shipping {shipping:f} and total {total:f}"))
def _(context, subtotal, shipping, total):
    order = current_domain.repository_for(Order).get(context["order_id"])
    assert order.subtotal == pytest.approx(subtotal)
    assert order.shipping == pytest.approx(shipping)
    assert order.total == pytest.approx(total)


@then(parsers.cfparse('"{name}" has {stock:d} in stock'))
def _(products, name, stock):
    assert current_domain.repository_for(Product).get(products[name]).stock == stock


@then("no order exists")
def _():
    assert current_domain.repository_for(Order)._dao.query.all().items == []
