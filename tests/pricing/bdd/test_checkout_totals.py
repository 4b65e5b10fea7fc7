"""BDD tests for checkout total computation."""

import pytest
from pytest_bdd import given, parsers, scenarios, then, when
from storefront.pricing.totals import LineItem, ShippingPolicy, compute_totals

scenarios("features/checkout_totals.feature")


@pytest.fixture()
def basket():
    return {"items": [], "discount": 0.0, "tax_rate": 0.0, "shipping": ShippingPolicy(flat_rate=0.0)}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse("tax is {percent:g} percent"))
def tax_rate(basket, percent):
    basket["tax_rate"] = percent / 100


@given(parsers.cfparse("shipping costs {flat_rate:g} with free shipping from {threshold:g}"))
def shipping(basket, flat_rate, threshold):
    basket["shipping"] = ShippingPolicy(flat_rate=flat_rate, free_threshold=threshold)


@given(parsers.cfparse("a line of {quantity:d} at {price:g}"))
def line(basket, quantity, price):
    basket["items"].append(LineItem(base_price=price, quantity=quantity))


@given(parsers.cfparse("a line of {quantity:d} at {price:g} with a {surcharge:g} surcharge"))
def line_with_surcharge(basket, quantity, price, surcharge):
    basket["items"].append(LineItem(base_price=price, quantity=quantity, additional_prices=(surcharge,)))


@given(parsers.cfparse("a coupon discount of {amount:g}"))
def coupon_discount(basket, amount):
    basket["discount"] = amount


# ---------------------------------------------------------------------------
# When / Then steps
# ---------------------------------------------------------------------------
@when("the totals are computed", target_fixture="totals")
def compute(basket):
    return compute_totals(basket["items"], basket["discount"], basket["tax_rate"], basket["shipping"])


@then(parsers.cfparse("the subtotal is {amount:g}"))
def subtotal_is(totals, amount):
    assert totals.subtotal == amount


@then(parsers.cfparse("the discount is {amount:g}"))
def discount_is(totals, amount):
    assert totals.discount == amount


@then(parsers.cfparse("the tax is {amount:g}"))
def tax_is(totals, amount):
    assert totals.tax == amount


@then(parsers.cfparse("shipping is {amount:g}"))
def shipping_is(totals, amount):
    assert totals.shipping == amount


@then(parsers.cfparse("the total is {amount:g}"))
def total_is(totals, amount):
    assert totals.total == amount
