"""Shared BDD fixtures and step definitions for the Pricing domain."""

from datetime import UTC, datetime
from decimal import Decimal

import pytest
from pricing.discount.discount import DiscountCode
from pricing.exceptions import ShippingUnavailableError
from pricing.order.calculator import OrderPriceCalculator
from pricing.shipping.address import ShippingAddress
from pricing.shipping.store_config import StoreShippingConfiguration
from pytest_bdd import given, parsers, then, when


# ---------------------------------------------------------------------------
# Scenario state
# ---------------------------------------------------------------------------
@pytest.fixture()
def checkout():
    """Container for the order being built and the outcome of pricing it."""
    return {"items": [], "codes": [], "address": None, "result": None, "exc": None}


@pytest.fixture()
def store_fees():
    return {}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a product "{product_id}" priced {price} sold by store "{store_id}"'))
def product_in_catalog(catalog, product_id, price, store_id):
    catalog.add_product(product_id, price, store_id)


@given(parsers.cfparse('store "{store_id}" charges {fee} for "{zone}" delivery'))
def store_charges_fee(store_directory, store_fees, store_id, fee, zone):
    store_fees.setdefault(store_id, {})[zone] = fee
    store_directory.configure(StoreShippingConfiguration(store_id=store_id, zone_fees=store_fees[store_id]))


@given(parsers.cfparse('store "{store_id}" offers a "{discount_type}" discount "{code}" worth {value}'))
def store_discount(discounts, discount_type, code, value, store_id):
    discounts.add_discount(
        DiscountCode(
            code=code,
            discount_type=discount_type,
            value=Decimal(value),
            valid_from=datetime(2025, 1, 1, tzinfo=UTC),
            valid_to=datetime(2025, 12, 31, tzinfo=UTC),
            applicable_store_id=store_id,
        )
    )


@given(parsers.cfparse('a "{discount_type}" discount "{code}" worth {value}'))
def discount(discounts, discount_type, code, value):
    discounts.add_discount(
        DiscountCode(
            code=code,
            discount_type=discount_type,
            value=Decimal(value),
            valid_from=datetime(2025, 1, 1, tzinfo=UTC),
            valid_to=datetime(2025, 12, 31, tzinfo=UTC),
        )
    )


@given(parsers.cfparse('the cart holds {quantity:d} of "{product_id}"'))
def cart_holds(checkout, quantity, product_id):
    checkout["items"].append({"product_id": product_id, "quantity": quantity})


@given(parsers.cfparse('the order ships to "{city}" in "{country}"'))
def order_ships_to(checkout, city, country):
    checkout["address"] = ShippingAddress(city=city, country=country)


@given(parsers.cfparse('the customer enters discount code "{code}"'))
def customer_enters_code(checkout, code):
    checkout["codes"].append(code)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when("the order is priced")
def order_is_priced(checkout):
    try:
        checkout["result"] = OrderPriceCalculator().price_order(
            checkout["items"], checkout["address"], discount_codes=checkout["codes"]
        )
    except ShippingUnavailableError as exc:
        checkout["exc"] = exc


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the subtotal is {amount}"))
def subtotal_is(checkout, amount):
    assert checkout["result"].subtotal == Decimal(amount)


@then(parsers.cfparse("the shipping cost is {amount}"))
def shipping_cost_is(checkout, amount):
    assert checkout["result"].shipping_cost == Decimal(amount)


@then(parsers.cfparse("the discount is {amount}"))
def discount_is(checkout, amount):
    assert checkout["result"].discount_total == Decimal(amount)


@then(parsers.cfparse("the grand total is {amount}"))
def grand_total_is(checkout, amount):
    assert checkout["result"].grand_total == Decimal(amount)


@then(parsers.cfparse('pricing fails because store "{store_id}" cannot ship there'))
def pricing_fails(checkout, store_id):
    assert checkout["result"] is None
    assert isinstance(checkout["exc"], ShippingUnavailableError)
    assert checkout["exc"].store_id == store_id
