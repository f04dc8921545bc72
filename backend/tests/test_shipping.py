"""Tests for shipping-fee resolution."""
from datetime import date

import pytest

from storefront.models import ShippingRate, FreeShipping, FreeShippingCountry, ShippingFeeMethod
from storefront.schemas.shipping import UserCountry
from storefront.services.errors import ValidationFailed
from storefront.services.shipping import (
    ShippingFields,
    resolve_shipping_fields,
    calculate_fees,
    shipping_total,
    shipping_dates_range,
    get_shipping_details,
    is_free_shipping,
)

from conftest import country

US = UserCountry(name="United States", code="US", city="Austin")
CANADA = UserCountry(name="Canada", code="CA")


def fields(**overrides):
    values = dict(
        shipping_service="Standard Post",
        fee_per_item=5.0,
        fee_additional_item=2.0,
        fee_per_kg=3.0,
        fee_fixed=10.0,
        delivery_time_min=3,
        delivery_time_max=10,
        return_policy="Return in 14 days.",
    )
    values.update(overrides)
    return ShippingFields(**values)


class TestResolveShippingFields:
    def test_store_defaults_without_rate(self, store):
        resolved = resolve_shipping_fields(store)

        assert resolved == fields()

    def test_rate_overrides_field_by_field(self, db, store):
        rate = ShippingRate(
            store_id=store.id,
            country_id=country(db, "CA").id,
            shipping_fee_per_item=8.0,
            delivery_time_max=20,
        )

        resolved = resolve_shipping_fields(store, rate)

        assert resolved.fee_per_item == 8.0
        assert resolved.delivery_time_max == 20
        # unset rate fields fall back to the store
        assert resolved.fee_additional_item == 2.0
        assert resolved.delivery_time_min == 3
        assert resolved.shipping_service == "Standard Post"

    def test_zero_rate_is_an_override(self, db, store):
        rate = ShippingRate(store_id=store.id, country_id=country(db, "CA").id, shipping_fee_per_item=0)

        assert resolve_shipping_fields(store, rate).fee_per_item == 0


class TestCalculateFees:
    def test_item(self):
        assert calculate_fees(ShippingFeeMethod.ITEM, fields()) == (5.0, 2.0)

    def test_weight(self):
        assert calculate_fees(ShippingFeeMethod.WEIGHT, fields()) == (3.0, 0)

    def test_fixed(self):
        assert calculate_fees("FIXED", fields()) == (10.0, 0)

    def test_free_shipping_zeroes_fees(self):
        assert calculate_fees(ShippingFeeMethod.ITEM, fields(), is_free=True) == (0, 0)

    def test_unknown_method(self):
        with pytest.raises(ValidationFailed):
            calculate_fees("PIGEON", fields())

    def test_unknown_method_rejected_even_when_free(self):
        with pytest.raises(ValidationFailed):
            calculate_fees("PIGEON", fields(), is_free=True)


class TestShippingTotal:
    def test_item_charges_extra_per_additional_unit(self):
        assert shipping_total(ShippingFeeMethod.ITEM, 5.0, 2.0, 3) == 9.0

    def test_item_single_unit(self):
        assert shipping_total(ShippingFeeMethod.ITEM, 5.0, 2.0, 1) == 5.0

    def test_weight_multiplies_by_quantity(self):
        assert shipping_total(ShippingFeeMethod.WEIGHT, 3.0, 0, 4) == 12.0

    def test_fixed_ignores_quantity(self):
        assert shipping_total(ShippingFeeMethod.FIXED, 10.0, 0, 7) == 10.0

    def test_quantity_must_be_positive(self):
        with pytest.raises(ValidationFailed):
            shipping_total(ShippingFeeMethod.ITEM, 5.0, 2.0, 0)


def test_shipping_dates_range():
    assert shipping_dates_range(3, 10, today=date(2024, 1, 1)) == (date(2024, 1, 4), date(2024, 1, 11))


class TestGetShippingDetails:
    def test_store_defaults(self, db, store):
        details = get_shipping_details(db, ShippingFeeMethod.ITEM, US, store, None)

        assert details.shipping_fee == 5.0
        assert details.extra_shipping_fee == 2.0
        assert details.shipping_service == "Standard Post"
        assert details.delivery_time_min == 3
        assert details.delivery_time_max == 10
        assert details.return_policy == "Return in 14 days."
        assert details.country_code == "US"
        assert details.country_name == "United States"
        assert details.city == "Austin"
        assert details.is_free_shipping is False

    def test_delivery_dates(self, db, store):
        details = get_shipping_details(db, ShippingFeeMethod.ITEM, US, store, None, today=date(2024, 1, 1))

        assert details.delivery_date_min == date(2024, 1, 4)
        assert details.delivery_date_max == date(2024, 1, 11)

    def test_unknown_country_has_no_shipping(self, db, store):
        atlantis = UserCountry(name="Atlantis", code="AX")

        assert get_shipping_details(db, ShippingFeeMethod.ITEM, atlantis, store, None) is None

    def test_country_name_and_code_must_both_match(self, db, store):
        mismatched = UserCountry(name="USA", code="US")

        assert get_shipping_details(db, ShippingFeeMethod.ITEM, mismatched, store, None) is None

    def test_country_rate_applies(self, db, store):
        db.add(ShippingRate(
            store_id=store.id,
            country_id=country(db, "CA").id,
            shipping_service="Canada Express",
            shipping_fee_fixed=25.0,
        ))
        db.commit()

        details = get_shipping_details(db, ShippingFeeMethod.FIXED, CANADA, store, None)

        assert details.shipping_service == "Canada Express"
        assert details.shipping_fee == 25.0
        assert details.extra_shipping_fee == 0

    def test_rate_of_another_country_ignored(self, db, store):
        db.add(ShippingRate(store_id=store.id, country_id=country(db, "CA").id, shipping_fee_fixed=25.0))
        db.commit()

        details = get_shipping_details(db, ShippingFeeMethod.FIXED, US, store, None)

        assert details.shipping_fee == 10.0

    def test_free_shipping_for_eligible_country(self, db, store, product):
        free_shipping = FreeShipping(product_id=product.product_id)
        free_shipping.eligible_countries = [FreeShippingCountry(country_id=country(db, "CA").id)]
        db.add(free_shipping)
        db.commit()

        canada = get_shipping_details(db, ShippingFeeMethod.ITEM, CANADA, store, free_shipping)
        us = get_shipping_details(db, ShippingFeeMethod.ITEM, US, store, free_shipping)

        assert canada.is_free_shipping is True
        assert (canada.shipping_fee, canada.extra_shipping_fee) == (0, 0)
        assert us.is_free_shipping is False
        assert us.shipping_fee == 5.0


def test_is_free_shipping_without_offer():
    assert is_free_shipping(None, 1) is False
