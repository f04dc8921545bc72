"""Tests for store management, default shipping and shipping rates."""
import pytest

from storefront.models import ShippingRate
from storefront.schemas.store import StoreUpsert, StoreDefaultShipping, ShippingRateUpsert
from storefront.services.auth import RequestContext
from storefront.services.errors import Conflict, Forbidden, ValidationFailed, NotFound
from storefront.services.stores import (
    upsert_store,
    update_store_default_shipping_details,
    get_store_shipping_rates,
    upsert_shipping_rate,
    get_store_by_url,
    list_seller_stores,
)

from conftest import auth_headers, country


def store_payload(**overrides):
    data = {
        "name": "Peak Supplies",
        "description": "Climbing gear",
        "email": "peak@example.com",
        "phone": "+15550199",
        "url": "peak-supplies",
    }
    data.update(overrides)
    return data


class TestUpsertStore:
    def test_create(self, db, seller):
        store = upsert_store(db, RequestContext(user=seller), StoreUpsert(**store_payload()))

        assert store.id is not None
        assert store.user_id == seller.id
        assert store.return_policy == "Return in 30 days."
        assert store.default_shipping_service == "International Delivery"
        assert (store.default_delivery_time_min, store.default_delivery_time_max) == (7, 31)

    def test_update_own_store(self, db, seller, store):
        updated = upsert_store(
            db,
            RequestContext(user=seller),
            StoreUpsert(**store_payload(id=store.id, name="Stride Outfitters", url=store.url, email=store.email, phone=store.phone, description="Updated")),
        )

        assert updated.id == store.id
        assert updated.description == "Updated"

    @pytest.mark.parametrize("field, label", [
        ("name", "name"),
        ("email", "email"),
        ("phone", "phone number"),
        ("url", "URL"),
    ])
    def test_unique_fields(self, db, seller, store, field, label):
        taken = {"name": store.name, "email": store.email, "phone": store.phone, "url": store.url}

        with pytest.raises(Conflict) as exc_info:
            upsert_store(db, RequestContext(user=seller), StoreUpsert(**store_payload(**{field: taken[field]})))

        assert exc_info.value.message == f"A store with the same {label} already exists"
        assert exc_info.value.context == {"field": field}

    def test_other_sellers_store(self, db, other_seller, store):
        with pytest.raises(Forbidden):
            upsert_store(db, RequestContext(user=other_seller), StoreUpsert(**store_payload(id=store.id)))

    def test_shopper_cannot_create(self, db, shopper):
        with pytest.raises(Forbidden) as exc_info:
            upsert_store(db, RequestContext(user=shopper), StoreUpsert(**store_payload()))

        assert exc_info.value.message == "Unauthorized Access: Seller Privileges Required for Entry."

    def test_delivery_window(self, db, seller):
        payload = store_payload(default_delivery_time_min=10, default_delivery_time_max=5)

        with pytest.raises(ValidationFailed):
            upsert_store(db, RequestContext(user=seller), StoreUpsert(**payload))


class TestStoreEndpoints:
    def test_create(self, client, seller):
        response = client.post("/api/stores", json=store_payload(), headers=auth_headers(seller))

        assert response.status_code == 200
        assert response.json()["url"] == "peak-supplies"
        assert response.json()["status"] == "PENDING"

    def test_unauthenticated(self, client):
        response = client.post("/api/stores", json=store_payload())

        assert response.status_code == 401
        assert response.json() == {
            "error": "unauthorized",
            "detail": "Failed to upsert store: Unauthenticated",
            "context": {},
        }

    def test_shopper_forbidden(self, client, shopper):
        response = client.post("/api/stores", json=store_payload(), headers=auth_headers(shopper))

        assert response.status_code == 403

    def test_duplicate_url_conflicts(self, client, seller, store):
        response = client.post("/api/stores", json=store_payload(url=store.url), headers=auth_headers(seller))

        assert response.status_code == 409
        assert response.json()["detail"] == "Failed to upsert store: A store with the same URL already exists"

    def test_invalid_token_is_anonymous(self, client):
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-token"})

        assert response.status_code == 401

    def test_me(self, client, seller):
        response = client.get("/api/auth/me", headers=auth_headers(seller))

        assert response.status_code == 200
        assert response.json()["role"] == "SELLER"

    def test_list_mine(self, client, seller, other_seller, store):
        mine = client.get("/api/stores/mine", headers=auth_headers(seller))
        theirs = client.get("/api/stores/mine", headers=auth_headers(other_seller))

        assert [s["url"] for s in mine.json()] == [store.url]
        assert theirs.json() == []

    def test_unknown_store(self, client):
        response = client.get("/api/stores/nowhere/shipping")

        assert response.status_code == 404
        assert response.json()["context"] == {"store_url": "nowhere"}


class TestListSellerStores:
    def test_newest_first_and_scoped_to_seller(self, db, seller, other_seller, store):
        newer = upsert_store(db, RequestContext(user=seller), StoreUpsert(**store_payload()))
        upsert_store(
            db,
            RequestContext(user=other_seller),
            StoreUpsert(**store_payload(name="Other Shop", email="othershop@example.com", phone="+15550177", url="other-shop")),
        )

        stores = list_seller_stores(db, RequestContext(user=seller))

        assert [s.id for s in stores] == [newer.id, store.id]

    def test_shopper_forbidden(self, db, shopper):
        with pytest.raises(Forbidden):
            list_seller_stores(db, RequestContext(user=shopper))


class TestDefaultShipping:
    def test_get(self, db, store):
        response = StoreDefaultShipping.model_validate(get_store_by_url(db, store.url))

        assert response.default_shipping_fee_per_item == 5.0

    def test_update(self, db, seller, store):
        updated = update_store_default_shipping_details(
            db,
            RequestContext(user=seller),
            store.url,
            StoreDefaultShipping(default_shipping_fee_fixed=12.5),
        )

        assert updated.default_shipping_fee_fixed == 12.5
        assert updated.default_shipping_fee_per_item == 5.0

    def test_empty_update_rejected(self, db, seller, store):
        with pytest.raises(ValidationFailed) as exc_info:
            update_store_default_shipping_details(db, RequestContext(user=seller), store.url, StoreDefaultShipping())

        assert exc_info.value.message == "No shipping details provided to update"

    def test_window_checked_against_stored_value(self, db, seller, store):
        with pytest.raises(ValidationFailed):
            update_store_default_shipping_details(
                db,
                RequestContext(user=seller),
                store.url,
                StoreDefaultShipping(default_delivery_time_max=1),
            )

    def test_only_owner(self, db, other_seller, store):
        with pytest.raises(Forbidden):
            update_store_default_shipping_details(
                db,
                RequestContext(user=other_seller),
                store.url,
                StoreDefaultShipping(default_shipping_fee_fixed=1),
            )

    def test_endpoint(self, client, seller, store):
        response = client.put(
            f"/api/stores/{store.url}/shipping",
            json={"default_shipping_service": "Courier"},
            headers=auth_headers(seller),
        )

        assert response.status_code == 200
        assert response.json()["default_shipping_service"] == "Courier"
        assert client.get(f"/api/stores/{store.url}/shipping").json()["default_shipping_service"] == "Courier"


class TestShippingRates:
    def test_create_then_update_in_place(self, db, seller, store):
        ctx = RequestContext(user=seller)
        canada = country(db, "CA")

        first = upsert_shipping_rate(db, ctx, store.url, ShippingRateUpsert(country_id=canada.id, shipping_fee_per_item=7))
        second = upsert_shipping_rate(db, ctx, store.url, ShippingRateUpsert(country_id=canada.id, shipping_fee_per_item=9))

        assert first.id == second.id
        assert second.shipping_fee_per_item == 9
        assert db.query(ShippingRate).filter(ShippingRate.store_id == store.id).count() == 1

    def test_unknown_country(self, db, seller, store):
        with pytest.raises(NotFound):
            upsert_shipping_rate(db, RequestContext(user=seller), store.url, ShippingRateUpsert(country_id=9999))

    def test_list_covers_every_country_by_name(self, db, seller, store):
        ctx = RequestContext(user=seller)
        canada = country(db, "CA")
        upsert_shipping_rate(db, ctx, store.url, ShippingRateUpsert(country_id=canada.id, shipping_fee_fixed=4))

        rates = get_store_shipping_rates(db, ctx, store.url)

        names = [r.country_name for r in rates]
        assert names == sorted(names)
        by_name = {r.country_name: r for r in rates}
        assert by_name["Canada"].shipping_rate.shipping_fee_fixed == 4
        assert by_name["France"].shipping_rate is None

    def test_endpoint(self, client, db, seller, store):
        canada = country(db, "CA")

        response = client.put(
            f"/api/stores/{store.url}/shipping-rates",
            json={"country_id": canada.id, "shipping_service": "Canada Post"},
            headers=auth_headers(seller),
        )

        assert response.status_code == 200
        assert response.json()["shipping_service"] == "Canada Post"
        assert response.json()["shipping_fee_per_item"] is None
