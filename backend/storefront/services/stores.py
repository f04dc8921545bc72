"""
Store Service

Seller-facing store management: store details, default shipping, and
per-country shipping rates.
"""
from sqlalchemy.orm import Session

from storefront.models import Store, Country, ShippingRate, Role, User
from storefront.schemas.store import (
    StoreUpsert,
    StoreDefaultShipping,
    ShippingRateUpsert,
    ShippingRate as ShippingRateSchema,
    CountryWithShippingRate,
)
from storefront.services.auth import RequestContext
from storefront.services.errors import NotFound, Forbidden, ValidationFailed, operation
from storefront.services.uniqueness import save_unique

# Reported in this order when several collide
STORE_UNIQUE_FIELDS = {
    "name": "name",
    "email": "email",
    "phone": "phone number",
    "url": "URL",
}


def get_store_by_url(db: Session, store_url: str) -> Store:
    if not store_url:
        raise ValidationFailed("Store URL is required")
    store = db.query(Store).filter(Store.url == store_url).first()
    if not store:
        raise NotFound(f'Store with URL "{store_url}" does not exist.', store_url=store_url)
    return store


def get_owned_store(db: Session, user: User, store_url: str) -> Store:
    """The store at `store_url`, provided `user` owns it."""
    store = get_store_by_url(db, store_url)
    if store.user_id != user.id:
        raise Forbidden("Make sure you have the permission to update the store", store_url=store_url)
    return store


def _check_delivery_window(minimum, maximum):
    if minimum is not None and maximum is not None and minimum > maximum:
        raise ValidationFailed(
            "Minimum delivery time cannot exceed maximum delivery time",
            delivery_time_min=minimum,
            delivery_time_max=maximum,
        )


@operation("upsert store")
def upsert_store(db: Session, ctx: RequestContext, data: StoreUpsert) -> Store:
    """Create a store for the current seller, or update one they own.

    Name, URL, email and phone must be unique across stores.
    """
    user = ctx.require_role(Role.SELLER)
    _check_delivery_window(data.default_delivery_time_min, data.default_delivery_time_max)

    if data.id is not None:
        store = db.query(Store).filter(Store.id == data.id).first()
        if not store:
            raise NotFound(f"Store with ID {data.id} not found.", store_id=data.id)
        if store.user_id != user.id:
            raise Forbidden("Make sure you have the permission to update the store", store_id=data.id)
    else:
        store = Store(user_id=user.id)

    for key, value in data.model_dump(exclude={"id"}, exclude_none=True).items():
        setattr(store, key, value)

    return save_unique(db, store, "store", STORE_UNIQUE_FIELDS)


def list_seller_stores(db: Session, ctx: RequestContext) -> list[Store]:
    """Stores owned by the current seller, newest first."""
    user = ctx.require_role(Role.SELLER)
    return db.query(Store).filter(Store.user_id == user.id).order_by(Store.created_at.desc(), Store.id.desc()).all()


@operation("fetch store default shipping details")
def get_store_default_shipping_details(db: Session, store_url: str) -> StoreDefaultShipping:
    store = get_store_by_url(db, store_url)
    return StoreDefaultShipping.model_validate(store)


@operation("update store default shipping details")
def update_store_default_shipping_details(
    db: Session,
    ctx: RequestContext,
    store_url: str,
    details: StoreDefaultShipping,
) -> Store:
    """Update the default shipping of a store the current seller owns."""
    user = ctx.require_role(Role.SELLER)
    store = get_owned_store(db, user, store_url)

    changes = details.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise ValidationFailed("No shipping details provided to update")

    _check_delivery_window(
        changes.get("default_delivery_time_min", store.default_delivery_time_min),
        changes.get("default_delivery_time_max", store.default_delivery_time_max),
    )

    for key, value in changes.items():
        setattr(store, key, value)
    db.commit()
    db.refresh(store)
    return store


@operation("retrieve store shipping rates")
def get_store_shipping_rates(db: Session, ctx: RequestContext, store_url: str) -> list[CountryWithShippingRate]:
    """Every country with the store's rate for it (None when the store has none), by country name."""
    user = ctx.require_role(Role.SELLER)
    store = get_owned_store(db, user, store_url)

    countries = db.query(Country).order_by(Country.name.asc()).all()
    rates = db.query(ShippingRate).filter(ShippingRate.store_id == store.id).all()
    rate_map = {rate.country_id: rate for rate in rates}

    return [
        CountryWithShippingRate(
            country_id=country.id,
            country_name=country.name,
            shipping_rate=ShippingRateSchema.model_validate(rate_map[country.id]) if country.id in rate_map else None,
        )
        for country in countries
    ]


@operation("upsert shipping rate")
def upsert_shipping_rate(
    db: Session,
    ctx: RequestContext,
    store_url: str,
    data: ShippingRateUpsert,
) -> ShippingRate:
    """Create or update the store's shipping rate for one country.

    A store has at most one rate per country; an existing rate for the
    country is updated in place.
    """
    user = ctx.require_role(Role.SELLER)
    store = get_owned_store(db, user, store_url)

    if not data.country_id:
        raise ValidationFailed("Please provide a valid country ID.")
    country = db.query(Country).filter(Country.id == data.country_id).first()
    if not country:
        raise NotFound(f"Country with ID {data.country_id} not found.", country_id=data.country_id)

    _check_delivery_window(data.delivery_time_min, data.delivery_time_max)

    rate = db.query(ShippingRate).filter(
        ShippingRate.store_id == store.id,
        ShippingRate.country_id == country.id,
    ).first()
    if rate is None:
        rate = ShippingRate(store_id=store.id, country_id=country.id)

    for key, value in data.model_dump(exclude={"country_id"}).items():
        setattr(rate, key, value)

    return save_unique(db, rate, "shipping rate")
