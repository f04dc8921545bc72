"""
Shipping Service

Resolves what it costs to ship a product to the shopper's country:

1. The shopper's (name, code) is matched exactly against the Country table.
   No match means no shipping is offered.
2. The store's ShippingRate for that country, if any, overrides the store
   defaults field by field. A null rate field falls back to the store
   default for that field only.
3. A product's free shipping applies when the country is eligible, and
   zeroes every fee.
4. The fee method picks which resolved fields become the quoted fees.
"""
import logging
from datetime import date, timedelta
from typing import Callable, NamedTuple, Optional

from sqlalchemy.orm import Session

from storefront.models import Country, ShippingRate, Store, FreeShipping, ShippingFeeMethod
from storefront.schemas.shipping import UserCountry, ShippingDetails
from storefront.services.errors import ValidationFailed

logger = logging.getLogger(__name__)


class ShippingFields(NamedTuple):
    """Shipping fields after rate-over-default resolution."""

    shipping_service: Optional[str]
    fee_per_item: float
    fee_additional_item: float
    fee_per_kg: float
    fee_fixed: float
    delivery_time_min: int
    delivery_time_max: int
    return_policy: Optional[str]


class ShippingFees(NamedTuple):
    shipping_fee: float
    extra_shipping_fee: float


# (ShippingFields name, ShippingRate column, Store default column)
FIELD_SOURCES = (
    ("shipping_service", "shipping_service", "default_shipping_service"),
    ("fee_per_item", "shipping_fee_per_item", "default_shipping_fee_per_item"),
    ("fee_additional_item", "shipping_fee_additional_item", "default_shipping_fee_additional_item"),
    ("fee_per_kg", "shipping_fee_per_kg", "default_shipping_fee_per_kg"),
    ("fee_fixed", "shipping_fee_fixed", "default_shipping_fee_fixed"),
    ("delivery_time_min", "delivery_time_min", "default_delivery_time_min"),
    ("delivery_time_max", "delivery_time_max", "default_delivery_time_max"),
    ("return_policy", "return_policy", "return_policy"),
)


def resolve_country(db: Session, user_country: UserCountry) -> Optional[Country]:
    """Find the Country row matching the shopper's exact (name, code)."""
    return db.query(Country).filter(
        Country.name == user_country.name,
        Country.code == user_country.code,
    ).first()


def get_shipping_rate(db: Session, store_id: int, country_id: int) -> Optional[ShippingRate]:
    return db.query(ShippingRate).filter(
        ShippingRate.store_id == store_id,
        ShippingRate.country_id == country_id,
    ).first()


def resolve_shipping_fields(store: Store, rate: Optional[ShippingRate] = None) -> ShippingFields:
    """Take each field from the rate when set, otherwise from the store default."""
    resolved = {}
    for name, rate_attr, store_attr in FIELD_SOURCES:
        value = getattr(rate, rate_attr) if rate is not None else None
        resolved[name] = getattr(store, store_attr) if value is None else value
    return ShippingFields(**resolved)


def is_free_shipping(free_shipping: Optional[FreeShipping], country_id: int) -> bool:
    """True when the product offers free shipping and the country is eligible."""
    if free_shipping is None:
        return False
    return any(c.country_id == country_id for c in free_shipping.eligible_countries)


def _item_fees(fields: ShippingFields) -> ShippingFees:
    return ShippingFees(fields.fee_per_item or 0, fields.fee_additional_item or 0)


def _weight_fees(fields: ShippingFields) -> ShippingFees:
    return ShippingFees(fields.fee_per_kg or 0, 0)


def _fixed_fees(fields: ShippingFields) -> ShippingFees:
    return ShippingFees(fields.fee_fixed or 0, 0)


FEE_CALCULATORS: dict[ShippingFeeMethod, Callable[[ShippingFields], ShippingFees]] = {
    ShippingFeeMethod.ITEM: _item_fees,
    ShippingFeeMethod.WEIGHT: _weight_fees,
    ShippingFeeMethod.FIXED: _fixed_fees,
}


def parse_fee_method(method) -> ShippingFeeMethod:
    try:
        return ShippingFeeMethod(method)
    except ValueError:
        raise ValidationFailed(f"Unknown shipping fee method: {method}", method=str(method))


def calculate_fees(method, fields: ShippingFields, is_free: bool = False) -> ShippingFees:
    """Quote the fee and the extra-item fee for a fee method.

    ITEM quotes (per item, per additional item), WEIGHT quotes per kg and
    FIXED quotes the flat fee. Free shipping zeroes both.

    An unknown method raises ValidationFailed, free or not, instead of
    quoting zero fees: the method is a persisted enum, so anything else is
    a bad request.
    """
    method = parse_fee_method(method)
    if is_free:
        return ShippingFees(0, 0)
    return FEE_CALCULATORS[method](fields)


def shipping_total(method, shipping_fee: float, extra_shipping_fee: float, quantity: int) -> float:
    """Total shipping for `quantity` units of one line.

    WEIGHT multiplies the per-kg fee by the unit count, not by the weight.
    """
    method = parse_fee_method(method)
    if quantity < 1:
        raise ValidationFailed("Quantity must be at least 1", quantity=quantity)

    if method == ShippingFeeMethod.ITEM:
        return shipping_fee + (quantity - 1) * extra_shipping_fee
    if method == ShippingFeeMethod.WEIGHT:
        return shipping_fee * quantity
    return shipping_fee


def shipping_dates_range(min_days: int, max_days: int, today: Optional[date] = None) -> tuple[date, date]:
    """Earliest and latest delivery dates counted from `today`."""
    today = today or date.today()
    return today + timedelta(days=min_days), today + timedelta(days=max_days)


def get_shipping_details(
    db: Session,
    shipping_fee_method,
    user_country: UserCountry,
    store: Store,
    free_shipping: Optional[FreeShipping],
    today: Optional[date] = None,
) -> Optional[ShippingDetails]:
    """Resolve shipping for a product of `store` to the shopper's country.

    Returns None when the shopper's country is not a known country, meaning
    no shipping is available. Delivery dates are counted from `today`.
    """
    method = parse_fee_method(shipping_fee_method)

    country = resolve_country(db, user_country)
    if country is None:
        logger.info(f"No shipping to unknown country {user_country.name} ({user_country.code})")
        return None

    rate = get_shipping_rate(db, store.id, country.id)
    fields = resolve_shipping_fields(store, rate)
    free = is_free_shipping(free_shipping, country.id)
    fees = calculate_fees(method, fields, free)
    delivery_min = fields.delivery_time_min or 0
    delivery_max = fields.delivery_time_max or 0
    earliest, latest = shipping_dates_range(delivery_min, delivery_max, today)

    return ShippingDetails(
        shipping_fee_method=method,
        shipping_service=fields.shipping_service,
        shipping_fee=fees.shipping_fee,
        extra_shipping_fee=fees.extra_shipping_fee,
        delivery_time_min=delivery_min,
        delivery_time_max=delivery_max,
        delivery_date_min=earliest,
        delivery_date_max=latest,
        return_policy=fields.return_policy,
        country_code=user_country.code,
        country_name=user_country.name,
        city=user_country.city,
        is_free_shipping=free,
    )
