from datetime import date

from pydantic import BaseModel, Field
from storefront.models.enums import ShippingFeeMethod


class UserCountry(BaseModel):
    """The shopper's country as stored in the `userCountry` cookie."""
    name: str
    code: str
    city: str = ""
    region: str = ""


class Country(BaseModel):
    id: int
    name: str
    code: str

    class Config:
        from_attributes = True


class ShippingDetails(BaseModel):
    """Resolved shipping for one product shipped to one country."""
    shipping_fee_method: ShippingFeeMethod
    shipping_service: str | None = None
    shipping_fee: float = 0
    extra_shipping_fee: float = 0
    delivery_time_min: int = 0
    delivery_time_max: int = 0
    delivery_date_min: date | None = None
    delivery_date_max: date | None = None
    return_policy: str | None = None
    country_code: str
    country_name: str
    city: str = ""
    is_free_shipping: bool = False


class FreeShippingUpdate(BaseModel):
    eligible_country_ids: list[int] = Field(default_factory=list)


class FreeShipping(BaseModel):
    id: int
    product_id: int
    eligible_country_ids: list[int] = []
