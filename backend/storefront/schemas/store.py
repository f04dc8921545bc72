from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from storefront.models.enums import StoreStatus


class StoreDefaultShipping(BaseModel):
    default_shipping_service: str | None = None
    default_shipping_fee_per_item: float | None = Field(None, ge=0)
    default_shipping_fee_additional_item: float | None = Field(None, ge=0)
    default_shipping_fee_per_kg: float | None = Field(None, ge=0)
    default_shipping_fee_fixed: float | None = Field(None, ge=0)
    default_delivery_time_min: int | None = Field(None, ge=0)
    default_delivery_time_max: int | None = Field(None, ge=0)
    return_policy: str | None = None

    class Config:
        from_attributes = True


class StoreBase(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    description: str = ""
    email: EmailStr
    phone: str = Field(..., min_length=3)
    url: str = Field(..., min_length=2, max_length=100)
    logo: str = ""
    cover: str = ""
    featured: bool = False


class StoreUpsert(StoreBase, StoreDefaultShipping):
    id: int | None = None  # set to update an existing store


class Store(StoreBase, StoreDefaultShipping):
    id: int
    user_id: str
    status: StoreStatus
    rating: float | None = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class ShippingRateBase(BaseModel):
    shipping_service: str | None = None
    shipping_fee_per_item: float | None = Field(None, ge=0)
    shipping_fee_additional_item: float | None = Field(None, ge=0)
    shipping_fee_per_kg: float | None = Field(None, ge=0)
    shipping_fee_fixed: float | None = Field(None, ge=0)
    delivery_time_min: int | None = Field(None, ge=0)
    delivery_time_max: int | None = Field(None, ge=0)
    return_policy: str | None = None


class ShippingRateUpsert(ShippingRateBase):
    country_id: int


class ShippingRate(ShippingRateBase):
    id: int
    store_id: int
    country_id: int

    class Config:
        from_attributes = True


class CountryWithShippingRate(BaseModel):
    country_id: int
    country_name: str
    shipping_rate: ShippingRate | None = None
