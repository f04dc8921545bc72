from storefront.models.enums import Role, StoreStatus, ShippingFeeMethod
from storefront.models.user import User, store_followers
from storefront.models.store import Store
from storefront.models.shipping import Country, ShippingRate, FreeShipping, FreeShippingCountry
from storefront.models.category import Category, SubCategory, OfferTag
from storefront.models.product import (
    Product,
    ProductVariant,
    ProductVariantImage,
    Color,
    Size,
    Spec,
    Question,
)
from storefront.models.review import Review, ReviewImage

__all__ = [
    "Role",
    "StoreStatus",
    "ShippingFeeMethod",
    "User",
    "store_followers",
    "Store",
    "Country",
    "ShippingRate",
    "FreeShipping",
    "FreeShippingCountry",
    "Category",
    "SubCategory",
    "OfferTag",
    "Product",
    "ProductVariant",
    "ProductVariantImage",
    "Color",
    "Size",
    "Spec",
    "Question",
    "Review",
    "ReviewImage",
]
