from storefront.schemas.user import User, FollowResult
from storefront.schemas.store import (
    Store,
    StoreUpsert,
    StoreDefaultShipping,
    ShippingRate,
    ShippingRateUpsert,
    CountryWithShippingRate,
)
from storefront.schemas.shipping import UserCountry, Country, ShippingDetails, FreeShipping, FreeShippingUpdate
from storefront.schemas.category import (
    Category,
    CategoryUpsert,
    SubCategory,
    SubCategoryUpsert,
    SubCategoryWithCategory,
    OfferTag,
    OfferTagUpsert,
    OfferTagWithProducts,
)
from storefront.schemas.review import Review, RatingBucket, RatingStatistics
from storefront.schemas.product import (
    ProductWithVariant,
    ProductFilters,
    ProductUpsertResult,
    ProductMainInfo,
    StoreProduct,
    ProductCard,
    ProductsPage,
    ProductPageData,
)
from storefront.schemas.cart import CartProduct, CartQuoteRequest, CartQuote

__all__ = [
    "User", "FollowResult",
    "Store", "StoreUpsert", "StoreDefaultShipping", "ShippingRate", "ShippingRateUpsert", "CountryWithShippingRate",
    "UserCountry", "Country", "ShippingDetails", "FreeShipping", "FreeShippingUpdate",
    "Category", "CategoryUpsert", "SubCategory", "SubCategoryUpsert", "SubCategoryWithCategory",
    "OfferTag", "OfferTagUpsert", "OfferTagWithProducts",
    "Review", "RatingBucket", "RatingStatistics",
    "ProductWithVariant", "ProductFilters", "ProductUpsertResult", "ProductMainInfo",
    "StoreProduct", "ProductCard", "ProductsPage", "ProductPageData",
    "CartProduct", "CartQuoteRequest", "CartQuote",
]
