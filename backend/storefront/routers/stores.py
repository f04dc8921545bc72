"""
Store endpoints for sellers: store details, default shipping and shipping rates.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.database import get_db
from storefront.routers.auth import get_request_context
from storefront.schemas.store import (
    Store as StoreSchema,
    StoreUpsert,
    StoreDefaultShipping,
    ShippingRate as ShippingRateSchema,
    ShippingRateUpsert,
    CountryWithShippingRate,
)
from storefront.schemas.product import ProductWithVariant, ProductUpsertResult, StoreProduct
from storefront.services.auth import RequestContext
from storefront.services import stores as store_service
from storefront.services import products as product_service

router = APIRouter(prefix="/stores", tags=["stores"])


@router.post("", response_model=StoreSchema)
def upsert_store(
    data: StoreUpsert,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    """Create a store, or update one of the current seller's stores (seller only)."""
    return store_service.upsert_store(db, ctx, data)


@router.get("/mine", response_model=list[StoreSchema])
def list_my_stores(
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    """Stores owned by the current seller."""
    return store_service.list_seller_stores(db, ctx)


@router.get("/{store_url}/shipping", response_model=StoreDefaultShipping)
def get_default_shipping(store_url: str, db: Session = Depends(get_db)):
    """Default shipping details of a store."""
    return store_service.get_store_default_shipping_details(db, store_url)


@router.put("/{store_url}/shipping", response_model=StoreSchema)
def update_default_shipping(
    store_url: str,
    details: StoreDefaultShipping,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    """Update default shipping details of the seller's store."""
    return store_service.update_store_default_shipping_details(db, ctx, store_url, details)


@router.get("/{store_url}/shipping-rates", response_model=list[CountryWithShippingRate])
def get_shipping_rates(
    store_url: str,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    """All countries with the store's shipping rate for each (null when none)."""
    return store_service.get_store_shipping_rates(db, ctx, store_url)


@router.put("/{store_url}/shipping-rates", response_model=ShippingRateSchema)
def upsert_shipping_rate(
    store_url: str,
    data: ShippingRateUpsert,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    """Create or update the store's shipping rate for one country."""
    return store_service.upsert_shipping_rate(db, ctx, store_url, data)


@router.get("/{store_url}/products", response_model=list[StoreProduct])
def list_store_products(store_url: str, db: Session = Depends(get_db)):
    """All products of a store with their variants."""
    return product_service.get_all_products_for_store(db, store_url)


@router.post("/{store_url}/products", response_model=ProductUpsertResult)
def upsert_product(
    store_url: str,
    data: ProductWithVariant,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    """Create a product with a variant, or add/update a variant of an existing product."""
    return product_service.upsert_product(db, ctx, data, store_url)
