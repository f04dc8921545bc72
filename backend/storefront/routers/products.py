from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.database import get_db
from storefront.routers.auth import get_request_context
from storefront.schemas.product import ProductFilters, ProductsPage, ProductMainInfo
from storefront.schemas.review import Review as ReviewSchema, RatingStatistics, ReviewsOrderBy
from storefront.schemas.shipping import FreeShipping, FreeShippingUpdate
from storefront.services.auth import RequestContext
from storefront.services import products as product_service
from storefront.services import reviews as review_service

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=ProductsPage)
def list_products(
    store: str | None = None,
    category: str | None = None,
    sub_category: str | None = None,
    offer_tag: str | None = None,
    sort_by: str = "",
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db)
):
    """List product cards with optional store/category/subcategory/offer tag filters (by url)."""
    filters = ProductFilters(store=store, category=category, sub_category=sub_category, offer_tag=offer_tag)
    return product_service.get_products(db, filters, sort_by, page, page_size)


@router.get("/{product_id}", response_model=ProductMainInfo)
def get_product_main_info(product_id: int, db: Session = Depends(get_db)):
    """Main information of a product."""
    return product_service.get_product_main_info(db, product_id)


@router.delete("/{product_id}")
def delete_product(
    product_id: int,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    """Delete a product and its variants (owning seller only)."""
    product_service.delete_product(db, ctx, product_id)
    return {"message": "Product deleted", "product_id": product_id}


@router.put("/{product_id}/free-shipping", response_model=FreeShipping | None)
def update_free_shipping(
    product_id: int,
    data: FreeShippingUpdate,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    """Set the countries the product ships to for free; an empty list removes free shipping."""
    free_shipping = product_service.upsert_free_shipping(db, ctx, product_id, data.eligible_country_ids)
    if free_shipping is None:
        return None
    return FreeShipping(
        id=free_shipping.id,
        product_id=free_shipping.product_id,
        eligible_country_ids=[c.country_id for c in free_shipping.eligible_countries],
    )


@router.get("/{product_id}/reviews", response_model=list[ReviewSchema])
def list_reviews(
    product_id: int,
    rating: float | None = Query(None, ge=1, le=5),
    has_images: bool = False,
    order_by: ReviewsOrderBy | None = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(4, ge=1, le=50),
    db: Session = Depends(get_db)
):
    """Filtered, sorted, paginated reviews of a product."""
    return review_service.get_product_filtered_reviews(
        db, product_id, rating, has_images, order_by, page, page_size
    )


@router.get("/{product_id}/rating-statistics", response_model=RatingStatistics)
def rating_statistics(product_id: int, db: Session = Depends(get_db)):
    """Five-bucket rating histogram of a product."""
    return review_service.get_rating_statistics(db, product_id)
