"""
Product page endpoints.

A product url without a variant redirects to the first variant. A variant
page with exactly one size redirects to the url carrying that size, so the
page always has a size selected or a choice to make.
"""
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from storefront.config import get_settings
from storefront.database import get_db
from storefront.models import Product
from storefront.routers.auth import get_request_context
from storefront.schemas.product import ProductPageData, ProductFilters
from storefront.services.auth import RequestContext
from storefront.services.product_page import get_product_page_data
from storefront.services.products import get_products

router = APIRouter(prefix="/product", tags=["product-page"])

RELATED_PRODUCTS = 12


def _page_url(product_slug: str, variant_slug: str, size_id: int | None = None) -> str:
    settings = get_settings()
    url = f"{settings.api_prefix}/product/{quote(product_slug)}/{quote(variant_slug)}"
    if size_id is not None:
        url += f"?size={size_id}"
    return url


@router.get("/{product_slug}")
def product_redirect(product_slug: str, db: Session = Depends(get_db)):
    """Redirect to the product's first variant, or home when there is none."""
    product = db.query(Product).filter(Product.slug == product_slug).first()
    if not product or not product.variants:
        return RedirectResponse(f"{get_settings().frontend_url}/", status_code=status.HTTP_307_TEMPORARY_REDIRECT)

    return RedirectResponse(
        _page_url(product.slug, product.variants[0].slug),
        status_code=status.HTTP_307_TEMPORARY_REDIRECT,
    )


@router.get("/{product_slug}/{variant_slug}", response_model=ProductPageData)
def product_variant_page(
    product_slug: str,
    variant_slug: str,
    size: str | None = None,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    """Product page data for one variant, with shipping to the shopper's country."""
    data = get_product_page_data(db, ctx, product_slug, variant_slug)
    if data is None:
        raise HTTPException(status_code=404, detail="Product not found")

    if size is not None:
        if not any(str(s.id) == size for s in data.sizes):
            return RedirectResponse(
                _page_url(product_slug, variant_slug),
                status_code=status.HTTP_307_TEMPORARY_REDIRECT,
            )
    elif len(data.sizes) == 1:
        return RedirectResponse(
            _page_url(product_slug, variant_slug, data.sizes[0].id),
            status_code=status.HTTP_307_TEMPORARY_REDIRECT,
        )

    related = get_products(db, ProductFilters(category=data.category.url), "", 1, RELATED_PRODUCTS)
    data.related_products = [card for card in related.products if card.id != data.product_id]
    return data
