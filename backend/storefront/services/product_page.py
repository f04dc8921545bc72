"""
Product Page Service

Builds the product detail page: one product with the variant picked by
slug, flattened into a single object together with shipping to the
shopper's country, store follow data and rating statistics.
"""
import logging
from typing import NamedTuple, Optional

from sqlalchemy.orm import Session, selectinload

from storefront.models import Product, ProductVariant, Review
from storefront.schemas.category import Category, SubCategory, OfferTag
from storefront.schemas.product import (
    ProductPageData,
    ProductPageStore,
    ProductPageSpecs,
    VariantInfo,
    VariantImage,
    Color,
    Size,
    Spec,
    Question,
)
from storefront.schemas.review import Review as ReviewSchema, RatingStatistics
from storefront.schemas.shipping import ShippingDetails
from storefront.services.auth import RequestContext
from storefront.services.products import variant_url
from storefront.services.reviews import get_rating_statistics
from storefront.services.shipping import get_shipping_details
from storefront.services.users import get_store_followers_count, is_user_following_store

logger = logging.getLogger(__name__)

PAGE_REVIEWS = 4


class ProductDetails(NamedTuple):
    product: Product
    variant: ProductVariant
    variants_info: list[VariantInfo]
    reviews: list[Review]


def _variant_info(product_slug: str, variant: ProductVariant) -> VariantInfo:
    return VariantInfo(
        variant_name=variant.variant_name,
        variant_slug=variant.slug,
        variant_image=variant.variant_image,
        variant_url=variant_url(product_slug, variant.slug),
        images=[VariantImage.model_validate(image) for image in variant.images],
        sizes=[Size.model_validate(size) for size in variant.sizes],
        colors=[Color.model_validate(color) for color in variant.colors],
    )


def retrieve_product_details(db: Session, product_slug: str, variant_slug: str) -> Optional[ProductDetails]:
    """Load a product and the one variant matching `variant_slug`.

    Returns None unless the slugs resolve to exactly one variant of the product.
    """
    product = db.query(Product).filter(Product.slug == product_slug).options(
        selectinload(Product.category),
        selectinload(Product.sub_category),
        selectinload(Product.offer_tag),
        selectinload(Product.store),
        selectinload(Product.specs),
        selectinload(Product.questions),
        selectinload(Product.free_shipping),
    ).first()
    if not product:
        return None

    matches = db.query(ProductVariant).filter(
        ProductVariant.product_id == product.id,
        ProductVariant.slug == variant_slug,
    ).all()
    if len(matches) != 1:
        return None

    reviews = db.query(Review).filter(Review.product_id == product.id).options(
        selectinload(Review.images),
        selectinload(Review.user),
    ).order_by(Review.id).limit(PAGE_REVIEWS).all()

    variants = db.query(ProductVariant).filter(ProductVariant.product_id == product.id).options(
        selectinload(ProductVariant.images),
        selectinload(ProductVariant.sizes),
        selectinload(ProductVariant.colors),
    ).order_by(ProductVariant.id).all()

    return ProductDetails(
        product=product,
        variant=matches[0],
        variants_info=[_variant_info(product.slug, v) for v in variants],
        reviews=reviews,
    )


def format_product_response(
    details: ProductDetails,
    shipping_details: Optional[ShippingDetails],
    store_followers_count: int,
    is_following_store: bool,
    rating_statistics: RatingStatistics,
) -> ProductPageData:
    """Merge product-level and variant-level fields into the page object."""
    product, variant = details.product, details.variant
    store = product.store

    return ProductPageData(
        product_id=product.id,
        variant_id=variant.id,
        product_slug=product.slug,
        variant_slug=variant.slug,
        name=product.name,
        description=product.description,
        variant_name=variant.variant_name,
        variant_description=variant.variant_description,
        images=[VariantImage.model_validate(image) for image in variant.images],
        category=Category.model_validate(product.category),
        sub_category=SubCategory.model_validate(product.sub_category),
        offer_tag=OfferTag.model_validate(product.offer_tag) if product.offer_tag else None,
        is_sale=variant.is_sale,
        sale_end_date=variant.sale_end_date,
        brand=product.brand,
        sku=variant.sku,
        weight=variant.weight,
        variant_image=variant.variant_image,
        store=ProductPageStore(
            id=store.id,
            url=store.url,
            name=store.name,
            logo=store.logo,
            followers_count=store_followers_count,
            is_user_following_store=is_following_store,
        ),
        colors=[Color.model_validate(color) for color in variant.colors],
        sizes=[Size.model_validate(size) for size in variant.sizes],
        specs=ProductPageSpecs(
            product=[Spec.model_validate(spec) for spec in product.specs],
            variant=[Spec.model_validate(spec) for spec in variant.specs],
        ),
        questions=[Question.model_validate(question) for question in product.questions],
        rating=product.rating,
        reviews=[ReviewSchema.model_validate(review) for review in details.reviews],
        review_statistics=rating_statistics,
        shipping_details=shipping_details,
        variants_info=details.variants_info,
    )


def get_product_page_data(
    db: Session,
    ctx: RequestContext,
    product_slug: str,
    variant_slug: str,
) -> Optional[ProductPageData]:
    """Everything the product page shows, or None when the product/variant is not found."""
    details = retrieve_product_details(db, product_slug, variant_slug)
    if details is None:
        return None

    product = details.product
    shipping_details = get_shipping_details(
        db,
        product.shipping_fee_method,
        ctx.country,
        product.store,
        product.free_shipping,
    )

    user_id = ctx.user.id if ctx.user else None
    return format_product_response(
        details,
        shipping_details,
        get_store_followers_count(db, product.store_id),
        is_user_following_store(db, product.store_id, user_id),
        get_rating_statistics(db, product.id),
    )
