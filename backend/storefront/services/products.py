"""
Product Service

Seller product management and the public product listing.
"""
import math
import logging
from typing import Optional

from sqlalchemy import desc
from sqlalchemy.orm import Session, selectinload

from storefront.models import (
    Product,
    ProductVariant,
    ProductVariantImage,
    Color,
    Size,
    Spec,
    Question,
    Category,
    SubCategory,
    OfferTag,
    Store,
    Country,
    FreeShipping,
    FreeShippingCountry,
    Role,
)
from storefront.schemas.product import (
    ProductWithVariant,
    ProductFilters,
    ProductUpsertResult,
    ProductMainInfo,
    ProductCard,
    ProductsPage,
    VariantSimplified,
    VariantImageLink,
    VariantImage,
    Size as SizeSchema,
)
from storefront.services.auth import RequestContext
from storefront.services.errors import NotFound, Forbidden, ValidationFailed, operation
from storefront.services.slugs import generate_unique_slug
from storefront.services.stores import get_store_by_url

logger = logging.getLogger(__name__)

SORT_OPTIONS = {
    "most-popular": (desc(Product.sales), desc(Product.id)),
    "new-arrivals": (desc(Product.created_at), desc(Product.id)),
    "top-rated": (desc(Product.rating), desc(Product.id)),
}


def variant_url(product_slug: str, variant_slug: str) -> str:
    return f"/product/{product_slug}/{variant_slug}"


def _check_catalogue_refs(db: Session, data: ProductWithVariant):
    sub_category = db.query(SubCategory).filter(SubCategory.id == data.sub_category_id).first()
    if not db.query(Category.id).filter(Category.id == data.category_id).first():
        raise NotFound(f'Category with ID "{data.category_id}" not found.', category_id=data.category_id)
    if not sub_category:
        raise NotFound(f'SubCategory with ID "{data.sub_category_id}" not found.', sub_category_id=data.sub_category_id)
    if sub_category.category_id != data.category_id:
        raise ValidationFailed(
            "SubCategory does not belong to the selected category",
            category_id=data.category_id,
            sub_category_id=data.sub_category_id,
        )
    if data.offer_tag_id is not None and not db.query(OfferTag.id).filter(OfferTag.id == data.offer_tag_id).first():
        raise NotFound(f"Offer tag with ID {data.offer_tag_id} not found.", offer_tag_id=data.offer_tag_id)


def _fill_variant(variant: ProductVariant, data: ProductWithVariant):
    """Copy variant-level fields from the submitted form, replacing child rows."""
    variant.variant_name = data.variant_name
    variant.variant_description = data.variant_description
    variant.variant_image = data.variant_image
    variant.is_sale = data.is_sale
    variant.sale_end_date = (data.sale_end_date or "") if data.is_sale else ""
    variant.sku = data.sku
    variant.weight = data.weight
    variant.keywords = ",".join(data.keywords)
    variant.images = [
        ProductVariantImage(url=image.url, alt=image.url.split("/")[-1])
        for image in data.images
    ]
    variant.colors = [Color(name=color.color) for color in data.colors]
    variant.sizes = [
        Size(size=size.size, quantity=size.quantity, price=size.price, discount=size.discount)
        for size in data.sizes
    ]
    variant.specs = [Spec(name=spec.name, value=spec.value) for spec in data.variant_specs]
    return variant


def _fill_product(product: Product, data: ProductWithVariant, is_new: bool):
    """Copy product-level fields; the slug is only assigned on creation.

    On an existing product, specs and questions are only replaced when the
    form sends some, so adding a variant does not wipe them.
    """
    product.name = data.name
    product.description = data.description
    product.brand = data.brand
    product.category_id = data.category_id
    product.sub_category_id = data.sub_category_id
    product.offer_tag_id = data.offer_tag_id
    product.shipping_fee_method = data.shipping_fee_method
    if is_new or data.product_specs:
        product.specs = [Spec(name=spec.name, value=spec.value) for spec in data.product_specs]
    if is_new or data.questions:
        product.questions = [
            Question(question=question.question, answer=question.answer)
            for question in data.questions
        ]
    return product


@operation("upsert product")
def upsert_product(db: Session, ctx: RequestContext, data: ProductWithVariant, store_url: str) -> ProductUpsertResult:
    """Create a product with its first variant, or add/update a variant on an existing product.

    The product and its variant are written in a single commit.
    """
    user = ctx.require_role(Role.SELLER)
    store = get_store_by_url(db, store_url)
    if store.user_id != user.id:
        raise Forbidden("Make sure you have the permission to update the store", store_url=store_url)

    _check_catalogue_refs(db, data)

    product = None
    if data.product_id is not None:
        product = db.query(Product).filter(Product.id == data.product_id).first()
        if product is not None and product.store_id != store.id:
            raise Forbidden("Product belongs to another store", product_id=data.product_id)

    is_new = product is None
    if is_new:
        product = Product(
            id=data.product_id,
            store_id=store.id,
            slug=generate_unique_slug(db, data.name, Product),
        )
        db.add(product)

    _fill_product(product, data, is_new)

    variant = None
    if data.variant_id is not None:
        variant = db.query(ProductVariant).filter(ProductVariant.id == data.variant_id).first()
        if variant is not None and variant.product_id != product.id:
            raise Forbidden("Variant belongs to another product", variant_id=data.variant_id)

    if variant is None:
        variant = ProductVariant(
            id=data.variant_id,
            slug=generate_unique_slug(db, data.variant_name, ProductVariant),
        )
        product.variants.append(variant)

    _fill_variant(variant, data)

    db.commit()
    db.refresh(product)
    db.refresh(variant)
    logger.info(f"Upserted product {product.slug} / variant {variant.slug} for store {store.url}")

    return ProductUpsertResult(
        product_id=product.id,
        variant_id=variant.id,
        product_slug=product.slug,
        variant_slug=variant.slug,
    )


@operation("fetch product main info")
def get_product_main_info(db: Session, product_id: int) -> ProductMainInfo:
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise NotFound(f'Product with ID "{product_id}" not found.', product_id=product_id)

    return ProductMainInfo(
        product_id=product.id,
        name=product.name,
        description=product.description,
        brand=product.brand,
        category_id=product.category_id,
        sub_category_id=product.sub_category_id,
        offer_tag_id=product.offer_tag_id,
        store_id=product.store_id,
        shipping_fee_method=product.shipping_fee_method,
    )


@operation("fetch products for store")
def get_all_products_for_store(db: Session, store_url: str) -> list[Product]:
    store = get_store_by_url(db, store_url)
    return db.query(Product).filter(Product.store_id == store.id).options(
        selectinload(Product.category),
        selectinload(Product.sub_category),
        selectinload(Product.offer_tag),
        selectinload(Product.store),
        selectinload(Product.variants).selectinload(ProductVariant.images),
        selectinload(Product.variants).selectinload(ProductVariant.colors),
        selectinload(Product.variants).selectinload(ProductVariant.sizes),
    ).order_by(Product.id).all()


@operation("delete product")
def delete_product(db: Session, ctx: RequestContext, product_id: int) -> bool:
    """Delete a product with its variants; only the owning seller may."""
    user = ctx.require_role(Role.SELLER)

    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise NotFound(f'Product with ID "{product_id}" not found.', product_id=product_id)
    if product.store.user_id != user.id:
        raise Forbidden("Make sure you have the permission to delete this product", product_id=product_id)

    db.delete(product)
    db.commit()
    return True


@operation("update free shipping")
def upsert_free_shipping(db: Session, ctx: RequestContext, product_id: int, country_ids: list[int]) -> FreeShipping | None:
    """Set the countries a product ships to for free. An empty list removes free shipping."""
    user = ctx.require_role(Role.SELLER)

    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise NotFound(f'Product with ID "{product_id}" not found.', product_id=product_id)
    if product.store.user_id != user.id:
        raise Forbidden("Make sure you have the permission to update this product", product_id=product_id)

    country_ids = sorted(set(country_ids))
    found = {c.id for c in db.query(Country.id).filter(Country.id.in_(country_ids)).all()}
    missing = [cid for cid in country_ids if cid not in found]
    if missing:
        raise NotFound(f"Countries not found: {missing}", country_ids=missing)

    if not country_ids:
        if product.free_shipping is not None:
            product.free_shipping = None
            db.commit()
        return None

    free_shipping = product.free_shipping or FreeShipping(product_id=product.id)
    if free_shipping.eligible_countries:
        # old rows must be gone before re-inserting the same (free_shipping, country) pairs
        free_shipping.eligible_countries.clear()
        db.flush()
    free_shipping.eligible_countries = [FreeShippingCountry(country_id=cid) for cid in country_ids]
    product.free_shipping = free_shipping
    db.commit()
    db.refresh(free_shipping)
    return free_shipping


def _lookup_id(db: Session, model, url: Optional[str]):
    if not url:
        return None
    row = db.query(model.id).filter(model.url == url).first()
    return row.id if row else None


def _to_card(product: Product) -> ProductCard:
    variants = product.variants
    return ProductCard(
        id=product.id,
        slug=product.slug,
        name=product.name,
        rating=product.rating,
        sales=product.sales,
        variants=[
            VariantSimplified(
                variant_id=variant.id,
                variant_name=variant.variant_name,
                variant_slug=variant.slug,
                images=[VariantImage.model_validate(image) for image in variant.images],
                sizes=[SizeSchema.model_validate(size) for size in variant.sizes],
            )
            for variant in variants
        ],
        variant_images=[
            VariantImageLink(
                url=variant_url(product.slug, variant.slug),
                image=variant.variant_image or (variant.images[0].url if variant.images else ""),
            )
            for variant in variants
        ],
    )


@operation("fetch products")
def get_products(
    db: Session,
    filters: Optional[ProductFilters] = None,
    sort_by: str = "",
    page: int = 1,
    page_size: int = 10,
) -> ProductsPage:
    """Paginated product cards, filtered by store/category/subcategory/offer tag url.

    A filter naming an unknown url is ignored.
    """
    if page < 1 or page_size < 1:
        raise ValidationFailed("Page and page size must be positive", page=page, page_size=page_size)

    filters = filters or ProductFilters()
    query = db.query(Product)

    store_id = _lookup_id(db, Store, filters.store)
    if store_id is not None:
        query = query.filter(Product.store_id == store_id)

    category_id = _lookup_id(db, Category, filters.category)
    if category_id is not None:
        query = query.filter(Product.category_id == category_id)

    sub_category_id = _lookup_id(db, SubCategory, filters.sub_category)
    if sub_category_id is not None:
        query = query.filter(Product.sub_category_id == sub_category_id)

    offer_tag_id = _lookup_id(db, OfferTag, filters.offer_tag)
    if offer_tag_id is not None:
        query = query.filter(Product.offer_tag_id == offer_tag_id)

    total_count = query.count()

    products = query.options(
        selectinload(Product.variants).selectinload(ProductVariant.images),
        selectinload(Product.variants).selectinload(ProductVariant.sizes),
    ).order_by(*SORT_OPTIONS.get(sort_by, (Product.id.asc(),))).offset((page - 1) * page_size).limit(page_size).all()

    return ProductsPage(
        products=[_to_card(product) for product in products],
        total_pages=math.ceil(total_count / page_size),
        current_page=page,
        page_size=page_size,
        total_count=total_count,
    )
