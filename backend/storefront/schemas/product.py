from pydantic import BaseModel, Field
from datetime import datetime
from storefront.models.enums import ShippingFeeMethod
from storefront.schemas.category import Category, SubCategory, OfferTag
from storefront.schemas.review import Review, RatingStatistics
from storefront.schemas.shipping import ShippingDetails


# ============== Input ==============

class ImageInput(BaseModel):
    url: str


class ColorInput(BaseModel):
    color: str


class SizeInput(BaseModel):
    size: str
    quantity: int = Field(..., ge=0)
    price: float = Field(..., gt=0)
    discount: float = Field(0, ge=0, le=100)


class SpecInput(BaseModel):
    name: str
    value: str


class QuestionInput(BaseModel):
    question: str
    answer: str = ""


class ProductWithVariant(BaseModel):
    """A product together with one of its variants, as submitted by a seller.

    With `product_id` of an existing product the variant is added to (or,
    with a known `variant_id`, updated on) that product; otherwise both are
    created.
    """
    product_id: int | None = None
    variant_id: int | None = None
    name: str = Field(..., min_length=2)
    description: str = ""
    variant_name: str = Field(..., min_length=2)
    variant_description: str = ""
    variant_image: str = ""
    images: list[ImageInput] = Field(..., min_length=1)
    category_id: int
    sub_category_id: int
    offer_tag_id: int | None = None
    is_sale: bool = False
    sale_end_date: str | None = None
    brand: str = ""
    sku: str = ""
    weight: float = Field(..., gt=0)
    shipping_fee_method: ShippingFeeMethod = ShippingFeeMethod.ITEM
    colors: list[ColorInput] = Field(..., min_length=1)
    sizes: list[SizeInput] = Field(..., min_length=1)
    product_specs: list[SpecInput] = []
    variant_specs: list[SpecInput] = []
    keywords: list[str] = []
    questions: list[QuestionInput] = []


class ProductFilters(BaseModel):
    store: str | None = None  # store url
    category: str | None = None  # category url
    sub_category: str | None = None  # subcategory url
    offer_tag: str | None = None  # offer tag url


# ============== Output ==============

class VariantImage(BaseModel):
    id: int
    url: str
    alt: str | None = ""

    class Config:
        from_attributes = True


class Color(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class Size(BaseModel):
    id: int
    size: str
    quantity: int
    price: float
    discount: float = 0

    class Config:
        from_attributes = True


class Spec(BaseModel):
    id: int
    name: str
    value: str

    class Config:
        from_attributes = True


class Question(BaseModel):
    id: int
    question: str
    answer: str | None = ""

    class Config:
        from_attributes = True


class ProductUpsertResult(BaseModel):
    product_id: int
    variant_id: int
    product_slug: str
    variant_slug: str


class ProductMainInfo(BaseModel):
    product_id: int
    name: str
    description: str | None = ""
    brand: str | None = ""
    category_id: int
    sub_category_id: int
    offer_tag_id: int | None = None
    store_id: int
    shipping_fee_method: ShippingFeeMethod


class ProductVariant(BaseModel):
    id: int
    variant_name: str
    variant_description: str | None = ""
    variant_image: str | None = ""
    slug: str
    is_sale: bool = False
    sale_end_date: str | None = ""
    sku: str | None = ""
    weight: float
    images: list[VariantImage] = []
    colors: list[Color] = []
    sizes: list[Size] = []

    class Config:
        from_attributes = True


class StoreRef(BaseModel):
    id: int
    url: str

    class Config:
        from_attributes = True


class StoreProduct(BaseModel):
    """A product as listed in a seller's dashboard."""
    id: int
    name: str
    slug: str
    brand: str | None = ""
    description: str | None = ""
    shipping_fee_method: ShippingFeeMethod
    category: Category
    sub_category: SubCategory
    offer_tag: OfferTag | None = None
    store: StoreRef
    variants: list[ProductVariant] = []
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class VariantSimplified(BaseModel):
    variant_id: int
    variant_name: str
    variant_slug: str
    images: list[VariantImage] = []
    sizes: list[Size] = []


class VariantImageLink(BaseModel):
    url: str  # product page url of the variant
    image: str


class ProductCard(BaseModel):
    id: int
    slug: str
    name: str
    rating: float | None = 0
    sales: int | None = 0
    variants: list[VariantSimplified] = []
    variant_images: list[VariantImageLink] = []


class ProductsPage(BaseModel):
    products: list[ProductCard]
    total_pages: int
    current_page: int
    page_size: int
    total_count: int


class VariantInfo(BaseModel):
    variant_name: str
    variant_slug: str
    variant_image: str | None = ""
    variant_url: str
    images: list[VariantImage] = []
    sizes: list[Size] = []
    colors: list[Color] = []


class ProductPageStore(BaseModel):
    id: int
    url: str
    name: str
    logo: str | None = ""
    followers_count: int
    is_user_following_store: bool


class ProductPageSpecs(BaseModel):
    product: list[Spec] = []
    variant: list[Spec] = []


class ProductPageData(BaseModel):
    """Flattened product + selected variant for the product detail page."""
    product_id: int
    variant_id: int
    product_slug: str
    variant_slug: str
    name: str
    description: str | None = ""
    variant_name: str
    variant_description: str | None = ""
    images: list[VariantImage] = []
    category: Category
    sub_category: SubCategory
    offer_tag: OfferTag | None = None
    is_sale: bool = False
    sale_end_date: str | None = ""
    brand: str | None = ""
    sku: str | None = ""
    weight: float
    variant_image: str | None = ""
    store: ProductPageStore
    colors: list[Color] = []
    sizes: list[Size] = []
    specs: ProductPageSpecs
    questions: list[Question] = []
    rating: float | None = 0
    reviews: list[Review] = []
    review_statistics: RatingStatistics
    shipping_details: ShippingDetails | None = None  # None: no shipping to the shopper's country
    related_products: list[ProductCard] = []
    variants_info: list[VariantInfo] = []
