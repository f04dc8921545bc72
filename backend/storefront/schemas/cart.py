from pydantic import BaseModel
from storefront.models.enums import ShippingFeeMethod


class CartProduct(BaseModel):
    """One line of a shopper's cart, as held by the client."""
    product_id: int | None = None
    variant_id: int | None = None
    product_slug: str = ""
    variant_slug: str = ""
    name: str = ""
    variant_name: str = ""
    image: str = ""
    variant_image: str = ""
    size_id: int | None = None
    size: str = ""
    quantity: int = 1
    price: float = 0
    stock: int = 0
    weight: float = 0
    shipping_method: ShippingFeeMethod | None = None
    shipping_service: str = ""
    shipping_fee: float = 0
    extra_shipping_fee: float = 0
    delivery_time_min: int = 0
    delivery_time_max: int = 0
    is_free_shipping: bool = False


class CartQuoteRequest(BaseModel):
    items: list[CartProduct]


class CartLineQuote(BaseModel):
    product_id: int | None
    variant_id: int | None
    size_id: int | None
    is_valid: bool
    line_total: float = 0
    shipping_total: float = 0


class CartQuote(BaseModel):
    lines: list[CartLineQuote]
    subtotal: float
    shipping: float
    total: float
