from fastapi import APIRouter

from storefront.schemas.cart import CartQuoteRequest, CartQuote
from storefront.services.cart import quote_cart

router = APIRouter(prefix="/cart", tags=["cart"])


@router.post("/quote", response_model=CartQuote)
def quote(data: CartQuoteRequest):
    """Validate cart lines and total their prices and shipping."""
    return quote_cart(data.items)
