"""
Shopper country endpoints: store the chosen country in a cookie, or detect it from the IP.
"""
from fastapi import APIRouter, Body, Depends, Request, Response, HTTPException
from pydantic import ValidationError
from sqlalchemy.orm import Session

from storefront.config import get_settings
from storefront.database import get_db
from storefront.schemas.shipping import UserCountry
from storefront.services.country import COOKIE_NAME, detect_country, serialize_country_cookie

router = APIRouter(prefix="/user-country", tags=["user-country"])


def _set_country_cookie(response: Response, country: UserCountry):
    settings = get_settings()
    response.set_cookie(
        COOKIE_NAME,
        serialize_country_cookie(country),
        httponly=True,
        secure=settings.cookie_secure or settings.environment == "production",
        samesite="lax",
    )


@router.post("")
def set_user_country(response: Response, body: dict = Body(...)):
    """Save the shopper's country in the http-only `userCountry` cookie."""
    data = body.get("userCountry") or body.get("user_country")
    if not data:
        raise HTTPException(status_code=400, detail="User country data not sent.")

    try:
        country = UserCountry.model_validate(data)
    except ValidationError:
        raise HTTPException(status_code=400, detail="Invalid user country data.")

    _set_country_cookie(response, country)
    return {"message": "User country data saved.", "userCountry": country}


@router.get("/detect", response_model=UserCountry)
def detect_user_country(request: Request, response: Response, db: Session = Depends(get_db)):
    """Detect the shopper's country from their IP and remember it in the cookie."""
    forwarded = request.headers.get("x-forwarded-for")
    ip = forwarded.split(",")[0].strip() if forwarded else None
    country = detect_country(db, ip)
    _set_country_cookie(response, country)
    return country
