"""
Shopper Country Service

Works out which country a shopper is browsing from: the `userCountry`
cookie when present, otherwise an IP geolocation lookup, otherwise the
configured default country.
"""
import json
import logging
from typing import Optional

import httpx
from pydantic import ValidationError
from sqlalchemy.orm import Session

from storefront.config import get_settings
from storefront.models import Country
from storefront.schemas.shipping import UserCountry

logger = logging.getLogger(__name__)

COOKIE_NAME = "userCountry"
GEOLOCATION_TIMEOUT = 5.0  # seconds


def default_user_country() -> UserCountry:
    settings = get_settings()
    return UserCountry(name=settings.default_country_name, code=settings.default_country_code)


def parse_country_cookie(raw: Optional[str]) -> UserCountry:
    """Parse the JSON `userCountry` cookie, falling back to the default country."""
    if not raw:
        return default_user_country()

    try:
        data = json.loads(raw)
        if isinstance(data, dict) and data.get("name") and data.get("code"):
            return UserCountry(
                name=data["name"],
                code=data["code"],
                city=data.get("city") or "",
                region=data.get("region") or "",
            )
    except (ValueError, ValidationError) as e:
        logger.warning(f"Failed to parse {COOKIE_NAME} cookie: {e}")

    return default_user_country()


def serialize_country_cookie(country: UserCountry) -> str:
    return json.dumps(country.model_dump())


def country_name_for_code(db: Session, code: str) -> Optional[str]:
    country = db.query(Country).filter(Country.code == code).first()
    return country.name if country else None


def detect_country(
    db: Session,
    ip: Optional[str] = None,
    client: Optional[httpx.Client] = None,
) -> UserCountry:
    """Look the shopper's IP up with ipinfo; any failure yields the default country."""
    settings = get_settings()
    url = f"{settings.ipinfo_url}/{ip}" if ip else f"{settings.ipinfo_url}/"
    params = {"token": settings.ipinfo_token} if settings.ipinfo_token else {}

    owns_client = client is None
    client = client or httpx.Client(timeout=GEOLOCATION_TIMEOUT)
    try:
        response = client.get(url, params=params)
        response.raise_for_status()
        data = response.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.warning(f"IP geolocation failed, using default country: {e}")
        return default_user_country()
    finally:
        if owns_client:
            client.close()

    code = data.get("country")
    if not code:
        logger.warning(f"IP geolocation returned no country for {ip or 'request origin'}")
        return default_user_country()

    return UserCountry(
        name=country_name_for_code(db, code) or code,
        code=code,
        city=data.get("city") or "",
        region=data.get("region") or "",
    )
