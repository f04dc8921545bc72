"""
Authentication API endpoints and request-context dependencies.

Sessions come from the identity provider; this API only verifies them.
"""
from fastapi import APIRouter, Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from storefront.database import get_db
from storefront.schemas.user import User as UserSchema
from storefront.services.auth import RequestContext, get_current_user_from_token
from storefront.services.country import COOKIE_NAME, parse_country_cookie

router = APIRouter(prefix="/auth", tags=["auth"])
security = HTTPBearer(auto_error=False)


# ============== Dependencies ==============

async def get_request_context(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> RequestContext:
    """Current user (if the bearer token checks out) and the shopper's country."""
    user = None
    if credentials is not None:
        user = get_current_user_from_token(db, credentials.credentials)

    country = parse_country_cookie(request.cookies.get(COOKIE_NAME))
    return RequestContext(user=user, country=country)


# ============== Endpoints ==============

@router.get("/me", response_model=UserSchema)
def get_me(ctx: RequestContext = Depends(get_request_context)):
    """
    Get the current authenticated user's profile.

    Requires authentication.
    """
    return ctx.require_user()
