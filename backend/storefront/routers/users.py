from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.database import get_db
from storefront.routers.auth import get_request_context
from storefront.schemas.user import FollowResult
from storefront.services.auth import RequestContext
from storefront.services.users import follow_store

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/me/following/{store_id}", response_model=FollowResult)
def toggle_follow(
    store_id: int,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    """Follow the store if not following it yet, otherwise unfollow it."""
    return FollowResult(store_id=store_id, is_following=follow_store(db, ctx, store_id))
