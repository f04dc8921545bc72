"""
User Service

Store follow state for shoppers.
"""
from sqlalchemy.orm import Session

from storefront.models import Store, User, store_followers
from storefront.services.auth import RequestContext
from storefront.services.errors import NotFound, operation


def get_store_followers_count(db: Session, store_id: int) -> int:
    return db.query(store_followers).filter(store_followers.c.store_id == store_id).count()


def is_user_following_store(db: Session, store_id: int, user_id: str | None) -> bool:
    if not user_id:
        return False
    row = db.query(store_followers).filter(
        store_followers.c.store_id == store_id,
        store_followers.c.user_id == user_id,
    ).first()
    return row is not None


@operation("toggle store follow")
def follow_store(db: Session, ctx: RequestContext, store_id: int) -> bool:
    """Flip the current user's follow on a store.

    Returns True when the user now follows the store, False when the call
    unfollowed it. There is no idempotent set: every call flips.
    """
    user = ctx.require_user()

    store = db.query(Store).filter(Store.id == store_id).first()
    if not store:
        raise NotFound("Store not found", store_id=store_id)

    user_data = db.query(User).filter(User.id == user.id).first()
    if not user_data:
        raise NotFound("User not found.", user_id=user.id)

    if is_user_following_store(db, store_id, user_data.id):
        store.followers.remove(user_data)
        following = False
    else:
        store.followers.append(user_data)
        following = True

    db.commit()
    return following
