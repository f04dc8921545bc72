"""
Identity Provider Service

Mirrors identity-provider users into the local users table from signed
lifecycle webhooks (user.created / user.updated / user.deleted) and pushes
the stored role back into the provider's private metadata.
"""
import logging
from typing import Optional

import httpx
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from svix.webhooks import Webhook, WebhookVerificationError

from storefront.config import get_settings
from storefront.models import User, Role
from storefront.services.auth import get_user_by_id, get_user_by_email
from storefront.services.errors import Conflict, ValidationFailed

logger = logging.getLogger(__name__)

METADATA_TIMEOUT = 10.0  # seconds


def verify_webhook(payload: bytes, headers) -> dict:
    """Check the svix signature headers and return the decoded event."""
    settings = get_settings()
    if not settings.identity_webhook_secret:
        raise ValidationFailed("Webhook secret is not configured")

    try:
        return Webhook(settings.identity_webhook_secret).verify(payload, dict(headers.items()))
    except WebhookVerificationError as e:
        raise ValidationFailed(f"Invalid webhook signature: {e}")
    except ValueError:
        raise ValidationFailed("Webhook payload is not valid JSON")


def sync_user_role(user: User, client: Optional[httpx.Client] = None) -> bool:
    """Write the user's role into the provider's private metadata. Returns False when skipped."""
    settings = get_settings()
    if not settings.identity_secret_key:
        logger.warning(f"Identity secret key not configured, skipping role sync for {user.id}")
        return False

    owns_client = client is None
    client = client or httpx.Client(timeout=METADATA_TIMEOUT)
    try:
        response = client.patch(
            f"{settings.identity_api_url}/users/{user.id}/metadata",
            json={"private_metadata": {"role": user.role.value}},
            headers={"Authorization": f"Bearer {settings.identity_secret_key}"},
        )
        response.raise_for_status()
    finally:
        if owns_client:
            client.close()
    return True


def upsert_user_from_event(db: Session, data: dict) -> User:
    """Create or update the local user from a user.* payload.

    The user is matched by id, then by email, so an event that changes the
    email updates the existing row.
    """
    emails = data.get("email_addresses") or []
    email = emails[0].get("email_address", "") if emails else ""
    if not data.get("id") or not email:
        raise ValidationFailed("User event is missing id or email")

    name = " ".join(part for part in (data.get("first_name"), data.get("last_name")) if part)

    user = get_user_by_id(db, data["id"]) or get_user_by_email(db, email)
    if user is None:
        user = User(id=data["id"], role=Role.USER)
        db.add(user)

    user.email = email
    user.name = name or email.split("@")[0]
    user.picture = data.get("image_url")
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.error(f"Failed to sync user {data['id']}: {e}")
        raise Conflict("A user with the same email already exists", user_id=data["id"]) from e
    db.refresh(user)
    return user


def delete_user(db: Session, user_id: str) -> bool:
    user = get_user_by_id(db, user_id)
    if user is None:
        return False
    db.delete(user)
    db.commit()
    return True


def handle_user_event(db: Session, event: dict, client: Optional[httpx.Client] = None) -> Optional[User]:
    """Apply one verified webhook event to the users table."""
    event_type = event.get("type")
    data = event.get("data") or {}

    if event_type in ("user.created", "user.updated"):
        user = upsert_user_from_event(db, data)
        logger.info(f"Synced user {user.id} from {event_type}")
        try:
            sync_user_role(user, client)
        except httpx.HTTPError as e:
            logger.warning(f"Failed to sync role for user {user.id}: {e}")
        return user

    if event_type == "user.deleted":
        if delete_user(db, data.get("id")):
            logger.info(f"Deleted user {data.get('id')}")
        return None

    logger.info(f"Ignoring identity event {event_type}")
    return None
