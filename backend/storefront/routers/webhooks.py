import logging

from fastapi import APIRouter, Depends, Request, HTTPException
from sqlalchemy.orm import Session

from storefront.database import get_db
from storefront.services.errors import ValidationFailed
from storefront.services.identity import verify_webhook, handle_user_event

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


@router.post("/identity")
async def identity_webhook(request: Request, db: Session = Depends(get_db)):
    """Mirror identity-provider user lifecycle events into the users table."""
    payload = await request.body()

    try:
        event = verify_webhook(payload, request.headers)
        handle_user_event(db, event)
    except ValidationFailed as e:
        logger.warning(f"Error verifying webhook: {e.message}")
        raise HTTPException(status_code=400, detail="Error verifying webhook")

    return {"message": "Webhook received"}
