import logging
import sqlite3
from fastapi import APIRouter, HTTPException, Depends, Request
from auth import Identity
from config import settings
from schemas import SyncRequest, UserResponse
from storage.users import sync_user
from routes.deps import get_identity, get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["authentication"])

@router.post("/sync", response_model=UserResponse)
def sync(data: SyncRequest, request: Request, identity: Identity = Depends(get_identity)):
    """Create or update the caller's account from identity-provider data.

    A verified token's email always wins over the body, and the body email is
    only accepted by the trusted-header strategy. isOwner is recomputed from the
    allow-list on every sync.
    """
    email = identity.email
    if not email and request.app.state.identity.trusts_claimed_identity:
        email = data.email
    if not email:
        raise HTTPException(status_code=400, detail="Missing required fields")
    try:
        user = sync_user(identity.user_id, email, data.display_name, data.photo_url, settings.owner_email_set)
    except sqlite3.IntegrityError:
        raise HTTPException(status_code=409, detail="Email already belongs to another account")
    logger.debug("Synced user %s (owner=%s)", user["id"], user["is_owner"])
    return user

@router.get("/me", response_model=UserResponse)
def get_me(current_user: dict = Depends(get_current_user)):
    return current_user
