import logging
import sqlite3
from fastapi import Depends, Header, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from typing import Optional
from auth import Identity
from config import settings
from realtime import ConnectionRegistry
from storage.users import get_user, sync_user

logger = logging.getLogger(__name__)

bearer = HTTPBearer(auto_error=False)

def get_identity(
    request: Request,
    cred: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    x_user_id: Optional[str] = Header(None),
) -> Identity:
    """Resolve the caller through the strategy chosen at startup, or 401."""
    strategy = request.app.state.identity
    token = cred.credentials if cred else None
    identity = strategy.authenticate(token=token, claimed_user_id=x_user_id)
    if identity is None:
        detail = "Unauthorized - Invalid token" if token else "Unauthorized - No token provided"
        raise HTTPException(status_code=401, detail=detail)
    return identity

def sync_from_claims(identity: Identity) -> Optional[dict]:
    """Load the user row, upserting it from token claims when they carry an email.

    Raises sqlite3.IntegrityError when the email belongs to another account.
    """
    user = get_user(identity.user_id)
    if identity.email and (user is None or user["email"] != identity.email):
        display_name = identity.display_name or (user or {}).get("display_name") or identity.email.split("@")[0]
        photo_url = identity.photo_url or (user or {}).get("photo_url")
        user = sync_user(identity.user_id, identity.email, display_name, photo_url, settings.owner_email_set)
    return user

def get_current_user(identity: Identity = Depends(get_identity)) -> dict:
    """The caller's user row, synced from token claims when they carry an email."""
    try:
        user = sync_from_claims(identity)
    except sqlite3.IntegrityError:
        raise HTTPException(status_code=409, detail="Email already belongs to another account")
    if user is None:
        raise HTTPException(status_code=401, detail="Unknown user - call /api/auth/sync first")
    return user

def get_registry(request: Request) -> ConnectionRegistry:
    return request.app.state.registry
