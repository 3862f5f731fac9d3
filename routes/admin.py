import logging
from fastapi import APIRouter, HTTPException, Depends
from auth import hash_password, verify_password
from notifications import NotificationKind, WEBHOOK_SETTING_KEYS, get_webhook_url
from permissions import require, can_manage_admin_password, can_configure_webhooks
from schemas import SetPasswordRequest, UnlockRequest, PasswordStatus, WebhookConfig, WebhookUpdate
from schemas.admin import MIN_ADMIN_PASSWORD_LENGTH
from storage.app_settings import get_setting, set_setting, ADMIN_PASSWORD_KEY
from storage.users import set_admin_access
from routes.deps import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])

def require_owner(current_user: dict = Depends(get_current_user)) -> dict:
    require(can_manage_admin_password(current_user), "Owner access required")
    return current_user

def require_webhook_manager(current_user: dict = Depends(get_current_user)) -> dict:
    require(can_configure_webhooks(current_user), "Owner or Supreme Leader access required")
    return current_user

@router.get("/check-password", response_model=PasswordStatus)
def check_password(current_user: dict = Depends(require_owner)):
    return {"has_password": bool(get_setting(ADMIN_PASSWORD_KEY))}

@router.post("/set-password")
def set_password(data: SetPasswordRequest, current_user: dict = Depends(require_owner)):
    if len(data.password) < MIN_ADMIN_PASSWORD_LENGTH:
        raise HTTPException(status_code=400, detail=f"Password must be at least {MIN_ADMIN_PASSWORD_LENGTH} characters")
    set_setting(ADMIN_PASSWORD_KEY, hash_password(data.password))
    logger.info("Admin password changed by %s", current_user["id"])
    return {"success": True}

@router.post("/unlock")
def unlock(data: UnlockRequest, current_user: dict = Depends(get_current_user)):
    """Grant hasAdminAccess to any user who knows the shared admin password."""
    if not data.password:
        raise HTTPException(status_code=400, detail="Password required")
    stored = get_setting(ADMIN_PASSWORD_KEY)
    if not stored:
        raise HTTPException(status_code=400, detail="Admin password not set")
    if not verify_password(data.password, stored):
        logger.info("Failed admin unlock attempt by %s", current_user["id"])
        raise HTTPException(status_code=403, detail="Incorrect password")
    set_admin_access(current_user["id"], True)
    logger.info("Admin access unlocked by %s", current_user["id"])
    return {"success": True}

@router.get("/webhooks", response_model=WebhookConfig)
def get_webhooks(current_user: dict = Depends(require_webhook_manager)):
    return {kind.value: get_webhook_url(kind) for kind in NotificationKind}

@router.put("/webhooks", response_model=WebhookConfig)
def update_webhooks(data: WebhookUpdate, current_user: dict = Depends(require_webhook_manager)):
    for kind in NotificationKind:
        url = getattr(data, kind.value)
        if url is not None:
            set_setting(WEBHOOK_SETTING_KEYS[kind], url)
            logger.info("%s webhook %s by %s", kind.value, "set" if url else "cleared", current_user["id"])
    return {kind.value: get_webhook_url(kind) for kind in NotificationKind}
