import logging
from fastapi import APIRouter, HTTPException, Depends
from typing import List
from permissions import require, can_manage_roles
from schemas import UserResponse, PostWithAuthor, RoleGrant
from storage.users import get_user, set_role
from storage.posts import get_user_posts
from routes.deps import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])

def get_user_or_404(user_id: str) -> dict:
    user = get_user(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user

@router.get("/me/posts", response_model=List[PostWithAuthor])
def get_my_posts(current_user: dict = Depends(get_current_user)):
    return get_user_posts(current_user["id"], current_user["id"])

@router.get("/{user_id}", response_model=UserResponse)
def get_user_profile(user_id: str, current_user: dict = Depends(get_current_user)):
    return get_user_or_404(user_id)

@router.get("/{user_id}/posts", response_model=List[PostWithAuthor])
def get_posts_by_user(user_id: str, current_user: dict = Depends(get_current_user)):
    get_user_or_404(user_id)
    return get_user_posts(user_id, current_user["id"])

@router.post("/{user_id}/role", response_model=UserResponse)
def grant_role(user_id: str, data: RoleGrant, current_user: dict = Depends(get_current_user)):
    require(can_manage_roles(current_user), "Admin access required")
    get_user_or_404(user_id)
    user = set_role(user_id, data.role.value)
    logger.info("Role %r granted to %s by %s", data.role.value, user_id, current_user["id"])
    return user

@router.delete("/{user_id}/role", response_model=UserResponse)
def revoke_role(user_id: str, current_user: dict = Depends(get_current_user)):
    require(can_manage_roles(current_user), "Admin access required")
    get_user_or_404(user_id)
    user = set_role(user_id, None)
    logger.info("Role revoked from %s by %s", user_id, current_user["id"])
    return user
