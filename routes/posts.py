import logging
import sqlite3
from fastapi import APIRouter, BackgroundTasks, HTTPException, Depends
from typing import List
from file_utils import parse_attachment_ids, join_attachment_ids
from notifications import notify_post_created
from permissions import require, can_create_admin_post, can_delete_post
from schemas import PostCreate, PostWithAuthor, CommentCreate, CommentResponse, ToggleLikeResponse
from storage import posts as post_store
from storage.files import get_file
from routes.deps import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["posts"])

def normalize_attachments(value):
    """Validate a comma-joined attachment list against uploaded files."""
    try:
        ids = parse_attachment_ids(value)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    for file_id in ids:
        if get_file(file_id) is None:
            raise HTTPException(status_code=404, detail=f"File {file_id} not found")
    return join_attachment_ids(ids)

def get_post_or_404(post_id: int) -> dict:
    post = post_store.get_post_row(post_id)
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")
    return post

@router.get("/posts", response_model=List[PostWithAuthor])
def list_posts(current_user: dict = Depends(get_current_user)):
    return post_store.get_posts(False, current_user["id"])

@router.get("/admin-posts", response_model=List[PostWithAuthor])
def list_admin_posts(current_user: dict = Depends(get_current_user)):
    return post_store.get_posts(True, current_user["id"])

@router.post("/posts", response_model=PostWithAuthor)
def create_post(data: PostCreate, background_tasks: BackgroundTasks, current_user: dict = Depends(get_current_user)):
    if data.is_admin_post:
        require(can_create_admin_post(current_user), "Admin access required")
    attachments = normalize_attachments(data.file_attachment_ids)
    post = post_store.create_post(
        current_user["id"],
        data.content,
        is_admin_post=data.is_admin_post,
        title=data.title,
        file_attachment_ids=attachments,
    )
    background_tasks.add_task(notify_post_created, post, current_user)
    return post_store.get_post(post["id"], current_user["id"])

@router.get("/posts/{post_id}", response_model=PostWithAuthor)
def get_post(post_id: int, current_user: dict = Depends(get_current_user)):
    post = post_store.get_post(post_id, current_user["id"])
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")
    return post

@router.delete("/posts/{post_id}")
def delete_post(post_id: int, current_user: dict = Depends(get_current_user)):
    post = get_post_or_404(post_id)
    require(can_delete_post(current_user, post))
    post_store.delete_post(post_id)
    logger.info("Post %s deleted by %s", post_id, current_user["id"])
    return {"success": True}

@router.post("/posts/{post_id}/like", response_model=ToggleLikeResponse)
def toggle_like(post_id: int, current_user: dict = Depends(get_current_user)):
    get_post_or_404(post_id)
    try:
        is_liked = post_store.toggle_like(post_id, current_user["id"])
    except sqlite3.IntegrityError:
        raise HTTPException(status_code=409, detail="Like was changed concurrently, try again")
    return {"is_liked": is_liked, "likes_count": post_store.get_likes_count(post_id)}

@router.get("/posts/{post_id}/comments", response_model=List[CommentResponse])
def list_comments(post_id: int, current_user: dict = Depends(get_current_user)):
    get_post_or_404(post_id)
    return post_store.get_comments(post_id)

@router.post("/posts/{post_id}/comments", response_model=CommentResponse)
def create_comment(post_id: int, data: CommentCreate, current_user: dict = Depends(get_current_user)):
    get_post_or_404(post_id)
    comment = post_store.create_comment(post_id, current_user["id"], data.content)
    comment["author"] = current_user
    return comment
