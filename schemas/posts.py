from pydantic import field_validator
from typing import List, Optional
from datetime import datetime
from schemas.shared import CamelModel, UserResponse, clean_content

MAX_POST_LENGTH = 2000
MAX_TITLE_LENGTH = 200
MAX_COMMENT_LENGTH = 1000

class PostCreate(CamelModel):
    content: str
    title: Optional[str] = None
    is_admin_post: bool = False
    file_attachment_ids: Optional[str] = None

    @field_validator('content')
    @classmethod
    def validate_content(cls, v):
        return clean_content(v, MAX_POST_LENGTH)

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        if v is None:
            return v
        v = v.strip()
        if len(v) > MAX_TITLE_LENGTH:
            raise ValueError(f'Title must be at most {MAX_TITLE_LENGTH} characters long')
        return v or None

class CommentCreate(CamelModel):
    content: str

    @field_validator('content')
    @classmethod
    def validate_content(cls, v):
        return clean_content(v, MAX_COMMENT_LENGTH)

class LikeResponse(CamelModel):
    post_id: int
    user_id: str

class CommentResponse(CamelModel):
    id: int
    content: str
    post_id: int
    author_id: str
    created_at: datetime
    author: Optional[UserResponse] = None

class PostResponse(CamelModel):
    id: int
    title: Optional[str] = None
    content: str
    author_id: str
    is_admin_post: bool
    file_attachment_ids: Optional[str] = None
    created_at: datetime

class PostWithAuthor(PostResponse):
    author: Optional[UserResponse] = None
    likes: List[LikeResponse] = []
    comments: List[CommentResponse] = []
    likes_count: int = 0
    comments_count: int = 0
    is_liked: bool = False

class ToggleLikeResponse(CamelModel):
    is_liked: bool
    likes_count: int
