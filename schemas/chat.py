from pydantic import field_validator
from typing import Optional
from datetime import datetime
from schemas.shared import CamelModel, UserResponse, clean_content

MAX_CHAT_LENGTH = 2000
MAX_DM_LENGTH = 2000

class ChatMessageCreate(CamelModel):
    content: str
    file_attachment_ids: Optional[str] = None

    @field_validator('content')
    @classmethod
    def validate_content(cls, v):
        return clean_content(v, MAX_CHAT_LENGTH)

class ChatMessageResponse(CamelModel):
    id: int
    content: str
    author_id: str
    file_attachment_ids: Optional[str] = None
    created_at: datetime
    author: Optional[UserResponse] = None

class DirectMessageCreate(CamelModel):
    content: str

    @field_validator('content')
    @classmethod
    def validate_content(cls, v):
        return clean_content(v, MAX_DM_LENGTH)

class DirectMessageResponse(CamelModel):
    id: int
    content: str
    sender_id: str
    recipient_id: str
    created_at: datetime
    sender: Optional[UserResponse] = None
    recipient: Optional[UserResponse] = None
