from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import datetime

class CamelModel(BaseModel):
    """Accepts snake_case or camelCase input, serializes camelCase."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class UserResponse(CamelModel):
    id: str
    email: str
    display_name: str
    photo_url: Optional[str] = Field(None, alias="photoURL")
    is_owner: bool = False
    has_admin_access: bool = False
    role: Optional[str] = None
    created_at: Optional[datetime] = None

def clean_content(value: str, max_length: int) -> str:
    value = (value or "").strip()
    if not value:
        raise ValueError("Content is required")
    if len(value) > max_length:
        raise ValueError(f"Content must be at most {max_length} characters long")
    return value
