from pydantic import Field, field_validator
from typing import Optional
from schemas.shared import CamelModel

class SyncRequest(CamelModel):
    email: Optional[str] = None
    display_name: str
    photo_url: Optional[str] = Field(None, alias="photoURL")

    @field_validator('display_name')
    @classmethod
    def validate_display_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Display name is required')
        if len(v) > 100:
            raise ValueError('Display name must be at most 100 characters long')
        return v

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        if v is None:
            return v
        v = v.strip().lower()
        if '@' not in v:
            raise ValueError('Invalid email address')
        return v
