from pydantic import field_validator
from typing import Optional
from schemas.shared import CamelModel
from permissions import Role

MIN_ADMIN_PASSWORD_LENGTH = 4

class SetPasswordRequest(CamelModel):
    password: str

class UnlockRequest(CamelModel):
    password: str

class PasswordStatus(CamelModel):
    has_password: bool

class RoleGrant(CamelModel):
    role: Role

class WebhookConfig(CamelModel):
    feed: Optional[str] = None
    announcement: Optional[str] = None
    chat: Optional[str] = None

class WebhookUpdate(WebhookConfig):
    """Fields left out are unchanged; an empty string clears the webhook."""

    @field_validator('feed', 'announcement', 'chat')
    @classmethod
    def validate_url(cls, v):
        if v is None:
            return v
        v = v.strip()
        if v and not v.startswith(("https://", "http://")):
            raise ValueError('Webhook URL must start with http:// or https://')
        return v
