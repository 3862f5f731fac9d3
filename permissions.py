"""Authorization rules for the community platform.

Every rule is a pure predicate over the acting user (the dict returned by
``storage.users.get_user``) and, where relevant, the resource row. Grants are
never cached: routes look the actor up on each request and ask again.
"""
from enum import Enum
from typing import NamedTuple, Optional
from fastapi import HTTPException


class Role(str, Enum):
    SUPREME_LEADER = "Supreme Leader"
    COUNCIL_OF_SNOW = "The Council of Snow"
    GREAT_HALL = "The Great Hall of the North"
    ADMIN = "admin"


class RoleStyle(NamedTuple):
    display_color: str
    notification_color: int  # Discord embed color
    emoji: str


DEFAULT_STYLE = RoleStyle(display_color="muted", notification_color=0x95A5A6, emoji="")

ROLE_STYLES = {
    Role.SUPREME_LEADER: RoleStyle(display_color="yellow", notification_color=0xF1C40F, emoji="👑"),
    Role.COUNCIL_OF_SNOW: RoleStyle(display_color="blue", notification_color=0x3498DB, emoji="❄️"),
    Role.GREAT_HALL: RoleStyle(display_color="blue", notification_color=0x5DADE2, emoji="🏔️"),
    Role.ADMIN: RoleStyle(display_color="red", notification_color=0xE74C3C, emoji="🛡️"),
}


def parse_role(value: Optional[str]) -> Optional[Role]:
    if not value:
        return None
    try:
        return Role(value)
    except ValueError:
        return None


def style_for(role: Optional[str]) -> RoleStyle:
    parsed = parse_role(role)
    if parsed is None:
        return DEFAULT_STYLE
    return ROLE_STYLES[parsed]


def is_owner(actor: dict) -> bool:
    return bool(actor and actor.get("is_owner"))


def has_admin_access(actor: dict) -> bool:
    return bool(actor and actor.get("has_admin_access"))


def can_create_admin_post(actor: dict) -> bool:
    return is_owner(actor) or has_admin_access(actor)


def can_delete_post(actor: dict, post: dict) -> bool:
    return actor["id"] == post["author_id"] or is_owner(actor)


def can_delete_comment(actor: dict, comment: dict) -> bool:
    return actor["id"] == comment["author_id"] or is_owner(actor)


def can_delete_chat_message(actor: dict) -> bool:
    return has_admin_access(actor)


def can_delete_direct_message(actor: dict, message: dict) -> bool:
    return actor["id"] == message["sender_id"]


def can_delete_file(actor: dict, uploaded_file: dict) -> bool:
    return actor["id"] == uploaded_file["uploaded_by"] or has_admin_access(actor)


def can_manage_roles(actor: dict) -> bool:
    # Flat model: no check of the granted rank against the actor's own rank.
    return is_owner(actor) or has_admin_access(actor)


def can_manage_admin_password(actor: dict) -> bool:
    return is_owner(actor)


def can_configure_webhooks(actor: dict) -> bool:
    return is_owner(actor) or parse_role(actor.get("role")) is Role.SUPREME_LEADER


def require(allowed: bool, detail: str = "Not authorized"):
    """Raise a 403 when a rule denies the action."""
    if not allowed:
        raise HTTPException(status_code=403, detail=detail)
