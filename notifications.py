"""Best-effort relay of content events to Discord-compatible webhooks.

Delivery runs after the response (FastAPI BackgroundTasks) and every failure is
logged and swallowed: a webhook can never fail or roll back the mutation that
triggered it.
"""
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

import requests

from config import settings
from permissions import style_for
from storage.app_settings import (
    get_setting,
    DISCORD_FEED_WEBHOOK_KEY,
    DISCORD_ANNOUNCEMENT_WEBHOOK_KEY,
    DISCORD_CHAT_WEBHOOK_KEY,
)

logger = logging.getLogger(__name__)

DISCORD_CONTENT_LIMIT = 2000
DISCORD_THREAD_NAME_LIMIT = 100
DISCORD_EMBED_TITLE_LIMIT = 256
DISCORD_EMBED_DESCRIPTION_LIMIT = 4096
DEFAULT_ANNOUNCEMENT_TITLE = "Announcement"


class NotificationKind(str, Enum):
    FEED = "feed"
    ANNOUNCEMENT = "announcement"
    CHAT = "chat"


WEBHOOK_SETTING_KEYS = {
    NotificationKind.FEED: DISCORD_FEED_WEBHOOK_KEY,
    NotificationKind.ANNOUNCEMENT: DISCORD_ANNOUNCEMENT_WEBHOOK_KEY,
    NotificationKind.CHAT: DISCORD_CHAT_WEBHOOK_KEY,
}


def _truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[:limit - 1] + "…"


def _author_label(author: Optional[dict]) -> str:
    if not author:
        return "**Unknown**"
    emoji = style_for(author.get("role")).emoji
    name = f"**{author.get('display_name') or 'Unknown'}**"
    return f"{emoji} {name}" if emoji else name


def build_feed_payload(post: dict, author: Optional[dict], as_thread: bool = False) -> dict:
    payload = {"content": _truncate(f"{_author_label(author)} posted:\n{post['content']}", DISCORD_CONTENT_LIMIT)}
    if as_thread:
        first_line = post["content"].strip().splitlines()[0] if post["content"].strip() else "New post"
        payload["thread_name"] = _truncate(first_line, DISCORD_THREAD_NAME_LIMIT)
    return payload


def build_announcement_payload(post: dict, author: Optional[dict]) -> dict:
    created_at = post.get("created_at")
    if isinstance(created_at, str):
        try:
            created_at = datetime.fromisoformat(created_at)
        except ValueError:
            created_at = None
    if isinstance(created_at, datetime):
        timestamp = created_at.replace(tzinfo=created_at.tzinfo or timezone.utc).isoformat()
    else:
        timestamp = datetime.now(timezone.utc).isoformat()
    return {
        "embeds": [{
            "title": _truncate(post.get("title") or DEFAULT_ANNOUNCEMENT_TITLE, DISCORD_EMBED_TITLE_LIMIT),
            "description": _truncate(post["content"], DISCORD_EMBED_DESCRIPTION_LIMIT),
            "color": style_for(author.get("role") if author else None).notification_color,
            "timestamp": timestamp,
        }]
    }


def build_chat_payload(message: dict, author: Optional[dict]) -> dict:
    return {"content": _truncate(f"{_author_label(author)}: {message['content']}", DISCORD_CONTENT_LIMIT)}


def get_webhook_url(kind: NotificationKind) -> Optional[str]:
    url = get_setting(WEBHOOK_SETTING_KEYS[kind])
    return url.strip() if url and url.strip() else None


def relay(kind: NotificationKind, payload: dict) -> bool:
    """POST a payload to the webhook configured for `kind`. Returns True on 2xx.

    Unconfigured kinds are a no-op. Never raises.
    """
    try:
        url = get_webhook_url(kind)
    except Exception:
        logger.exception("Could not read %s webhook configuration", kind.value)
        return False
    if not url:
        return False
    try:
        response = requests.post(url, json=payload, timeout=settings.webhook_timeout_seconds)
    except requests.RequestException as exc:
        logger.warning("%s webhook delivery failed: %s", kind.value, exc)
        return False
    if not 200 <= response.status_code < 300:
        logger.warning("%s webhook returned %s: %s", kind.value, response.status_code, response.text[:200])
        return False
    return True


def notify_post_created(post: dict, author: Optional[dict]):
    if post.get("is_admin_post"):
        relay(NotificationKind.ANNOUNCEMENT, build_announcement_payload(post, author))
    else:
        relay(NotificationKind.FEED, build_feed_payload(post, author, as_thread=settings.discord_feed_threads))


def notify_chat_message(message: dict, author: Optional[dict]):
    relay(NotificationKind.CHAT, build_chat_payload(message, author))
