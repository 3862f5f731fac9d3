from typing import Optional
from database import get_db

ADMIN_PASSWORD_KEY = "admin_password"
DISCORD_FEED_WEBHOOK_KEY = "discord_feed_webhook"
DISCORD_ANNOUNCEMENT_WEBHOOK_KEY = "discord_announcement_webhook"
DISCORD_CHAT_WEBHOOK_KEY = "discord_chat_webhook"

def get_setting(key: str) -> Optional[str]:
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT value FROM app_settings WHERE key = ?", (key,))
        row = cursor.fetchone()
        return row[0] if row else None

def set_setting(key: str, value: str):
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute("""
            INSERT INTO app_settings (key, value) VALUES (?, ?)
            ON CONFLICT(key) DO UPDATE SET value = excluded.value
        """, (key, value))
        conn.commit()
