import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from config import settings
from database_schemas import (
    USERS_TABLE_SCHEMA,
    POSTS_TABLE_SCHEMA,
    COMMENTS_TABLE_SCHEMA,
    LIKES_TABLE_SCHEMA,
    CHAT_MESSAGES_TABLE_SCHEMA,
    DIRECT_MESSAGES_TABLE_SCHEMA,
    APP_SETTINGS_TABLE_SCHEMA,
    UPLOADED_FILES_TABLE_SCHEMA,
    INDEXES,
)

# Same layout as SQLite's CURRENT_TIMESTAMP so stored values compare as strings
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

@contextmanager
def get_db():
    conn = sqlite3.connect(settings.database_path)
    # Cascades on posts -> comments/likes depend on this, it is off by default per connection
    conn.execute("PRAGMA foreign_keys = ON")
    try:
        yield conn
    finally:
        conn.close()

def to_db_timestamp(value: datetime) -> str:
    """Convert an aware datetime to the UTC text form stored in TIMESTAMP columns."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime(TIMESTAMP_FORMAT)

def init_db():
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute(USERS_TABLE_SCHEMA)
        cursor.execute(POSTS_TABLE_SCHEMA)
        cursor.execute(COMMENTS_TABLE_SCHEMA)
        cursor.execute(LIKES_TABLE_SCHEMA)
        cursor.execute(CHAT_MESSAGES_TABLE_SCHEMA)
        cursor.execute(DIRECT_MESSAGES_TABLE_SCHEMA)
        cursor.execute(APP_SETTINGS_TABLE_SCHEMA)
        cursor.execute(UPLOADED_FILES_TABLE_SCHEMA)
        for statement in INDEXES:
            cursor.execute(statement)
        conn.commit()

if __name__ == "__main__":
    init_db()
