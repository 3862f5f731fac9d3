from datetime import datetime
from typing import List, Optional
from database import get_db, to_db_timestamp
from storage.users import get_users, get_user

def row_to_message(row) -> dict:
    return {"id": row[0], "content": row[1], "author_id": row[2], "file_attachment_ids": row[3], "created_at": row[4]}

def get_chat_messages(limit: int = 100) -> List[dict]:
    """Most recent messages, returned oldest first."""
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute("""
            SELECT id, content, author_id, file_attachment_ids, created_at FROM chat_messages
            ORDER BY created_at DESC, id DESC LIMIT ?
        """, (limit,))
        messages = [row_to_message(row) for row in cursor.fetchall()]
    authors = get_users(m["author_id"] for m in messages)
    for message in messages:
        message["author"] = authors.get(message["author_id"])
    messages.reverse()
    return messages

def get_chat_message(message_id: int) -> Optional[dict]:
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute(
            "SELECT id, content, author_id, file_attachment_ids, created_at FROM chat_messages WHERE id = ?",
            (message_id,)
        )
        row = cursor.fetchone()
    if not row:
        return None
    message = row_to_message(row)
    message["author"] = get_user(message["author_id"])
    return message

def create_chat_message(author_id: str, content: str, file_attachment_ids: Optional[str] = None) -> dict:
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute(
            "INSERT INTO chat_messages (content, author_id, file_attachment_ids) VALUES (?, ?, ?)",
            (content, author_id, file_attachment_ids)
        )
        message_id = cursor.lastrowid
        conn.commit()
    return get_chat_message(message_id)

def delete_chat_message(message_id: int) -> bool:
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute("DELETE FROM chat_messages WHERE id = ?", (message_id,))
        conn.commit()
        return cursor.rowcount > 0

def clear_chat_messages(before: Optional[datetime] = None) -> int:
    """Delete chat history, optionally only messages created before a moment."""
    with get_db() as conn:
        cursor = conn.cursor()
        if before is None:
            cursor.execute("DELETE FROM chat_messages")
        else:
            cursor.execute("DELETE FROM chat_messages WHERE created_at < ?", (to_db_timestamp(before),))
        conn.commit()
        return cursor.rowcount
