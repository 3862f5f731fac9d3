from typing import List, Optional
from database import get_db
from storage.users import get_users

def row_to_direct_message(row) -> dict:
    return {"id": row[0], "content": row[1], "sender_id": row[2], "recipient_id": row[3], "created_at": row[4]}

def get_conversation(user_id_1: str, user_id_2: str, limit: int = 50) -> List[dict]:
    """Messages exchanged between two users in either direction, oldest first."""
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute("""
            SELECT id, content, sender_id, recipient_id, created_at FROM direct_messages
            WHERE (sender_id = ? AND recipient_id = ?) OR (sender_id = ? AND recipient_id = ?)
            ORDER BY created_at DESC, id DESC LIMIT ?
        """, (user_id_1, user_id_2, user_id_2, user_id_1, limit))
        messages = [row_to_direct_message(row) for row in cursor.fetchall()]
    users = get_users([user_id_1, user_id_2])
    for message in messages:
        message["sender"] = users.get(message["sender_id"])
        message["recipient"] = users.get(message["recipient_id"])
    messages.reverse()
    return messages

def get_direct_message(message_id: int) -> Optional[dict]:
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute(
            "SELECT id, content, sender_id, recipient_id, created_at FROM direct_messages WHERE id = ?",
            (message_id,)
        )
        row = cursor.fetchone()
        return row_to_direct_message(row) if row else None

def create_direct_message(sender_id: str, recipient_id: str, content: str) -> dict:
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute(
            "INSERT INTO direct_messages (content, sender_id, recipient_id) VALUES (?, ?, ?)",
            (content, sender_id, recipient_id)
        )
        message_id = cursor.lastrowid
        conn.commit()
    message = get_direct_message(message_id)
    users = get_users([sender_id, recipient_id])
    message["sender"] = users.get(sender_id)
    message["recipient"] = users.get(recipient_id)
    return message

def delete_direct_message(message_id: int) -> bool:
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute("DELETE FROM direct_messages WHERE id = ?", (message_id,))
        conn.commit()
        return cursor.rowcount > 0
