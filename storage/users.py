from typing import Iterable, Optional
from database import get_db

USER_COLUMNS = "id, email, display_name, photo_url, is_owner, has_admin_access, role, created_at"

def row_to_user(row) -> dict:
    return {
        "id": row[0], "email": row[1], "display_name": row[2], "photo_url": row[3],
        "is_owner": bool(row[4]), "has_admin_access": bool(row[5]), "role": row[6],
        "created_at": row[7],
    }

def get_user(user_id: str) -> Optional[dict]:
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute(f"SELECT {USER_COLUMNS} FROM users WHERE id = ?", (user_id,))
        row = cursor.fetchone()
        return row_to_user(row) if row else None

def get_users(user_ids: Iterable[str]) -> dict:
    """Fetch several users at once, keyed by id."""
    ids = list(set(user_ids))
    if not ids:
        return {}
    placeholders = ", ".join("?" for _ in ids)
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute(f"SELECT {USER_COLUMNS} FROM users WHERE id IN ({placeholders})", ids)
        return {row[0]: row_to_user(row) for row in cursor.fetchall()}

def sync_user(user_id: str, email: str, display_name: str, photo_url: Optional[str], owner_emails: set) -> dict:
    """Create or update a user from identity-provider data.

    is_owner is recomputed from the allow-list on every call; it is never taken
    from the caller.
    """
    email = email.strip().lower()
    is_owner = email in owner_emails
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute("""
            INSERT INTO users (id, email, display_name, photo_url, is_owner)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                email = excluded.email,
                display_name = excluded.display_name,
                photo_url = excluded.photo_url,
                is_owner = excluded.is_owner
        """, (user_id, email, display_name, photo_url, int(is_owner)))
        conn.commit()
    return get_user(user_id)

def set_admin_access(user_id: str, has_access: bool) -> Optional[dict]:
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute("UPDATE users SET has_admin_access = ? WHERE id = ?", (int(has_access), user_id))
        conn.commit()
    return get_user(user_id)

def set_role(user_id: str, role: Optional[str]) -> Optional[dict]:
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute("UPDATE users SET role = ? WHERE id = ?", (role, user_id))
        conn.commit()
    return get_user(user_id)
