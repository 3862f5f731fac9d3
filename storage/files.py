from datetime import datetime, timedelta, timezone
from typing import Optional
from database import get_db, to_db_timestamp

FILE_META_COLUMNS = "id, filename, mime_type, size, uploaded_by, expires_at, created_at"

def row_to_file(row) -> dict:
    return {
        "id": row[0], "filename": row[1], "mime_type": row[2], "size": row[3],
        "uploaded_by": row[4], "expires_at": row[5], "created_at": row[6],
    }

def create_file(filename: str, mime_type: str, data: bytes, uploaded_by: str, lifetime: timedelta) -> dict:
    expires_at = to_db_timestamp(datetime.now(timezone.utc) + lifetime)
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute("""
            INSERT INTO uploaded_files (filename, mime_type, size, data, uploaded_by, expires_at)
            VALUES (?, ?, ?, ?, ?, ?)
        """, (filename, mime_type, len(data), data, uploaded_by, expires_at))
        file_id = cursor.lastrowid
        conn.commit()
    return get_file(file_id)

def get_file(file_id: int) -> Optional[dict]:
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute(f"SELECT {FILE_META_COLUMNS} FROM uploaded_files WHERE id = ?", (file_id,))
        row = cursor.fetchone()
        return row_to_file(row) if row else None

def get_file_data(file_id: int) -> Optional[bytes]:
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT data FROM uploaded_files WHERE id = ?", (file_id,))
        row = cursor.fetchone()
        return row[0] if row else None

def delete_file(file_id: int) -> bool:
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute("DELETE FROM uploaded_files WHERE id = ?", (file_id,))
        conn.commit()
        return cursor.rowcount > 0

def purge_expired_files(now: Optional[datetime] = None) -> int:
    now = now or datetime.now(timezone.utc)
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute("DELETE FROM uploaded_files WHERE expires_at <= ?", (to_db_timestamp(now),))
        conn.commit()
        return cursor.rowcount
