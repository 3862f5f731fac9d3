from typing import List, Optional
from database import get_db
from storage.users import get_users

POST_COLUMNS = "id, title, content, author_id, is_admin_post, file_attachment_ids, created_at"

def row_to_post(row) -> dict:
    return {
        "id": row[0], "title": row[1], "content": row[2], "author_id": row[3],
        "is_admin_post": bool(row[4]), "file_attachment_ids": row[5], "created_at": row[6],
    }

def row_to_comment(row) -> dict:
    return {"id": row[0], "content": row[1], "post_id": row[2], "author_id": row[3], "created_at": row[4]}

def _in_clause(values) -> str:
    return ", ".join("?" for _ in values)

def _with_relations(cursor, posts: List[dict], viewer_id: Optional[str]) -> List[dict]:
    """Attach author, likes and comments; counts are derived from the child sets."""
    if not posts:
        return []
    post_ids = [p["id"] for p in posts]
    cursor.execute(f"SELECT post_id, user_id FROM likes WHERE post_id IN ({_in_clause(post_ids)})", post_ids)
    likes = {}
    for post_id, user_id in cursor.fetchall():
        likes.setdefault(post_id, []).append({"post_id": post_id, "user_id": user_id})
    cursor.execute(f"""
        SELECT id, content, post_id, author_id, created_at FROM comments
        WHERE post_id IN ({_in_clause(post_ids)})
        ORDER BY created_at DESC, id DESC
    """, post_ids)
    comments = {}
    for row in cursor.fetchall():
        comment = row_to_comment(row)
        comments.setdefault(comment["post_id"], []).append(comment)

    author_ids = {p["author_id"] for p in posts}
    for post_comments in comments.values():
        author_ids.update(c["author_id"] for c in post_comments)
    authors = get_users(author_ids)

    result = []
    for post in posts:
        post_likes = likes.get(post["id"], [])
        post_comments = comments.get(post["id"], [])
        for comment in post_comments:
            comment["author"] = authors.get(comment["author_id"])
        result.append({
            **post,
            "author": authors.get(post["author_id"]),
            "likes": post_likes,
            "comments": post_comments,
            "likes_count": len(post_likes),
            "comments_count": len(post_comments),
            "is_liked": bool(viewer_id) and any(l["user_id"] == viewer_id for l in post_likes),
        })
    return result

def get_posts(is_admin_post: bool, viewer_id: Optional[str] = None) -> List[dict]:
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute(
            f"SELECT {POST_COLUMNS} FROM posts WHERE is_admin_post = ? ORDER BY created_at DESC, id DESC",
            (int(is_admin_post),)
        )
        posts = [row_to_post(row) for row in cursor.fetchall()]
        return _with_relations(cursor, posts, viewer_id)

def get_user_posts(author_id: str, viewer_id: Optional[str] = None) -> List[dict]:
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute(
            f"SELECT {POST_COLUMNS} FROM posts WHERE author_id = ? ORDER BY created_at DESC, id DESC",
            (author_id,)
        )
        posts = [row_to_post(row) for row in cursor.fetchall()]
        return _with_relations(cursor, posts, viewer_id)

def get_post_row(post_id: int) -> Optional[dict]:
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute(f"SELECT {POST_COLUMNS} FROM posts WHERE id = ?", (post_id,))
        row = cursor.fetchone()
        return row_to_post(row) if row else None

def get_post(post_id: int, viewer_id: Optional[str] = None) -> Optional[dict]:
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute(f"SELECT {POST_COLUMNS} FROM posts WHERE id = ?", (post_id,))
        row = cursor.fetchone()
        if not row:
            return None
        return _with_relations(cursor, [row_to_post(row)], viewer_id)[0]

def create_post(author_id: str, content: str, is_admin_post: bool = False,
                title: Optional[str] = None, file_attachment_ids: Optional[str] = None) -> dict:
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute(
            "INSERT INTO posts (title, content, author_id, is_admin_post, file_attachment_ids) VALUES (?, ?, ?, ?, ?)",
            (title if is_admin_post else None, content, author_id, int(is_admin_post), file_attachment_ids)
        )
        post_id = cursor.lastrowid
        conn.commit()
    return get_post_row(post_id)

def delete_post(post_id: int) -> bool:
    """Delete a post; comments and likes go with it through ON DELETE CASCADE."""
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute("DELETE FROM posts WHERE id = ?", (post_id,))
        conn.commit()
        return cursor.rowcount > 0

# Likes

def toggle_like(post_id: int, user_id: str) -> bool:
    """Flip the user's like on a post. Returns True when the post is now liked.

    The (post_id, user_id) primary key is the uniqueness guard: when two toggles
    race, the losing INSERT raises sqlite3.IntegrityError instead of duplicating.
    """
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute("DELETE FROM likes WHERE post_id = ? AND user_id = ?", (post_id, user_id))
        if cursor.rowcount:
            conn.commit()
            return False
        cursor.execute("INSERT INTO likes (post_id, user_id) VALUES (?, ?)", (post_id, user_id))
        conn.commit()
        return True

def get_likes_count(post_id: int) -> int:
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT COUNT(*) FROM likes WHERE post_id = ?", (post_id,))
        return cursor.fetchone()[0]

# Comments

def get_comments(post_id: int) -> List[dict]:
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute("""
            SELECT id, content, post_id, author_id, created_at FROM comments
            WHERE post_id = ? ORDER BY created_at DESC, id DESC
        """, (post_id,))
        comments = [row_to_comment(row) for row in cursor.fetchall()]
    authors = get_users(c["author_id"] for c in comments)
    for comment in comments:
        comment["author"] = authors.get(comment["author_id"])
    return comments

def get_comment(comment_id: int) -> Optional[dict]:
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT id, content, post_id, author_id, created_at FROM comments WHERE id = ?", (comment_id,))
        row = cursor.fetchone()
        return row_to_comment(row) if row else None

def create_comment(post_id: int, author_id: str, content: str) -> dict:
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute(
            "INSERT INTO comments (content, post_id, author_id) VALUES (?, ?, ?)",
            (content, post_id, author_id)
        )
        comment_id = cursor.lastrowid
        conn.commit()
    return get_comment(comment_id)

def delete_comment(comment_id: int) -> bool:
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute("DELETE FROM comments WHERE id = ?", (comment_id,))
        conn.commit()
        return cursor.rowcount > 0
