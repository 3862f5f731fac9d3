"""
Feed tests: posts, admin posts, likes and comments
"""

import sqlite3

import pytest

from storage import posts as post_store


def create_post(client, headers, content="Hello Alaska", **extra):
    return client.post("/api/posts", json={"content": content, **extra}, headers=headers)


class TestCreatePost:
    def test_create_and_list(self, client, as_user, alice):
        response = create_post(client, as_user(alice))
        assert response.status_code == 200
        body = response.json()
        assert body["content"] == "Hello Alaska"
        assert body["author"]["displayName"] == "Alice"
        assert body["likesCount"] == 0
        assert body["isAdminPost"] is False

        feed = client.get("/api/posts", headers=as_user(alice)).json()
        assert [p["id"] for p in feed] == [body["id"]]

    def test_content_is_trimmed(self, client, as_user, alice):
        assert create_post(client, as_user(alice), "  spaced  ").json()["content"] == "spaced"

    @pytest.mark.parametrize("content", ["", "   "])
    def test_empty_content_is_rejected(self, client, as_user, alice, content):
        assert create_post(client, as_user(alice), content).status_code == 422

    def test_newest_first(self, client, as_user, alice):
        first = create_post(client, as_user(alice), "first").json()
        second = create_post(client, as_user(alice), "second").json()
        feed = client.get("/api/posts", headers=as_user(alice)).json()
        assert [p["id"] for p in feed] == [second["id"], first["id"]]

    def test_user_posts(self, client, as_user, alice, bob):
        create_post(client, as_user(alice), "by alice")
        create_post(client, as_user(bob), "by bob")
        posts = client.get(f"/api/users/{bob['id']}/posts", headers=as_user(alice)).json()
        assert [p["content"] for p in posts] == ["by bob"]
        mine = client.get("/api/users/me/posts", headers=as_user(alice)).json()
        assert [p["content"] for p in mine] == ["by alice"]


class TestAdminPosts:
    def test_plain_user_cannot_post_announcement(self, client, as_user, alice):
        response = create_post(client, as_user(alice), "Big news", isAdminPost=True, title="News")
        assert response.status_code == 403
        assert client.get("/api/admin-posts", headers=as_user(alice)).json() == []
        assert client.get("/api/posts", headers=as_user(alice)).json() == []

    def test_admin_post_lands_in_admin_feed_only(self, client, as_user, admin_user):
        response = create_post(client, as_user(admin_user), "Big news", isAdminPost=True, title="News")
        assert response.status_code == 200
        assert response.json()["title"] == "News"
        assert len(client.get("/api/admin-posts", headers=as_user(admin_user)).json()) == 1
        assert client.get("/api/posts", headers=as_user(admin_user)).json() == []

    def test_owner_can_post_announcement(self, client, as_user, owner):
        assert create_post(client, as_user(owner), "Hi", isAdminPost=True).status_code == 200

    def test_title_dropped_on_regular_posts(self, client, as_user, alice):
        assert create_post(client, as_user(alice), "Hi", title="Ignored").json()["title"] is None


class TestLikes:
    def test_toggle_parity(self, client, as_user, alice):
        post = create_post(client, as_user(alice)).json()
        results = [client.post(f"/api/posts/{post['id']}/like", headers=as_user(alice)).json() for _ in range(3)]
        assert [r["isLiked"] for r in results] == [True, False, True]
        assert results[-1]["likesCount"] == 1

    def test_two_users(self, client, as_user, alice, bob):
        post = create_post(client, as_user(alice)).json()
        url = f"/api/posts/{post['id']}/like"
        client.post(url, headers=as_user(alice))
        assert client.post(url, headers=as_user(bob)).json() == {"isLiked": True, "likesCount": 2}
        assert client.post(url, headers=as_user(alice)).json() == {"isLiked": False, "likesCount": 1}

        as_bob = client.get(f"/api/posts/{post['id']}", headers=as_user(bob)).json()
        as_alice = client.get(f"/api/posts/{post['id']}", headers=as_user(alice)).json()
        assert as_bob["isLiked"] is True
        assert as_alice["isLiked"] is False
        assert as_bob["likesCount"] == len(as_bob["likes"]) == 1

    def test_duplicate_like_row_is_refused(self, alice):
        post = post_store.create_post(alice["id"], "x")
        post_store.toggle_like(post["id"], alice["id"])
        from database import get_db
        with get_db() as conn:
            with pytest.raises(sqlite3.IntegrityError):
                conn.execute("INSERT INTO likes (post_id, user_id) VALUES (?, ?)", (post["id"], alice["id"]))

    def test_like_missing_post(self, client, as_user, alice):
        assert client.post("/api/posts/999/like", headers=as_user(alice)).status_code == 404


class TestComments:
    def test_comment_and_list(self, client, as_user, alice, bob):
        post = create_post(client, as_user(alice)).json()
        response = client.post(f"/api/posts/{post['id']}/comments", json={"content": "Nice"}, headers=as_user(bob))
        assert response.status_code == 200
        assert response.json()["author"]["id"] == bob["id"]

        comments = client.get(f"/api/posts/{post['id']}/comments", headers=as_user(alice)).json()
        assert [c["content"] for c in comments] == ["Nice"]
        fetched = client.get(f"/api/posts/{post['id']}", headers=as_user(alice)).json()
        assert fetched["commentsCount"] == 1

    def test_empty_comment_rejected(self, client, as_user, alice):
        post = create_post(client, as_user(alice)).json()
        response = client.post(f"/api/posts/{post['id']}/comments", json={"content": " "}, headers=as_user(alice))
        assert response.status_code == 422

    def test_comment_on_missing_post(self, client, as_user, alice):
        response = client.post("/api/posts/999/comments", json={"content": "x"}, headers=as_user(alice))
        assert response.status_code == 404

    def test_delete_comment_removes_only_that_comment(self, client, as_user, alice, bob):
        post = create_post(client, as_user(alice)).json()
        url = f"/api/posts/{post['id']}/comments"
        first = client.post(url, json={"content": "one"}, headers=as_user(bob)).json()
        client.post(url, json={"content": "two"}, headers=as_user(alice))

        assert client.delete(f"/api/comments/{first['id']}", headers=as_user(alice)).status_code == 403
        assert client.delete(f"/api/comments/{first['id']}", headers=as_user(bob)).status_code == 200
        assert [c["content"] for c in client.get(url, headers=as_user(alice)).json()] == ["two"]
        assert client.get(f"/api/posts/{post['id']}", headers=as_user(alice)).status_code == 200

    def test_delete_missing_comment(self, client, as_user, alice):
        assert client.delete("/api/comments/999", headers=as_user(alice)).status_code == 404


class TestDeletePost:
    def test_delete_cascades(self, client, as_user, alice, bob):
        post = create_post(client, as_user(alice)).json()
        client.post(f"/api/posts/{post['id']}/like", headers=as_user(bob))
        client.post(f"/api/posts/{post['id']}/comments", json={"content": "hi"}, headers=as_user(bob))

        response = client.delete(f"/api/posts/{post['id']}", headers=as_user(alice))
        assert response.json() == {"success": True}
        assert client.get(f"/api/posts/{post['id']}", headers=as_user(alice)).status_code == 404
        assert post_store.get_likes_count(post["id"]) == 0
        assert post_store.get_comments(post["id"]) == []

    def test_only_author_or_owner(self, client, as_user, alice, bob, owner, admin_user):
        post = create_post(client, as_user(alice)).json()
        url = f"/api/posts/{post['id']}"
        assert client.delete(url, headers=as_user(bob)).status_code == 403
        assert client.delete(url, headers=as_user(admin_user)).status_code == 403
        assert client.delete(url, headers=as_user(owner)).status_code == 200

    def test_delete_missing_post(self, client, as_user, alice):
        assert client.delete("/api/posts/999", headers=as_user(alice)).status_code == 404
