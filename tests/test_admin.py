"""
Admin tests: shared admin password, role grants and webhook configuration
"""

import pytest

from storage.users import set_role


class TestAdminPassword:
    def test_password_unlocks_admin_posting(self, client, as_user, owner, alice):
        status = client.get("/api/admin/check-password", headers=as_user(owner))
        assert status.json() == {"hasPassword": False}

        response = client.post("/api/admin/set-password", json={"password": "brotherhood"}, headers=as_user(owner))
        assert response.status_code == 200
        assert client.get("/api/admin/check-password", headers=as_user(owner)).json() == {"hasPassword": True}

        wrong = client.post("/api/admin/unlock", json={"password": "nope"}, headers=as_user(alice))
        assert wrong.status_code == 403
        assert client.get("/api/auth/me", headers=as_user(alice)).json()["hasAdminAccess"] is False

        right = client.post("/api/admin/unlock", json={"password": "brotherhood"}, headers=as_user(alice))
        assert right.status_code == 200
        assert client.get("/api/auth/me", headers=as_user(alice)).json()["hasAdminAccess"] is True

        post = client.post(
            "/api/posts", json={"content": "Meeting tonight", "isAdminPost": True}, headers=as_user(alice)
        )
        assert post.status_code == 200

    def test_only_owner_manages_password(self, client, as_user, admin_user):
        assert client.get("/api/admin/check-password", headers=as_user(admin_user)).status_code == 403
        response = client.post("/api/admin/set-password", json={"password": "secret"}, headers=as_user(admin_user))
        assert response.status_code == 403

    def test_short_password_rejected(self, client, as_user, owner):
        response = client.post("/api/admin/set-password", json={"password": "abc"}, headers=as_user(owner))
        assert response.status_code == 400

    def test_unlock_without_password_configured(self, client, as_user, alice):
        response = client.post("/api/admin/unlock", json={"password": "anything"}, headers=as_user(alice))
        assert response.status_code == 400

    def test_password_is_stored_hashed(self, client, as_user, owner):
        from storage.app_settings import get_setting, ADMIN_PASSWORD_KEY
        client.post("/api/admin/set-password", json={"password": "brotherhood"}, headers=as_user(owner))
        assert get_setting(ADMIN_PASSWORD_KEY) != "brotherhood"


class TestRoles:
    def test_grant_and_revoke(self, client, as_user, admin_user, alice):
        url = f"/api/users/{alice['id']}/role"
        response = client.post(url, json={"role": "The Council of Snow"}, headers=as_user(admin_user))
        assert response.status_code == 200
        assert response.json()["role"] == "The Council of Snow"

        profile = client.get(f"/api/users/{alice['id']}", headers=as_user(admin_user)).json()
        assert profile["role"] == "The Council of Snow"

        assert client.delete(url, headers=as_user(admin_user)).json()["role"] is None

    def test_unknown_role_rejected(self, client, as_user, owner, alice):
        response = client.post(f"/api/users/{alice['id']}/role", json={"role": "Emperor"}, headers=as_user(owner))
        assert response.status_code == 422

    def test_plain_user_cannot_grant(self, client, as_user, alice, bob):
        response = client.post(f"/api/users/{bob['id']}/role", json={"role": "admin"}, headers=as_user(alice))
        assert response.status_code == 403

    def test_grant_to_missing_user(self, client, as_user, owner):
        response = client.post("/api/users/nobody/role", json={"role": "admin"}, headers=as_user(owner))
        assert response.status_code == 404


class TestWebhookConfig:
    URL = "https://discord.example/api/webhooks/1/abc"

    def test_owner_sets_and_clears(self, client, as_user, owner):
        response = client.put("/api/admin/webhooks", json={"feed": self.URL}, headers=as_user(owner))
        assert response.json() == {"feed": self.URL, "announcement": None, "chat": None}

        cleared = client.put("/api/admin/webhooks", json={"feed": ""}, headers=as_user(owner))
        assert cleared.json()["feed"] is None

    def test_supreme_leader_may_configure(self, client, as_user, alice):
        set_role(alice["id"], "Supreme Leader")
        response = client.put("/api/admin/webhooks", json={"chat": self.URL}, headers=as_user(alice))
        assert response.status_code == 200
        assert client.get("/api/admin/webhooks", headers=as_user(alice)).json()["chat"] == self.URL

    @pytest.mark.parametrize("role", [None, "The Council of Snow", "admin"])
    def test_others_may_not(self, client, as_user, bob, role):
        set_role(bob["id"], role)
        assert client.get("/api/admin/webhooks", headers=as_user(bob)).status_code == 403
        assert client.put("/api/admin/webhooks", json={"feed": self.URL}, headers=as_user(bob)).status_code == 403

    def test_admin_access_is_not_enough(self, client, as_user, admin_user):
        assert client.get("/api/admin/webhooks", headers=as_user(admin_user)).status_code == 403

    def test_url_must_be_http(self, client, as_user, owner):
        response = client.put("/api/admin/webhooks", json={"feed": "ftp://x"}, headers=as_user(owner))
        assert response.status_code == 422
