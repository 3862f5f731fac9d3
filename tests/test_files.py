"""
File upload, download and attachment tests
"""

import base64

from config import settings
from storage.files import create_file
from datetime import timedelta


def upload(client, headers, content=b"hello file", filename="notes.txt", **extra):
    body = {
        "filename": filename,
        "mimeType": "text/plain",
        "size": len(content),
        "data": base64.b64encode(content).decode(),
        **extra,
    }
    return client.post("/api/files", json=body, headers=headers)


class TestUpload:
    def test_upload_then_download(self, client, as_user, alice, bob):
        response = upload(client, as_user(alice))
        assert response.status_code == 200
        record = response.json()
        assert record["url"] == f"/api/files/{record['id']}"
        assert record["size"] == len(b"hello file")
        assert record["uploadedBy"] == alice["id"]

        download = client.get(record["url"], headers=as_user(bob))
        assert download.status_code == 200
        assert download.content == b"hello file"
        assert download.headers["content-type"].startswith("text/plain")

    def test_directory_part_is_stripped(self, client, as_user, alice):
        assert upload(client, as_user(alice), filename="../../etc/passwd").json()["filename"] == "passwd"

    def test_data_url_prefix_accepted(self, client, as_user, alice):
        data = "data:text/plain;base64," + base64.b64encode(b"abc").decode()
        assert upload(client, as_user(alice), data=data).status_code == 200

    def test_invalid_base64(self, client, as_user, alice):
        response = upload(client, as_user(alice), data="!!not base64!!")
        assert response.status_code == 400

    def test_oversize_rejected(self, client, as_user, alice, monkeypatch):
        monkeypatch.setattr(settings, "max_upload_bytes", 4)
        assert upload(client, as_user(alice), content=b"12345").status_code == 400

    def test_declared_size_cannot_hide_real_size(self, client, as_user, alice, monkeypatch):
        monkeypatch.setattr(settings, "max_upload_bytes", 4)
        assert upload(client, as_user(alice), content=b"12345", size=1).status_code == 400

    def test_expired_file_not_served(self, client, as_user, alice):
        record = create_file("old.txt", "text/plain", b"x", alice["id"], timedelta(hours=-1))
        assert client.get(f"/api/files/{record['id']}", headers=as_user(alice)).status_code == 404

    def test_missing_file(self, client, as_user, alice):
        assert client.get("/api/files/999", headers=as_user(alice)).status_code == 404


class TestDelete:
    def test_uploader_or_admin(self, client, as_user, alice, bob, admin_user):
        first = upload(client, as_user(alice)).json()
        second = upload(client, as_user(alice)).json()
        assert client.delete(f"/api/files/{first['id']}", headers=as_user(bob)).status_code == 403
        assert client.delete(f"/api/files/{first['id']}", headers=as_user(alice)).status_code == 200
        assert client.delete(f"/api/files/{second['id']}", headers=as_user(admin_user)).status_code == 200
        assert client.get(f"/api/files/{first['id']}", headers=as_user(alice)).status_code == 404


class TestAttachments:
    def test_post_with_attachment(self, client, as_user, alice):
        record = upload(client, as_user(alice)).json()
        response = client.post(
            "/api/posts",
            json={"content": "see file", "fileAttachmentIds": f"{record['id']}, {record['id']}"},
            headers=as_user(alice),
        )
        assert response.status_code == 200
        assert response.json()["fileAttachmentIds"] == str(record["id"])

    def test_unknown_attachment(self, client, as_user, alice):
        response = client.post(
            "/api/posts", json={"content": "x", "fileAttachmentIds": "999"}, headers=as_user(alice)
        )
        assert response.status_code == 404

    def test_malformed_attachment_list(self, client, as_user, alice):
        response = client.post("/api/chat", json={"content": "x", "fileAttachmentIds": "1,abc"}, headers=as_user(alice))
        assert response.status_code == 400
        assert client.get("/api/chat", headers=as_user(alice)).json() == []
