"""
Scheduled maintenance tests: chat retention boundary and expired-file purge
"""

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from database import get_db
from maintenance import next_boundary, seconds_until_next_boundary, purge_chat_history, purge_files
from storage.chat import create_chat_message, get_chat_messages
from storage.files import create_file, get_file

ANCHORAGE = ZoneInfo("America/Anchorage")


class TestBoundary:
    def test_next_local_midnight(self):
        now = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)
        assert seconds_until_next_boundary(now, ANCHORAGE) == 72000

    def test_at_boundary_waits_a_full_day(self):
        now = datetime(2026, 3, 11, 8, 0, tzinfo=timezone.utc)
        assert next_boundary(now, ANCHORAGE).astimezone(ANCHORAGE).hour == 0
        assert seconds_until_next_boundary(now, ANCHORAGE) == 86400

    def test_winter_offset(self):
        now = datetime(2026, 1, 1, 8, 0, tzinfo=timezone.utc)
        boundary = next_boundary(now, ANCHORAGE)
        assert boundary.astimezone(timezone.utc) == datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc)

    def test_custom_hour(self):
        now = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)
        assert seconds_until_next_boundary(now, ANCHORAGE, hour=6) == 2 * 3600


class TestChatRetention:
    def test_only_messages_before_boundary_are_purged(self, alice):
        old = create_chat_message(alice["id"], "yesterday")
        new = create_chat_message(alice["id"], "after midnight")
        with get_db() as conn:
            conn.execute("UPDATE chat_messages SET created_at = ? WHERE id = ?", ("2026-01-01 08:00:00", old["id"]))
            conn.execute("UPDATE chat_messages SET created_at = ? WHERE id = ?", ("2026-01-02 10:00:00", new["id"]))
            conn.commit()

        boundary = datetime(2026, 1, 2, 0, 0, tzinfo=ANCHORAGE)
        assert purge_chat_history(boundary) == 1
        assert [m["id"] for m in get_chat_messages()] == [new["id"]]


class TestFilePurge:
    def test_expired_files_are_removed(self, alice):
        expired = create_file("old.txt", "text/plain", b"old", alice["id"], timedelta(hours=-1))
        live = create_file("new.txt", "text/plain", b"new", alice["id"], timedelta(hours=1))
        assert purge_files() == 1
        assert get_file(expired["id"]) is None
        assert get_file(live["id"]) is not None
