"""
Test fixtures: an isolated app per test (temporary SQLite file, trusted-header
identity, fresh connection registry, maintenance jobs off).
"""

import os
import tempfile

# Must be in place before config.settings is first imported
_import_dir = tempfile.mkdtemp(prefix="brotherhood-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_import_dir, 'import.sqlite3')}"
os.environ["ENABLE_SCHEDULER"] = "false"
os.environ.pop("FIREBASE_PROJECT_ID", None)

import pytest
from fastapi.testclient import TestClient

from config import settings
from auth import TrustedHeaderStrategy
from database import init_db
from realtime import ConnectionRegistry
from storage.users import sync_user, set_admin_access

OWNER_EMAIL = "thebrotherhoodofalaska@outlook.com"


# ==================== Database Fixtures ====================

@pytest.fixture(scope="function")
def db_path(tmp_path, monkeypatch):
    """A brand-new database file for every test."""
    path = tmp_path / "test.sqlite3"
    monkeypatch.setattr(settings, "database_url", f"sqlite:///{path}")
    monkeypatch.setattr(settings, "enable_scheduler", False)
    init_db()
    return path


# ==================== App Fixtures ====================

@pytest.fixture(scope="function")
def registry():
    return ConnectionRegistry()


@pytest.fixture(scope="function")
def app(db_path, registry):
    from main import create_app
    return create_app(identity_strategy=TrustedHeaderStrategy(), registry=registry)


@pytest.fixture(scope="function")
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def as_user():
    """Request headers that identify the caller under the trusted-header strategy."""
    def _headers(user):
        return {"X-User-Id": user["id"]}
    return _headers


# ==================== User Fixtures ====================

def make_user(user_id, email, display_name=None):
    return sync_user(user_id, email, display_name or user_id, None, settings.owner_email_set)


@pytest.fixture
def owner(db_path):
    return make_user("owner-1", OWNER_EMAIL, "Owner")


@pytest.fixture
def alice(db_path):
    return make_user("alice-1", "alice@example.com", "Alice")


@pytest.fixture
def bob(db_path):
    return make_user("bob-1", "bob@example.com", "Bob")


@pytest.fixture
def admin_user(db_path):
    make_user("admin-1", "admin@example.com", "Admin")
    return set_admin_access("admin-1", True)
