"""
Shared fixtures.

Every test gets its own in-memory SQLite database; the API's database
dependency is overridden so no real MySQL server is needed.
"""

import os

os.environ.setdefault("DB_URL", "sqlite://")

import uuid
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import insert

from app.api.dependencies import get_db_manager
from app.database import DatabaseManager
from app.main import app
from app.models.tables import scanner_access, scanners, tokens, users

CREATED = datetime(2026, 1, 1, 8, 0, tzinfo=timezone.utc)


@pytest.fixture
def db():
    manager = DatabaseManager("sqlite://")
    manager.create_schema()
    yield manager
    manager.dispose()


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db_manager] = lambda: db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


class Seeder:
    """Inserts rows directly, bypassing the admin services."""

    def __init__(self, manager: DatabaseManager):
        self.manager = manager

    def user(self, email="u1@example.com", is_active=True, full_name=None, role="user", user_id=None):
        user_id = user_id or str(uuid.uuid4())
        with self.manager.get_connection() as conn:
            conn.execute(insert(users).values(
                id=user_id, email=email, role=role, full_name=full_name,
                is_active=is_active, created_at=CREATED, updated_at=CREATED,
            ))
        return user_id

    def scanner(self, name="Front door", is_active=True, scanner_id=None):
        scanner_id = scanner_id or str(uuid.uuid4())
        with self.manager.get_connection() as conn:
            conn.execute(insert(scanners).values(
                id=scanner_id, name=name, location="Lobby", description=None,
                reader_type="both", is_active=is_active, created_at=CREATED, updated_at=CREATED,
            ))
        return scanner_id

    def token(self, user_id, rfid_uid="A1B2C3D4", is_active=True, token_id=None):
        token_id = token_id or str(uuid.uuid4())
        with self.manager.get_connection() as conn:
            conn.execute(insert(tokens).values(
                id=token_id, rfid_uid=rfid_uid, user_id=user_id, name="Main card",
                is_active=is_active, last_used_at=None, created_at=CREATED, updated_at=CREATED,
            ))
        return token_id

    def grant(self, user_id, scanner_id, is_active=True, expires_at=None):
        grant_id = str(uuid.uuid4())
        with self.manager.get_connection() as conn:
            conn.execute(insert(scanner_access).values(
                id=grant_id, user_id=user_id, scanner_id=scanner_id, granted_by=None,
                created_at=CREATED, expires_at=expires_at, is_active=is_active,
            ))
        return grant_id


@pytest.fixture
def seed(db):
    return Seeder(db)
