"""
In-memory stand-ins for the access repositories, plus a database manager
whose commits always fail.

Writes are staged per unit of work and only become visible in the shared
state once the block exits cleanly, mirroring a committed transaction.
"""

import uuid
from contextlib import contextmanager
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy.exc import OperationalError

from app.models.schemas import AccessGrant, AccessLogEntry, Scanner, Token, User
from app.repositories.base import AccessStore
from app.utils.exceptions import DatastoreError


class InMemoryData:
    def __init__(self):
        self.scanners: Dict[str, Scanner] = {}
        self.tokens: Dict[str, Token] = {}
        self.users: Dict[str, User] = {}
        self.grants: Dict[Tuple[str, str], AccessGrant] = {}
        self.logs: List[AccessLogEntry] = []

    # ---- seeding helpers ----

    def add_scanner(self, scanner_id="S1", is_active=True, name="Front door", location="Lobby") -> Scanner:
        scanner = Scanner(id=scanner_id, name=name, location=location, is_active=is_active)
        self.scanners[scanner.id] = scanner
        return scanner

    def add_user(self, user_id="U1", is_active=True, email=None) -> User:
        user = User(id=user_id, email=email or f"{user_id.lower()}@example.com", is_active=is_active)
        self.users[user.id] = user
        return user

    def add_token(self, rfid_uid="A1B2C3D4", user_id="U1", is_active=True, token_id=None) -> Token:
        token = Token(id=token_id or f"T-{rfid_uid}", rfid_uid=rfid_uid, user_id=user_id,
                      name="Main card", is_active=is_active)
        self.tokens[token.id] = token
        return token

    def add_grant(self, user_id="U1", scanner_id="S1", is_active=True,
                  expires_at: Optional[datetime] = None) -> AccessGrant:
        grant = AccessGrant(id=str(uuid.uuid4()), user_id=user_id, scanner_id=scanner_id,
                            is_active=is_active, expires_at=expires_at)
        self.grants[(user_id, scanner_id)] = grant
        return grant


class _Scanners:
    def __init__(self, data: InMemoryData):
        self.data = data

    def get(self, scanner_id):
        return self.data.scanners.get(scanner_id)


class _Tokens:
    def __init__(self, data: InMemoryData, pending: list):
        self.data = data
        self.pending = pending

    def get_by_uid(self, rfid_uid):
        return next((t for t in self.data.tokens.values() if t.rfid_uid == rfid_uid), None)

    def touch_last_used(self, token_id, used_at):
        self.pending.append(("touch", token_id, used_at))


class _Users:
    def __init__(self, data: InMemoryData):
        self.data = data

    def get(self, user_id):
        return self.data.users.get(user_id)


class _Grants:
    def __init__(self, data: InMemoryData):
        self.data = data

    def get_for(self, user_id, scanner_id):
        return self.data.grants.get((user_id, scanner_id))


class _AuditLog:
    def __init__(self, pending: list):
        self.pending = pending

    def append(self, entry):
        log_id = str(uuid.uuid4())
        self.pending.append(("log", entry.model_copy(update={"id": log_id})))
        return log_id


class InMemoryUnitOfWork:
    """Unit of work over InMemoryData; set ``fail_on_commit`` to simulate a lost write."""

    def __init__(self, data: InMemoryData):
        self.data = data
        self.calls = 0
        self.fail_on_commit = False

    @contextmanager
    def __call__(self):
        self.calls += 1
        pending: list = []
        yield AccessStore(
            scanners=_Scanners(self.data),
            tokens=_Tokens(self.data, pending),
            users=_Users(self.data),
            grants=_Grants(self.data),
            audit_log=_AuditLog(pending),
        )
        if self.fail_on_commit:
            raise DatastoreError("commit failed")
        for op in pending:
            if op[0] == "log":
                self.data.logs.append(op[1])
            else:
                _, token_id, used_at = op
                token = self.data.tokens[token_id]
                self.data.tokens[token_id] = token.model_copy(update={"last_used_at": used_at})


class CommitFailingManager:
    """Runs the work on a real connection, then fails where the commit would be."""

    def __init__(self, manager):
        self.manager = manager

    @contextmanager
    def get_connection(self):
        with self.manager.engine.connect() as conn:
            trans = conn.begin()
            yield conn
            trans.rollback()
            raise OperationalError("COMMIT", {}, Exception("disk I/O error"))
