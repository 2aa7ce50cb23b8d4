# =======================================================================================
# app/repositories/sql.py - SQL Repositories
# =======================================================================================
import logging
import uuid
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, Optional

from sqlalchemy import text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from ..database import DatabaseManager, timestamp_params
from ..models.schemas import AccessGrant, AccessLogEntry, Scanner, Token, User
from ..utils.exceptions import DatastoreError
from .base import AccessStore

logger = logging.getLogger(__name__)


class SqlScannerRepository:
    def __init__(self, conn: Connection):
        self.conn = conn

    def get(self, scanner_id: str) -> Optional[Scanner]:
        row = self.conn.execute(
            text("SELECT * FROM scanners WHERE id = :id"),
            {"id": scanner_id},
        ).mappings().first()
        return Scanner.model_validate(dict(row)) if row else None


class SqlTokenRepository:
    def __init__(self, conn: Connection):
        self.conn = conn

    def get_by_uid(self, rfid_uid: str) -> Optional[Token]:
        row = self.conn.execute(
            text("SELECT * FROM tokens WHERE rfid_uid = :uid"),
            {"uid": rfid_uid},
        ).mappings().first()
        return Token.model_validate(dict(row)) if row else None

    def touch_last_used(self, token_id: str, used_at: datetime) -> None:
        # last write wins between concurrent taps
        self.conn.execute(
            timestamp_params(
                text("UPDATE tokens SET last_used_at = :used_at WHERE id = :id"),
                "used_at",
            ),
            {"used_at": used_at, "id": token_id},
        )


class SqlUserRepository:
    def __init__(self, conn: Connection):
        self.conn = conn

    def get(self, user_id: str) -> Optional[User]:
        row = self.conn.execute(
            text("SELECT * FROM users WHERE id = :id"),
            {"id": user_id},
        ).mappings().first()
        return User.model_validate(dict(row)) if row else None


class SqlGrantRepository:
    def __init__(self, conn: Connection):
        self.conn = conn

    def get_for(self, user_id: str, scanner_id: str) -> Optional[AccessGrant]:
        row = self.conn.execute(
            text("""
                SELECT * FROM scanner_access
                WHERE user_id = :user_id AND scanner_id = :scanner_id
            """),
            {"user_id": user_id, "scanner_id": scanner_id},
        ).mappings().first()
        return AccessGrant.model_validate(dict(row)) if row else None


class SqlAuditLogWriter:
    def __init__(self, conn: Connection):
        self.conn = conn

    def append(self, entry: AccessLogEntry) -> str:
        log_id = entry.id or str(uuid.uuid4())
        self.conn.execute(
            timestamp_params(
                text("""
                    INSERT INTO access_logs
                        (id, token_id, scanner_id, access_granted, rfid_uid, denial_reason, timestamp)
                    VALUES
                        (:id, :token_id, :scanner_id, :granted, :uid, :reason, :ts)
                """),
                "ts",
            ),
            {
                "id": log_id,
                "token_id": entry.token_id,
                "scanner_id": entry.scanner_id,
                "granted": entry.access_granted,
                "uid": entry.rfid_uid,
                "reason": entry.denial_reason,
                "ts": entry.timestamp,
            },
        )
        return log_id


def build_store(conn: Connection) -> AccessStore:
    return AccessStore(
        scanners=SqlScannerRepository(conn),
        tokens=SqlTokenRepository(conn),
        users=SqlUserRepository(conn),
        grants=SqlGrantRepository(conn),
        audit_log=SqlAuditLogWriter(conn),
    )


class SqlUnitOfWork:
    """Opens one transaction per access check on the given database."""

    def __init__(self, manager: DatabaseManager):
        self.manager = manager

    @contextmanager
    def __call__(self) -> Iterator[AccessStore]:
        try:
            # engine.begin() commits when the block exits cleanly
            with self.manager.get_connection() as conn:
                yield build_store(conn)
        except SQLAlchemyError as e:
            logger.error("Access check transaction failed: %s", e, exc_info=True)
            raise DatastoreError(str(e)) from e
