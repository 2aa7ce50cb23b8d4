# =======================================================================================
# app/repositories/base.py - Datastore Interfaces
# =======================================================================================
from dataclasses import dataclass
from datetime import datetime
from typing import ContextManager, Optional, Protocol

from ..models.schemas import AccessGrant, AccessLogEntry, Scanner, Token, User


class ScannerRepository(Protocol):
    def get(self, scanner_id: str) -> Optional[Scanner]: ...


class TokenRepository(Protocol):
    def get_by_uid(self, rfid_uid: str) -> Optional[Token]: ...

    def touch_last_used(self, token_id: str, used_at: datetime) -> None: ...


class UserRepository(Protocol):
    def get(self, user_id: str) -> Optional[User]: ...


class GrantRepository(Protocol):
    def get_for(self, user_id: str, scanner_id: str) -> Optional[AccessGrant]: ...


class AuditLogWriter(Protocol):
    def append(self, entry: AccessLogEntry) -> str: ...


@dataclass
class AccessStore:
    """Repositories sharing one transaction."""
    scanners: ScannerRepository
    tokens: TokenRepository
    users: UserRepository
    grants: GrantRepository
    audit_log: AuditLogWriter


class UnitOfWork(Protocol):
    """
    Callable returning a context manager that yields an AccessStore.

    Leaving the context normally commits every write made through the store;
    leaving it with an exception discards them. Failures to read, write or
    commit surface as DatastoreError.
    """

    def __call__(self) -> ContextManager[AccessStore]: ...
