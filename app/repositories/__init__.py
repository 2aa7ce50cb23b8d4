# =======================================================================================
# app/repositories/__init__.py - Repositories Package
# =======================================================================================
from .base import (
    AccessStore,
    AuditLogWriter,
    GrantRepository,
    ScannerRepository,
    TokenRepository,
    UnitOfWork,
    UserRepository,
)
from .sql import SqlUnitOfWork, build_store

__all__ = [
    "AccessStore", "AuditLogWriter", "GrantRepository", "ScannerRepository",
    "TokenRepository", "UnitOfWork", "UserRepository", "SqlUnitOfWork", "build_store",
]
