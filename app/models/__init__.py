# =======================================================================================
# app/models/__init__.py - Models Package
# =======================================================================================
from .schemas import *
from .enums import *

__all__ = [
    "User", "Scanner", "Token", "AccessGrant", "AccessLogEntry", "DecisionResult",
    "UserCreateRequest", "UserUpdateRequest", "ScannerCreateRequest",
    "ScannerUpdateRequest", "TokenCreateRequest", "TokenUpdateRequest",
    "GrantCreateRequest", "GrantUpdateRequest", "LogItem", "LogsResponse",
    "DashboardSummary", "HealthResponse", "UserRole", "ReaderType",
    "DecisionOutcome", "DENIAL_REASONS", "ErrorCode",
]
