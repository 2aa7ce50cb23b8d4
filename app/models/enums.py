# =======================================================================================
# app/models/enums.py - Enums and Constants
# =======================================================================================
from enum import Enum
from typing import Literal

# Type aliases for better type hints
UserRole = Literal["root", "admin", "user"]
ReaderType = Literal["entry", "exit", "both"]


class DecisionOutcome(Enum):
    """Terminal outcomes of an access check."""
    GRANTED = "GRANTED"
    SCANNER_NOT_FOUND = "SCANNER_NOT_FOUND"
    SCANNER_DISABLED = "SCANNER_DISABLED"
    TOKEN_NOT_FOUND = "TOKEN_NOT_FOUND"
    TOKEN_DISABLED = "TOKEN_DISABLED"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    USER_DISABLED = "USER_DISABLED"
    NO_ACCESS = "NO_ACCESS"
    ACCESS_DISABLED = "ACCESS_DISABLED"
    ACCESS_EXPIRED = "ACCESS_EXPIRED"


# Tags written to access_logs.denial_reason
DENIAL_REASONS = {
    DecisionOutcome.SCANNER_DISABLED: "scanner disabled",
    DecisionOutcome.TOKEN_NOT_FOUND: "token not found",
    DecisionOutcome.TOKEN_DISABLED: "token disabled",
    DecisionOutcome.USER_NOT_FOUND: "user not found",
    DecisionOutcome.USER_DISABLED: "user disabled",
    DecisionOutcome.NO_ACCESS: "no access",
    DecisionOutcome.ACCESS_DISABLED: "access disabled",
    DecisionOutcome.ACCESS_EXPIRED: "access expired",
}


class ErrorCode(Enum):
    """Codes for requests that never reach a decision."""
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL = "INTERNAL"
