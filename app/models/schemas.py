# =======================================================================================
# app/models/schemas.py - Pydantic Models
# =======================================================================================
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import DecisionOutcome, ReaderType, UserRole
from ..utils.validators import as_utc


class Record(BaseModel):
    """Base for rows read from the datastore."""
    model_config = ConfigDict(from_attributes=True)

    @field_validator(
        "created_at", "updated_at", "last_used_at", "expires_at", "timestamp",
        mode="after", check_fields=False,
    )
    @classmethod
    def _utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)


# ========== Stored entities ==========

class User(Record):
    id: str
    email: str
    role: UserRole = "user"
    full_name: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Scanner(Record):
    id: str
    name: str
    location: str
    description: Optional[str] = None
    reader_type: ReaderType = "both"
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Token(Record):
    id: str
    rfid_uid: str
    user_id: str
    name: str
    is_active: bool = True
    last_used_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AccessGrant(Record):
    id: str
    user_id: str
    scanner_id: str
    granted_by: Optional[str] = None
    created_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    is_active: bool = True


class AccessLogEntry(Record):
    id: Optional[str] = None
    token_id: Optional[str] = None
    scanner_id: str
    access_granted: bool
    rfid_uid: str
    denial_reason: Optional[str] = None
    timestamp: datetime


# ========== Access decision ==========

class DecisionResult(BaseModel):
    """Outcome of one access check, as computed and committed."""
    outcome: DecisionOutcome
    scanner_id: str
    token_uid: str                      # as presented by the reader
    token_id: Optional[str] = None
    user_id: Optional[str] = None
    user_email: Optional[str] = None
    until: Optional[datetime] = None
    denial_reason: Optional[str] = None

    @property
    def granted(self) -> bool:
        return self.outcome is DecisionOutcome.GRANTED

    @property
    def user_label(self) -> Optional[str]:
        return self.user_email or self.user_id


# ========== Admin: users ==========

class UserCreateRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    role: UserRole = "user"
    full_name: Optional[str] = Field(None, max_length=255)
    is_active: bool = True


class UserUpdateRequest(BaseModel):
    role: Optional[UserRole] = None
    full_name: Optional[str] = Field(None, max_length=255)
    is_active: Optional[bool] = None


# ========== Admin: scanners ==========

class ScannerCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    location: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    reader_type: ReaderType = "both"
    is_active: bool = True


class ScannerUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    reader_type: Optional[ReaderType] = None
    is_active: Optional[bool] = None


# ========== Admin: tokens ==========

class TokenCreateRequest(BaseModel):
    rfid_uid: str = Field(..., min_length=1, max_length=64, description="RFID card UID")
    user_id: str = Field(..., description="Owning user ID")
    name: str = Field(..., min_length=1, max_length=255, description="e.g. Main Card, Keychain")
    is_active: bool = True


class TokenUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    user_id: Optional[str] = None
    is_active: Optional[bool] = None


# ========== Admin: grants ==========

class GrantCreateRequest(BaseModel):
    user_id: str
    scanner_id: str
    granted_by: Optional[str] = Field(None, description="ID of the administrator granting access")
    expires_at: Optional[datetime] = Field(None, description="Absent for permanent access")


class GrantUpdateRequest(BaseModel):
    # explicit null clears the expiration (permanent access)
    expires_at: Optional[datetime] = None
    is_active: Optional[bool] = None


# ========== Logs ==========

class LogItem(BaseModel):
    id: str
    timestamp: datetime
    accessGranted: bool
    rfidUid: str
    denialReason: Optional[str] = None
    tokenId: Optional[str] = None
    tokenName: Optional[str] = None
    userId: Optional[str] = None
    userName: Optional[str] = None
    scannerId: str
    scannerName: Optional[str] = None


class LogsResponse(BaseModel):
    logs: List[LogItem]


# ========== Dashboard ==========

class EntityCounts(BaseModel):
    total: int
    active: int


class AccessStats(BaseModel):
    granted: int
    denied: int
    unknown: int                # token not registered (token_id is NULL)


class TopScanner(BaseModel):
    id: str
    name: str
    location: str
    accessCount: int


class DashboardSummary(BaseModel):
    users: EntityCounts
    scanners: EntityCounts
    tokens: EntityCounts
    totalAccessGrants: int
    accessStats: AccessStats
    topScanners: List[TopScanner]


# ========== Health ==========

class HealthResponse(BaseModel):
    status: str                 # "ok" | "error"
    dataAvailable: bool
    message: Optional[str] = None
