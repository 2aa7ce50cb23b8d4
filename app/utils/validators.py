# =======================================================================================
# app/utils/validators.py - Validation Helpers
# =======================================================================================
from datetime import datetime, timezone
from typing import Any, Optional

from .exceptions import ValidationError


def require_text(name: str, value: Any) -> str:
    """Return ``value`` stripped, or raise ValidationError if it is not a non-empty string."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"Missing required field: {name}")
    return value.strip()


def normalize_rfid_uid(raw_uid: str) -> str:
    """Tokens are stored as uppercase hex; match the way the card was registered."""
    return raw_uid.strip().upper()


def normalize_email(email: str) -> str:
    return email.strip().lower()


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Attach UTC to naive datetimes (some drivers drop the offset on read)
    and convert aware ones to UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
