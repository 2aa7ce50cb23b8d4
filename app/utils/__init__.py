# =======================================================================================
# app/utils/__init__.py - Utils Package
# =======================================================================================
from .exceptions import *
from .validators import *

__all__ = [
    "RFIDAccessControlError", "ValidationError", "NotFoundError",
    "ConflictError", "DatastoreError", "require_text", "normalize_rfid_uid",
    "normalize_email", "as_utc", "utc_now",
]
