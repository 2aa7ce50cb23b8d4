# =======================================================================================
# app/utils/exceptions.py - Custom Exceptions
# =======================================================================================
class RFIDAccessControlError(Exception):
    """Base exception for RFID access control system."""
    pass

class ValidationError(RFIDAccessControlError):
    """Raised when an access request is missing the scanner or the token."""
    pass

class NotFoundError(RFIDAccessControlError):
    """Raised when an administered record does not exist."""
    pass

class ConflictError(RFIDAccessControlError):
    """Raised when a write would violate a uniqueness rule."""
    pass

class DatastoreError(RFIDAccessControlError):
    """Raised when the datastore cannot be read, written or committed."""
    pass
