# =======================================================================================
# app/api/responses.py - Access Check Response Mapping
# =======================================================================================
from datetime import datetime
from typing import Any, Dict, Tuple

from ..models.enums import DecisionOutcome, ErrorCode
from ..models.schemas import DecisionResult

STATUS_BY_OUTCOME = {
    DecisionOutcome.GRANTED: 200,
    DecisionOutcome.SCANNER_NOT_FOUND: 404,
    DecisionOutcome.TOKEN_NOT_FOUND: 404,
    DecisionOutcome.USER_NOT_FOUND: 404,
    DecisionOutcome.SCANNER_DISABLED: 403,
    DecisionOutcome.TOKEN_DISABLED: 403,
    DecisionOutcome.USER_DISABLED: 403,
    DecisionOutcome.NO_ACCESS: 403,
    DecisionOutcome.ACCESS_DISABLED: 403,
    DecisionOutcome.ACCESS_EXPIRED: 403,
}

STATUS_BY_ERROR = {
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.INTERNAL: 500,
}

MESSAGES = {
    DecisionOutcome.SCANNER_NOT_FOUND: "Scanner not found",
    DecisionOutcome.SCANNER_DISABLED: "Scanner is disabled",
    DecisionOutcome.TOKEN_NOT_FOUND: "Token not found",
    DecisionOutcome.TOKEN_DISABLED: "Token is disabled",
    DecisionOutcome.USER_NOT_FOUND: "User not found",
    DecisionOutcome.USER_DISABLED: "User is disabled",
    DecisionOutcome.NO_ACCESS: "Access denied for this scanner",
    DecisionOutcome.ACCESS_DISABLED: "Access to this scanner is disabled",
    DecisionOutcome.ACCESS_EXPIRED: "Access to this scanner has expired",
    ErrorCode.VALIDATION_ERROR: "Missing required fields. Both scanner and token are required.",
    ErrorCode.INTERNAL: "Internal server error",
}


def format_timestamp(value: datetime) -> str:
    return value.isoformat()


def status_for(outcome: DecisionOutcome) -> int:
    return STATUS_BY_OUTCOME[outcome]


def build_error_response(code: ErrorCode, timestamp: datetime) -> Tuple[int, Dict[str, Any]]:
    """Body for requests that never produced a decision."""
    return STATUS_BY_ERROR[code], {
        "access": {"granted": False},
        "error": MESSAGES[code],
        "code": code.value,
        "timestamp": format_timestamp(timestamp),
    }


def build_decision_response(result: DecisionResult, timestamp: datetime) -> Tuple[int, Dict[str, Any]]:
    """
    Map a committed decision to (status, body).

    Grants and registered-but-denied outcomes carry the access/data shape;
    lookups that found nothing to talk about use the error shape.
    """
    status = status_for(result.outcome)

    if status == 404:
        return status, {
            "access": {"granted": False},
            "error": MESSAGES[result.outcome],
            "code": result.outcome.value,
            "timestamp": format_timestamp(timestamp),
        }

    access: Dict[str, Any] = {"granted": result.granted}
    if result.until is not None:
        access["until"] = format_timestamp(result.until)
    if not result.granted:
        access["denyReason"] = MESSAGES[result.outcome]

    body: Dict[str, Any] = {
        "access": access,
        "data": {
            "token": result.token_uid,
            "user": result.user_label,
            "scanner": result.scanner_id,
        },
        "timestamp": format_timestamp(timestamp),
    }
    if not result.granted:
        body["code"] = result.outcome.value
    return status, body
