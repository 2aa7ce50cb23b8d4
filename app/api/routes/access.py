# =======================================================================================
# app/api/routes/access.py - Access Check Endpoint (called by scanner devices)
# =======================================================================================
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from ...models.enums import ErrorCode
from ...services.access_control import AccessDecisionService
from ...utils.exceptions import DatastoreError, ValidationError
from ...utils.validators import utc_now
from ..dependencies import get_access_service
from ..responses import build_decision_response, build_error_response

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/access")
async def check_access(request: Request, service: AccessDecisionService = Depends(get_access_service)):
    """
    Verify whether an RFID token may pass a scanner.

    Public on purpose: readers call it unattended. Body:
    {"scanner": "<scanner-id>", "token": "<rfid-uid>"}.
    Anything other than 200 means keep the door locked.
    """
    timestamp = utc_now()

    try:
        body = await request.json()
    except ValueError:
        body = None
    if not isinstance(body, dict):
        body = {}

    try:
        result = await run_in_threadpool(service.decide, body.get("scanner"), body.get("token"))
    except ValidationError as e:
        logger.debug("Rejected access request: %s", e)
        status, payload = build_error_response(ErrorCode.VALIDATION_ERROR, timestamp)
    except DatastoreError:
        status, payload = build_error_response(ErrorCode.INTERNAL, timestamp)
    except Exception:
        logger.exception("Unexpected error during access check")
        status, payload = build_error_response(ErrorCode.INTERNAL, timestamp)
    else:
        status, payload = build_decision_response(result, timestamp)

    return JSONResponse(status_code=status, content=payload)
