# =======================================================================================
# app/api/routes/grants.py - Scanner Access Grant Endpoints
# =======================================================================================
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.engine import Connection

from ...models.schemas import AccessGrant, GrantCreateRequest, GrantUpdateRequest
from ...services.grant_service import GrantService
from ...utils.exceptions import ConflictError, NotFoundError
from ..dependencies import get_db_connection

router = APIRouter()
grant_service = GrantService()


@router.get("/grants", response_model=List[AccessGrant])
def list_grants(
    user_id: Optional[str] = Query(None),
    scanner_id: Optional[str] = Query(None),
    conn: Connection = Depends(get_db_connection, scope="function"),
):
    return grant_service.list_grants(conn, user_id=user_id, scanner_id=scanner_id)


@router.post("/grants", response_model=AccessGrant, status_code=status.HTTP_201_CREATED)
def grant_access(request: GrantCreateRequest, conn: Connection = Depends(get_db_connection, scope="function")):
    try:
        return grant_service.grant_access(conn, request)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.get("/grants/{grant_id}", response_model=AccessGrant)
def get_grant(grant_id: str, conn: Connection = Depends(get_db_connection, scope="function")):
    try:
        return grant_service.get_grant(conn, grant_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.patch("/grants/{grant_id}", response_model=AccessGrant)
def update_grant(grant_id: str, request: GrantUpdateRequest, conn: Connection = Depends(get_db_connection, scope="function")):
    try:
        return grant_service.update_grant(conn, grant_id, request)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.delete("/grants/{grant_id}", status_code=status.HTTP_204_NO_CONTENT)
def revoke_access(grant_id: str, conn: Connection = Depends(get_db_connection, scope="function")):
    try:
        grant_service.revoke_access(conn, grant_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
