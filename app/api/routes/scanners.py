# =======================================================================================
# app/api/routes/scanners.py - Scanner Management Endpoints
# =======================================================================================
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.engine import Connection

from ...models.schemas import Scanner, ScannerCreateRequest, ScannerUpdateRequest
from ...services.scanner_service import ScannerService
from ...utils.exceptions import NotFoundError
from ..dependencies import get_db_connection

router = APIRouter()
scanner_service = ScannerService()


@router.get("/scanners", response_model=List[Scanner])
def list_scanners(
    is_active: Optional[bool] = Query(None),
    conn: Connection = Depends(get_db_connection, scope="function"),
):
    return scanner_service.list_scanners(conn, is_active=is_active)


@router.post("/scanners", response_model=Scanner, status_code=status.HTTP_201_CREATED)
def create_scanner(request: ScannerCreateRequest, conn: Connection = Depends(get_db_connection, scope="function")):
    return scanner_service.create_scanner(conn, request)


@router.get("/scanners/{scanner_id}", response_model=Scanner)
def get_scanner(scanner_id: str, conn: Connection = Depends(get_db_connection, scope="function")):
    try:
        return scanner_service.get_scanner(conn, scanner_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.patch("/scanners/{scanner_id}", response_model=Scanner)
def update_scanner(scanner_id: str, request: ScannerUpdateRequest, conn: Connection = Depends(get_db_connection, scope="function")):
    try:
        return scanner_service.update_scanner(conn, scanner_id, request)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
