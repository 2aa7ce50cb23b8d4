# =======================================================================================
# app/api/routes/tokens.py - Token Management Endpoints
# =======================================================================================
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.engine import Connection

from ...models.schemas import Token, TokenCreateRequest, TokenUpdateRequest
from ...services.token_service import TokenService
from ...utils.exceptions import ConflictError, NotFoundError
from ..dependencies import get_db_connection

router = APIRouter()
token_service = TokenService()


@router.get("/tokens", response_model=List[Token])
def list_tokens(
    user_id: Optional[str] = Query(None),
    is_active: Optional[bool] = Query(None),
    conn: Connection = Depends(get_db_connection, scope="function"),
):
    return token_service.list_tokens(conn, user_id=user_id, is_active=is_active)


@router.post("/tokens", response_model=Token, status_code=status.HTTP_201_CREATED)
def register_token(request: TokenCreateRequest, conn: Connection = Depends(get_db_connection, scope="function")):
    try:
        return token_service.register_token(conn, request)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.get("/tokens/{token_id}", response_model=Token)
def get_token(token_id: str, conn: Connection = Depends(get_db_connection, scope="function")):
    try:
        return token_service.get_token(conn, token_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.patch("/tokens/{token_id}", response_model=Token)
def update_token(token_id: str, request: TokenUpdateRequest, conn: Connection = Depends(get_db_connection, scope="function")):
    try:
        return token_service.update_token(conn, token_id, request)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
