# =======================================================================================
# app/api/routes/users.py - User Management Endpoints
# =======================================================================================
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.engine import Connection

from ...models.enums import UserRole
from ...models.schemas import User, UserCreateRequest, UserUpdateRequest
from ...services.user_service import UserService
from ...utils.exceptions import ConflictError, NotFoundError
from ..dependencies import get_db_connection

router = APIRouter()
user_service = UserService()


@router.get("/users", response_model=List[User])
def list_users(
    is_active: Optional[bool] = Query(None),
    role: Optional[UserRole] = Query(None),
    conn: Connection = Depends(get_db_connection, scope="function"),
):
    return user_service.list_users(conn, is_active=is_active, role=role)


@router.post("/users", response_model=User, status_code=status.HTTP_201_CREATED)
def create_user(request: UserCreateRequest, conn: Connection = Depends(get_db_connection, scope="function")):
    try:
        return user_service.create_user(conn, request)
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.get("/users/{user_id}", response_model=User)
def get_user(user_id: str, conn: Connection = Depends(get_db_connection, scope="function")):
    try:
        return user_service.get_user(conn, user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.patch("/users/{user_id}", response_model=User)
def update_user(user_id: str, request: UserUpdateRequest, conn: Connection = Depends(get_db_connection, scope="function")):
    try:
        return user_service.update_user(conn, user_id, request)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
