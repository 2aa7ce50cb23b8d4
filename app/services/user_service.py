# =======================================================================================
# app/services/user_service.py - User Management Service
# =======================================================================================
import logging
import uuid
from typing import List, Optional

from sqlalchemy import text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import IntegrityError

from ..database import timestamp_params
from ..models.enums import UserRole
from ..models.schemas import User, UserCreateRequest, UserUpdateRequest
from ..utils.exceptions import ConflictError, NotFoundError
from ..utils.validators import normalize_email, utc_now

logger = logging.getLogger(__name__)


class UserService:
    """Handles user management operations."""

    def create_user(self, conn: Connection, request: UserCreateRequest) -> User:
        """Create a new user; emails are unique regardless of case."""
        now = utc_now()
        user_id = str(uuid.uuid4())
        email = normalize_email(request.email)

        try:
            conn.execute(
                timestamp_params(
                    text("""
                        INSERT INTO users (id, email, role, full_name, is_active, created_at, updated_at)
                        VALUES (:id, :email, :role, :full_name, :is_active, :now, :now)
                    """),
                    "now",
                ),
                {
                    "id": user_id,
                    "email": email,
                    "role": request.role,
                    "full_name": request.full_name,
                    "is_active": request.is_active,
                    "now": now,
                },
            )
        except IntegrityError as e:
            raise ConflictError(f"A user with email {email} already exists") from e

        logger.info("Created user %s (%s, role=%s)", user_id, email, request.role)
        return self.get_user(conn, user_id)

    def get_user(self, conn: Connection, user_id: str) -> User:
        row = conn.execute(
            text("SELECT * FROM users WHERE id = :id"),
            {"id": user_id},
        ).mappings().first()

        if not row:
            raise NotFoundError("User not found")
        return User.model_validate(dict(row))

    def list_users(
        self,
        conn: Connection,
        is_active: Optional[bool] = None,
        role: Optional[UserRole] = None,
    ) -> List[User]:
        where = []
        params = {}
        if is_active is not None:
            where.append("is_active = :is_active")
            params["is_active"] = is_active
        if role is not None:
            where.append("role = :role")
            params["role"] = role

        sql = "SELECT * FROM users"
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += " ORDER BY full_name, email"

        rows = conn.execute(text(sql), params).mappings().all()
        return [User.model_validate(dict(row)) for row in rows]

    def update_user(self, conn: Connection, user_id: str, request: UserUpdateRequest) -> User:
        """
        Change name, role or active flag. Users are deactivated, never
        deleted, since tokens and grants keep referring to them.
        """
        changes = request.model_dump(exclude_unset=True)
        # full_name is the only nullable column
        changes = {k: v for k, v in changes.items() if v is not None or k == "full_name"}
        self.get_user(conn, user_id)

        if changes:
            assignments = ", ".join(f"{column} = :{column}" for column in changes)
            conn.execute(
                timestamp_params(
                    text(f"UPDATE users SET {assignments}, updated_at = :updated_at WHERE id = :id"),
                    "updated_at",
                ),
                {**changes, "updated_at": utc_now(), "id": user_id},
            )
            logger.info("Updated user %s: %s", user_id, sorted(changes))

        return self.get_user(conn, user_id)
