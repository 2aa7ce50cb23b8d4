# =======================================================================================
# app/services/token_service.py - Token Management Service
# =======================================================================================
import logging
import uuid
from typing import List, Optional

from sqlalchemy import text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import IntegrityError

from ..database import timestamp_params
from ..models.schemas import Token, TokenCreateRequest, TokenUpdateRequest
from ..utils.exceptions import ConflictError, NotFoundError
from ..utils.validators import normalize_rfid_uid, utc_now

logger = logging.getLogger(__name__)


class TokenService:
    """Registers RFID tokens and assigns them to users."""

    @staticmethod
    def _require_user(conn: Connection, user_id: str) -> None:
        exists = conn.execute(
            text("SELECT id FROM users WHERE id = :id"),
            {"id": user_id},
        ).first()
        if not exists:
            raise NotFoundError("User not found")

    def register_token(self, conn: Connection, request: TokenCreateRequest) -> Token:
        """Register a card for a user. The UID is stored uppercase."""
        rfid_uid = normalize_rfid_uid(request.rfid_uid)
        self._require_user(conn, request.user_id)

        duplicate = conn.execute(
            text("SELECT id FROM tokens WHERE rfid_uid = :uid"),
            {"uid": rfid_uid},
        ).first()
        if duplicate:
            raise ConflictError(f"Token {rfid_uid} is already registered")

        now = utc_now()
        token_id = str(uuid.uuid4())
        try:
            conn.execute(
                timestamp_params(
                    text("""
                        INSERT INTO tokens
                            (id, rfid_uid, user_id, name, is_active, last_used_at, created_at, updated_at)
                        VALUES
                            (:id, :uid, :user_id, :name, :is_active, NULL, :now, :now)
                    """),
                    "now",
                ),
                {
                    "id": token_id,
                    "uid": rfid_uid,
                    "user_id": request.user_id,
                    "name": request.name,
                    "is_active": request.is_active,
                    "now": now,
                },
            )
        except IntegrityError as e:
            # lost a race with a concurrent registration
            raise ConflictError(f"Token {rfid_uid} is already registered") from e

        logger.info("Registered token %s (%s) for user %s", token_id, rfid_uid, request.user_id)
        return self.get_token(conn, token_id)

    def get_token(self, conn: Connection, token_id: str) -> Token:
        row = conn.execute(
            text("SELECT * FROM tokens WHERE id = :id"),
            {"id": token_id},
        ).mappings().first()

        if not row:
            raise NotFoundError("Token not found")
        return Token.model_validate(dict(row))

    def list_tokens(
        self,
        conn: Connection,
        user_id: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> List[Token]:
        where = []
        params = {}
        if user_id is not None:
            where.append("user_id = :user_id")
            params["user_id"] = user_id
        if is_active is not None:
            where.append("is_active = :is_active")
            params["is_active"] = is_active

        sql = "SELECT * FROM tokens"
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += " ORDER BY created_at DESC"

        rows = conn.execute(text(sql), params).mappings().all()
        return [Token.model_validate(dict(row)) for row in rows]

    def update_token(self, conn: Connection, token_id: str, request: TokenUpdateRequest) -> Token:
        """Rename, reassign or enable/disable a token. last_used_at is never touched here."""
        changes = request.model_dump(exclude_unset=True, exclude_none=True)
        self.get_token(conn, token_id)

        if "user_id" in changes:
            self._require_user(conn, changes["user_id"])

        if changes:
            assignments = ", ".join(f"{column} = :{column}" for column in changes)
            conn.execute(
                timestamp_params(
                    text(f"UPDATE tokens SET {assignments}, updated_at = :updated_at WHERE id = :id"),
                    "updated_at",
                ),
                {**changes, "updated_at": utc_now(), "id": token_id},
            )
            logger.info("Updated token %s: %s", token_id, sorted(changes))

        return self.get_token(conn, token_id)
