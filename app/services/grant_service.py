# =======================================================================================
# app/services/grant_service.py - Scanner Access Grants
# =======================================================================================
import logging
import uuid
from typing import List, Optional

from sqlalchemy import text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import IntegrityError

from ..database import timestamp_params
from ..models.schemas import AccessGrant, GrantCreateRequest, GrantUpdateRequest
from ..utils.exceptions import ConflictError, NotFoundError
from ..utils.validators import as_utc, utc_now

logger = logging.getLogger(__name__)

ALREADY_GRANTED = "This user already has access to this scanner"


class GrantService:
    """Grants, edits and revokes a user's access to a scanner."""

    @staticmethod
    def _require(conn: Connection, table: str, record_id: str, label: str) -> None:
        exists = conn.execute(
            text(f"SELECT id FROM {table} WHERE id = :id"),
            {"id": record_id},
        ).first()
        if not exists:
            raise NotFoundError(f"{label} not found")

    def grant_access(self, conn: Connection, request: GrantCreateRequest) -> AccessGrant:
        """
        Pair a user with a scanner. A second grant for the same pair is a
        conflict; edit the existing grant instead.
        """
        self._require(conn, "users", request.user_id, "User")
        self._require(conn, "scanners", request.scanner_id, "Scanner")
        if request.granted_by is not None:
            self._require(conn, "users", request.granted_by, "Granting user")

        existing = conn.execute(
            text("""
                SELECT id FROM scanner_access
                WHERE user_id = :user_id AND scanner_id = :scanner_id
            """),
            {"user_id": request.user_id, "scanner_id": request.scanner_id},
        ).first()
        if existing:
            raise ConflictError(ALREADY_GRANTED)

        grant_id = str(uuid.uuid4())
        try:
            conn.execute(
                timestamp_params(
                    text("""
                        INSERT INTO scanner_access
                            (id, user_id, scanner_id, granted_by, created_at, expires_at, is_active)
                        VALUES
                            (:id, :user_id, :scanner_id, :granted_by, :created_at, :expires_at, :is_active)
                    """),
                    "created_at", "expires_at",
                ),
                {
                    "id": grant_id,
                    "user_id": request.user_id,
                    "scanner_id": request.scanner_id,
                    "granted_by": request.granted_by,
                    "created_at": utc_now(),
                    "expires_at": as_utc(request.expires_at),
                    "is_active": True,
                },
            )
        except IntegrityError as e:
            raise ConflictError(ALREADY_GRANTED) from e

        logger.info(
            "Granted user %s access to scanner %s (expires %s)",
            request.user_id, request.scanner_id, request.expires_at or "never",
        )
        return self.get_grant(conn, grant_id)

    def get_grant(self, conn: Connection, grant_id: str) -> AccessGrant:
        row = conn.execute(
            text("SELECT * FROM scanner_access WHERE id = :id"),
            {"id": grant_id},
        ).mappings().first()

        if not row:
            raise NotFoundError("Access grant not found")
        return AccessGrant.model_validate(dict(row))

    def list_grants(
        self,
        conn: Connection,
        user_id: Optional[str] = None,
        scanner_id: Optional[str] = None,
    ) -> List[AccessGrant]:
        where = []
        params = {}
        if user_id is not None:
            where.append("user_id = :user_id")
            params["user_id"] = user_id
        if scanner_id is not None:
            where.append("scanner_id = :scanner_id")
            params["scanner_id"] = scanner_id

        sql = "SELECT * FROM scanner_access"
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += " ORDER BY created_at DESC"

        rows = conn.execute(text(sql), params).mappings().all()
        return [AccessGrant.model_validate(dict(row)) for row in rows]

    def update_grant(self, conn: Connection, grant_id: str, request: GrantUpdateRequest) -> AccessGrant:
        """Change the expiration (null makes it permanent) or the active flag."""
        changes = request.model_dump(exclude_unset=True)
        if "is_active" in changes and changes["is_active"] is None:
            del changes["is_active"]
        if "expires_at" in changes:
            changes["expires_at"] = as_utc(changes["expires_at"])
        self.get_grant(conn, grant_id)

        if changes:
            assignments = ", ".join(f"{column} = :{column}" for column in changes)
            statement = text(f"UPDATE scanner_access SET {assignments} WHERE id = :id")
            if "expires_at" in changes:
                statement = timestamp_params(statement, "expires_at")
            conn.execute(statement, {**changes, "id": grant_id})
            logger.info("Updated access grant %s: %s", grant_id, sorted(changes))

        return self.get_grant(conn, grant_id)

    def revoke_access(self, conn: Connection, grant_id: str) -> None:
        grant = self.get_grant(conn, grant_id)
        conn.execute(
            text("DELETE FROM scanner_access WHERE id = :id"),
            {"id": grant_id},
        )
        logger.info("Revoked user %s access to scanner %s", grant.user_id, grant.scanner_id)
