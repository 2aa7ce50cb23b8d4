# =======================================================================================
# app/services/dashboard_service.py
# =======================================================================================
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import DateTime, text
from sqlalchemy.engine import Connection

from ..config import config
from ..database import timestamp_params
from ..utils.validators import as_utc


class DashboardService:
    """Aggregated statistics and access logs for the dashboard."""

    # ---------- helper mapping ----------

    @staticmethod
    def display_name(full_name: Optional[str], email: Optional[str]) -> Optional[str]:
        return full_name or email

    def clamp_limit(self, limit: int) -> int:
        return max(1, min(limit, config.LOGS_MAX_LIMIT))

    # ---------- summary ----------

    def count_entities(self, conn: Connection, table: str) -> Dict[str, int]:
        row = conn.execute(
            text(
                f"""
                SELECT
                  COUNT(*) AS total,
                  SUM(CASE WHEN is_active THEN 1 ELSE 0 END) AS active
                FROM {table}
                """
            )
        ).mappings().first()

        if not row:
            return {"total": 0, "active": 0}

        return {
            "total": int(row["total"] or 0),
            "active": int(row["active"] or 0),
        }

    def get_access_stats(self, conn: Connection, since: Optional[datetime] = None) -> Dict[str, int]:
        """Unknown = attempts with a UID that matched no registered token."""
        sql = """
            SELECT
              SUM(CASE WHEN token_id IS NOT NULL AND access_granted THEN 1 ELSE 0 END)     AS granted,
              SUM(CASE WHEN token_id IS NOT NULL AND NOT access_granted THEN 1 ELSE 0 END) AS denied,
              SUM(CASE WHEN token_id IS NULL THEN 1 ELSE 0 END)                            AS unknown
            FROM access_logs
        """
        params = {}
        if since is not None:
            sql += " WHERE timestamp >= :since"
            params["since"] = as_utc(since)

        statement = text(sql)
        if since is not None:
            statement = timestamp_params(statement, "since")

        row = conn.execute(statement, params).mappings().first()
        return {
            "granted": int(row["granted"] or 0) if row else 0,
            "denied": int(row["denied"] or 0) if row else 0,
            "unknown": int(row["unknown"] or 0) if row else 0,
        }

    def get_top_scanners(self, conn: Connection, since: Optional[datetime] = None, limit: int = 10) -> List[Dict[str, Any]]:
        where = ""
        params: Dict[str, Any] = {"limit": limit}
        if since is not None:
            where = "WHERE l.timestamp >= :since"
            params["since"] = as_utc(since)

        statement = text(
            f"""
            SELECT s.id, s.name, s.location, COUNT(l.id) AS access_count
            FROM access_logs l
            JOIN scanners s ON l.scanner_id = s.id
            {where}
            GROUP BY s.id, s.name, s.location
            ORDER BY access_count DESC, s.name
            LIMIT :limit
            """
        )
        if since is not None:
            statement = timestamp_params(statement, "since")

        rows = conn.execute(statement, params).mappings().all()
        return [
            {
                "id": row["id"],
                "name": row["name"],
                "location": row["location"],
                "accessCount": int(row["access_count"]),
            }
            for row in rows
        ]

    def get_summary(self, conn: Connection, since: Optional[datetime] = None) -> Dict[str, Any]:
        total_grants = conn.execute(text("SELECT COUNT(*) FROM scanner_access")).scalar()

        return {
            "users": self.count_entities(conn, "users"),
            "scanners": self.count_entities(conn, "scanners"),
            "tokens": self.count_entities(conn, "tokens"),
            "totalAccessGrants": int(total_grants or 0),
            "accessStats": self.get_access_stats(conn, since),
            "topScanners": self.get_top_scanners(conn, since),
        }

    # ---------- logs ----------

    def get_logs(
        self,
        conn: Connection,
        scanner_id: Optional[str] = None,
        token_id: Optional[str] = None,
        granted: Optional[bool] = None,
        since: Optional[datetime] = None,
        limit: int = 100,
    ) -> List[Dict[str, Any]]:
        where = []
        params: Dict[str, Any] = {"limit": self.clamp_limit(limit)}
        if scanner_id is not None:
            where.append("l.scanner_id = :scanner_id")
            params["scanner_id"] = scanner_id
        if token_id is not None:
            where.append("l.token_id = :token_id")
            params["token_id"] = token_id
        if granted is not None:
            where.append("l.access_granted = :granted")
            params["granted"] = granted
        if since is not None:
            where.append("l.timestamp >= :since")
            params["since"] = as_utc(since)

        where_clause = "WHERE " + " AND ".join(where) if where else ""
        statement = text(
            f"""
            SELECT
                l.id             AS id,
                l.timestamp      AS timestamp,
                l.access_granted AS access_granted,
                l.rfid_uid       AS rfid_uid,
                l.denial_reason  AS denial_reason,
                l.token_id       AS token_id,
                l.scanner_id     AS scanner_id,
                t.name           AS token_name,
                u.id             AS user_id,
                u.full_name      AS user_full_name,
                u.email          AS user_email,
                s.name           AS scanner_name
            FROM access_logs l
            LEFT JOIN tokens   t ON l.token_id = t.id
            LEFT JOIN users    u ON t.user_id = u.id
            LEFT JOIN scanners s ON l.scanner_id = s.id
            {where_clause}
            ORDER BY l.timestamp DESC
            LIMIT :limit
            """
        )
        if since is not None:
            statement = timestamp_params(statement, "since")

        rows = conn.execute(
            statement.columns(timestamp=DateTime(timezone=True)),
            params,
        ).mappings().all()

        logs: List[Dict[str, Any]] = []
        for row in rows:
            logs.append(
                {
                    "id": row["id"],
                    "timestamp": as_utc(row["timestamp"]),
                    "accessGranted": bool(row["access_granted"]),
                    "rfidUid": row["rfid_uid"],
                    "denialReason": row["denial_reason"],
                    "tokenId": row["token_id"],
                    "tokenName": row["token_name"],
                    "userId": row["user_id"],
                    "userName": self.display_name(row["user_full_name"], row["user_email"]),
                    "scannerId": row["scanner_id"],
                    "scannerName": row["scanner_name"],
                }
            )

        return logs
