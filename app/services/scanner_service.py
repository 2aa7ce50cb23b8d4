# =======================================================================================
# app/services/scanner_service.py - Scanner Management Service
# =======================================================================================
import logging
import uuid
from typing import List, Optional

from sqlalchemy import text
from sqlalchemy.engine import Connection

from ..database import timestamp_params
from ..models.schemas import Scanner, ScannerCreateRequest, ScannerUpdateRequest
from ..utils.exceptions import NotFoundError
from ..utils.validators import utc_now

logger = logging.getLogger(__name__)


class ScannerService:
    """Handles scanner (reader) management."""

    def create_scanner(self, conn: Connection, request: ScannerCreateRequest) -> Scanner:
        now = utc_now()
        scanner_id = str(uuid.uuid4())

        conn.execute(
            timestamp_params(
                text("""
                    INSERT INTO scanners
                        (id, name, location, description, reader_type, is_active, created_at, updated_at)
                    VALUES
                        (:id, :name, :location, :description, :reader_type, :is_active, :now, :now)
                """),
                "now",
            ),
            {
                "id": scanner_id,
                "name": request.name,
                "location": request.location,
                "description": request.description,
                "reader_type": request.reader_type,
                "is_active": request.is_active,
                "now": now,
            },
        )

        logger.info("Created scanner %s (%s @ %s)", scanner_id, request.name, request.location)
        return self.get_scanner(conn, scanner_id)

    def get_scanner(self, conn: Connection, scanner_id: str) -> Scanner:
        row = conn.execute(
            text("SELECT * FROM scanners WHERE id = :id"),
            {"id": scanner_id},
        ).mappings().first()

        if not row:
            raise NotFoundError("Scanner not found")
        return Scanner.model_validate(dict(row))

    def list_scanners(self, conn: Connection, is_active: Optional[bool] = None) -> List[Scanner]:
        if is_active is None:
            rows = conn.execute(text("SELECT * FROM scanners ORDER BY name")).mappings().all()
        else:
            rows = conn.execute(
                text("SELECT * FROM scanners WHERE is_active = :is_active ORDER BY name"),
                {"is_active": is_active},
            ).mappings().all()

        return [Scanner.model_validate(dict(row)) for row in rows]

    def update_scanner(self, conn: Connection, scanner_id: str, request: ScannerUpdateRequest) -> Scanner:
        changes = request.model_dump(exclude_unset=True)
        # description is the only nullable column
        changes = {k: v for k, v in changes.items() if v is not None or k == "description"}
        self.get_scanner(conn, scanner_id)

        if changes:
            assignments = ", ".join(f"{column} = :{column}" for column in changes)
            conn.execute(
                timestamp_params(
                    text(f"UPDATE scanners SET {assignments}, updated_at = :updated_at WHERE id = :id"),
                    "updated_at",
                ),
                {**changes, "updated_at": utc_now(), "id": scanner_id},
            )
            logger.info("Updated scanner %s: %s", scanner_id, sorted(changes))

        return self.get_scanner(conn, scanner_id)
