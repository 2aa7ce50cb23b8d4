# =======================================================================================
# app/api/routes/dashboard.py - Dashboard and Access Log Endpoints
# =======================================================================================
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.engine import Connection

from ...models.schemas import DashboardSummary, LogsResponse
from ...services.dashboard_service import DashboardService
from ..dependencies import get_db_connection

router = APIRouter()
dashboard_service = DashboardService()


@router.get("/dashboard/summary", response_model=DashboardSummary)
def get_summary(
    since: Optional[datetime] = Query(None, description="Only count access attempts after this instant"),
    conn: Connection = Depends(get_db_connection, scope="function"),
):
    return DashboardSummary(**dashboard_service.get_summary(conn, since=since))


@router.get("/logs", response_model=LogsResponse)
def get_logs(
    scanner_id: Optional[str] = Query(None),
    token_id: Optional[str] = Query(None),
    granted: Optional[bool] = Query(None),
    since: Optional[datetime] = Query(None),
    limit: int = Query(100, ge=1),
    conn: Connection = Depends(get_db_connection, scope="function"),
):
    logs = dashboard_service.get_logs(
        conn, scanner_id=scanner_id, token_id=token_id, granted=granted, since=since, limit=limit,
    )
    return LogsResponse(logs=logs)
