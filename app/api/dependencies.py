# =======================================================================================
# app/api/dependencies.py - FastAPI Dependencies
# =======================================================================================
import logging

from fastapi import Depends, HTTPException
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from ..database import DatabaseManager, db_manager
from ..repositories.sql import SqlUnitOfWork
from ..services.access_control import AccessDecisionService

logger = logging.getLogger(__name__)


def get_db_manager() -> DatabaseManager:
    """Dependency to get the database manager; overridden in tests."""
    return db_manager


def get_db_connection(manager: DatabaseManager = Depends(get_db_manager)) -> Connection:
    """
    Dependency to get a database connection inside one transaction.

    Routes declare it with ``scope="function"`` so the commit runs before the
    response is sent and a failed commit is answered with a 500.
    """
    try:
        with manager.get_connection() as conn:
            yield conn
    except SQLAlchemyError as e:
        logger.error("Database error: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Database error")


def get_access_service(manager: DatabaseManager = Depends(get_db_manager)) -> AccessDecisionService:
    """Dependency to get an access decision service bound to the database."""
    return AccessDecisionService(SqlUnitOfWork(manager))
