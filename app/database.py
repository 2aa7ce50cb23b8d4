# =======================================================================================
# app/database.py - Database Management
# =======================================================================================
import logging
from contextlib import contextmanager
from typing import Optional

from sqlalchemy import DateTime, bindparam, create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.sql.elements import TextClause
from sqlalchemy.pool import QueuePool, StaticPool

from .config import config
from .models.tables import metadata

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Manages database connections and transactions."""

    def __init__(self, url: Optional[str] = None):
        self.url = url or config.DB_URL
        self.engine: Engine = self._build_engine(self.url)

    @staticmethod
    def _build_engine(url: str) -> Engine:
        if url.startswith("sqlite"):
            # single shared connection so an in-memory database survives across requests
            return create_engine(
                url,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
                future=True,
            )
        return create_engine(
            url,
            poolclass=QueuePool,
            pool_size=config.DB_POOL_SIZE,
            max_overflow=config.DB_MAX_OVERFLOW,
            pool_pre_ping=True,
            isolation_level="READ COMMITTED",
            future=True,
        )

    @contextmanager
    def get_connection(self):
        """Get a connection inside a transaction; commits on success, rolls back on error."""
        with self.engine.begin() as conn:
            yield conn

    def create_schema(self) -> None:
        """Create all tables that do not exist yet."""
        metadata.create_all(self.engine)
        logger.info("Database schema ensured on %s", self.engine.url.render_as_string(hide_password=True))

    def ping(self) -> None:
        with self.get_connection() as conn:
            conn.execute(text("SELECT 1"))

    def dispose(self) -> None:
        self.engine.dispose()


def timestamp_params(statement: TextClause, *names: str) -> TextClause:
    """Bind the named parameters as DATETIME so every driver stores them the same way."""
    return statement.bindparams(*[bindparam(name, type_=DateTime(timezone=True)) for name in names])


# Global database instance
db_manager = DatabaseManager()
