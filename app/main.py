# =======================================================================================
# app/main.py - FastAPI Application Entry Point
# =======================================================================================
import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from . import __version__
from .api.dependencies import get_db_manager
from .api.routes.access import router as access_router
from .api.routes.dashboard import router as dashboard_router
from .api.routes.grants import router as grants_router
from .api.routes.scanners import router as scanners_router
from .api.routes.tokens import router as tokens_router
from .api.routes.users import router as users_router
from .config import config
from .database import DatabaseManager, db_manager
from .models.schemas import HealthResponse

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    level = logging.DEBUG if config.API_DEBUG else config.LOG_LEVEL
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    if config.DB_CREATE_SCHEMA:
        db_manager.create_schema()
    logger.info("RFID Access Manager API started")
    yield
    db_manager.dispose()


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(
        title="RFID Access Manager API",
        version=__version__,
        description="RFID access control: scanner access checks and administration of users, scanners, tokens and grants",
        debug=config.API_DEBUG,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routers
    app.include_router(access_router, prefix="/api/v1", tags=["access"])
    app.include_router(users_router, prefix="/api/v1", tags=["users"])
    app.include_router(scanners_router, prefix="/api/v1", tags=["scanners"])
    app.include_router(tokens_router, prefix="/api/v1", tags=["tokens"])
    app.include_router(grants_router, prefix="/api/v1", tags=["grants"])
    app.include_router(dashboard_router, prefix="/api/v1", tags=["dashboard"])

    @app.get("/api/health", response_model=HealthResponse, tags=["health"])
    def api_health(manager: DatabaseManager = Depends(get_db_manager)):
        try:
            manager.ping()
            return HealthResponse(status="ok", dataAvailable=True, message=None)
        except SQLAlchemyError as e:
            logger.warning("Health check failed: %s", e)
            return HealthResponse(
                status="error", dataAvailable=False, message=str(e)
            )

    return app


app = create_app()
