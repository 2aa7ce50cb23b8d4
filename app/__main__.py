# =======================================================================================
# app/__main__.py - Development Server (python -m app)
# =======================================================================================
import uvicorn

from .config import config


def main() -> None:
    uvicorn.run(
        "app.main:app",
        host=config.API_HOST,
        port=config.API_PORT,
        reload=config.API_DEBUG,
    )


if __name__ == "__main__":
    main()
