from fastapi import FastAPI
from loguru import logger

from .api.v1 import builds, health, packages
from .core.config import get_settings
from .core.database import init_db
from .core.logging import configure_logging


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings)
    app = FastAPI(title=settings.APP_NAME, version="1.0.0")

    # Initialize database on startup
    @app.on_event("startup")
    def startup_event():
        init_db()
        logger.info("Database ready at {}", settings.DB_URL)

    app.include_router(health.router, prefix="/v1/health", tags=["system"])
    app.include_router(packages.router, prefix="/v1/packages", tags=["packages"])
    app.include_router(builds.router, prefix="/v1/builds", tags=["builds"])
    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
