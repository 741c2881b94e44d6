import uvicorn
from fastapi import FastAPI

from classduel.api.routes.duels import router as duels_router
from classduel.api.routes.health import router as health_router
from classduel.api.routes.internal_duels import router as internal_duels_router
from classduel.core.config import get_settings
from classduel.core.logging import configure_logging


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Classroom Duels API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.include_router(health_router)
    app.include_router(duels_router)
    app.include_router(internal_duels_router)
    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "classduel.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.app_env == "dev",
    )


if __name__ == "__main__":
    run()
