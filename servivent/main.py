import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from servivent.config.database import Database
from servivent.config.settings import Settings, get_settings
from servivent.core.exceptions import register_exception_handlers
from servivent.core.logging import setup_logging
from servivent.core.middleware import setup_middleware
from servivent.api.v1.router import api_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    settings: Settings = app.state.settings
    logger.info(f"ServiVENT API starting - version {settings.version}")
    logger.info(f"Environment: {'Development' if settings.debug else 'Production'}")
    if app.state.database is None:
        logger.error("Configuration Error: DB_CONNECTION_STRING environment variable not set.")

    yield

    # Shutdown
    if app.state.database is not None:
        app.state.database.dispose()
    logger.info("ServiVENT API shutting down")


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """
    Construir la aplicación.

    El pool de conexiones se crea aquí, una sola vez por proceso, a partir de
    ``settings.database_url`` salvo que se inyecte uno ya construido. Sin base
    de datos configurada la app arranca igual y cada endpoint responde 500.
    """
    settings = settings or get_settings()
    setup_logging(settings)

    if database is None and settings.database_url:
        database = Database.from_url(
            settings.database_url,
            pool_size=settings.db_pool_size,
            echo=settings.debug
        )

    app = FastAPI(
        title=settings.app_name,
        version=settings.version,
        description="Sistema de punto de venta e inventario multi-sucursal",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.database = database

    setup_middleware(app, settings)
    register_exception_handlers(app)

    app.include_router(api_router)

    @app.get("/")
    async def root():
        return {
            "message": "ServiVENT API - Sistema de Punto de Venta e Inventario",
            "version": settings.version,
            "status": "running",
            "api": "/api/v1"
        }

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "servivent.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
