from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from servivent.config.settings import Settings
import time
import logging

logger = logging.getLogger(__name__)

def setup_middleware(app: FastAPI, settings: Settings):
    """Configure all middleware for the application"""

    # CORS - los clientes llaman desde el navegador con la clave pública del proveedor de identidad
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=[
            "authorization",
            "x-client-info",
            "apikey",
            "content-type"
        ],
        max_age=3600  # Cache preflight requests for 1 hour
    )

    @app.middleware("http")
    async def log_requests(request, call_next):
        start_time = time.time()

        response = await call_next(request)

        process_time = time.time() - start_time
        logger.info(
            f"{request.method} {request.url.path} - "
            f"Status: {response.status_code} - "
            f"Time: {process_time:.4f}s",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round(process_time * 1000, 2),
                "client": request.client.host if request.client else None,
            }
        )

        return response
