import logging
from typing import Any, Dict, Sequence

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ServiVentError(Exception):
    """Error de negocio o infraestructura que se devuelve al cliente como ``{msg}``"""
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, msg: str):
        super().__init__(msg)
        self.msg = msg


class InvalidInputError(ServiVentError):
    """Datos de entrada faltantes o con tipo incorrecto"""


class NotFoundError(ServiVentError):
    """La compra, pago o producto referenciado no existe"""


class InvalidStateError(ServiVentError):
    """Operación sobre una entidad en un estado de ciclo de vida incorrecto"""


class InsufficientStockError(ServiVentError):
    """El decremento condicional de inventario no afectó ninguna fila"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, product_name: str, available: int, requested: int):
        super().__init__(
            f'Stock insuficiente para "{product_name}". '
            f"Disponible: {available}, Solicitado: {requested}."
        )
        self.product_name = product_name
        self.available = available
        self.requested = requested


class TransactionFailureError(ServiVentError):
    """Error de base de datos durante una escritura de varios pasos"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class ConfigurationError(ServiVentError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def format_validation_errors(errors: Sequence[Dict[str, Any]]) -> str:
    """Convertir errores de pydantic en un mensaje legible"""
    details = []
    for error in errors:
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = error.get("msg", "valor inválido")
        details.append(f"{location}: {message}" if location else message)
    return "Datos inválidos: " + "; ".join(details)


def register_exception_handlers(app: FastAPI):
    """Mapear los errores tipados a respuestas JSON ``{msg}``"""

    @app.exception_handler(ServiVentError)
    async def servivent_error_handler(request: Request, exc: ServiVentError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} - {type(exc).__name__}: {exc.msg}")
        else:
            logger.warning(f"{request.method} {request.url.path} - {type(exc).__name__}: {exc.msg}")
        return JSONResponse(status_code=exc.status_code, content={"msg": exc.msg})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        msg = format_validation_errors(exc.errors())
        logger.warning(f"{request.method} {request.url.path} - InvalidInputError: {msg}")
        return JSONResponse(status_code=InvalidInputError.status_code, content={"msg": msg})

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.error(f"{request.method} {request.url.path} - Error inesperado: {exc}", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"msg": str(exc) or type(exc).__name__}
        )
