import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from servivent.core.exceptions import TransactionFailureError

logger = logging.getLogger(__name__)


def describe_db_error(error: SQLAlchemyError) -> str:
    """Mensaje de la causa subyacente del driver, sin el SQL"""
    cause = getattr(error, "orig", None)
    return str(cause if cause is not None else error).strip()


@contextmanager
def atomic(db: Session, operation: str) -> Iterator[Session]:
    """
    Ejecutar un bloque como una única transacción.

    Confirma si el bloque termina sin error. Ante cualquier excepción revierte
    la transacción completa; si la reversión también falla se registra y se
    propaga el error original. Los errores de SQLAlchemy se convierten en
    ``TransactionFailureError`` con el mensaje de la causa.
    """
    try:
        yield db
        db.commit()
    except Exception as exc:
        logger.error(f"Error en la transacción de {operation}: {exc}")
        try:
            db.rollback()
        except SQLAlchemyError as rollback_error:
            logger.error(f"Fallo al revertir la transacción de {operation}: {rollback_error}")
        if isinstance(exc, SQLAlchemyError):
            raise TransactionFailureError(
                f"Error de base de datos: {describe_db_error(exc)}"
            ) from exc
        raise
