from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from servivent.core.exceptions import ConfigurationError

# Dialectos con soporte para INSERT ... ON CONFLICT
_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def insert_for(db: Session, model):
    """INSERT del dialecto de la sesión, con ``on_conflict_do_update`` disponible"""
    dialect = db.get_bind().dialect.name
    try:
        return _INSERT_BY_DIALECT[dialect](model)
    except KeyError:
        raise ConfigurationError(f"Upsert no soportado para el dialecto '{dialect}'") from None
