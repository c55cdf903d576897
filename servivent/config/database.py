from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from servivent.core.exceptions import ConfigurationError

# Base class for models
Base = declarative_base()


class Database:
    """
    Pool de conexiones de la aplicación.

    Se crea una vez por proceso (ver ``create_app``) y se inyecta en cada
    request mediante ``get_db``; cada request obtiene su propia sesión y la
    libera al terminar, incluso si hubo error.
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    @classmethod
    def from_url(cls, database_url: str, pool_size: int = 3, echo: bool = False) -> "Database":
        engine = create_engine(
            database_url,
            pool_size=pool_size,
            pool_pre_ping=True,
            pool_recycle=300,
            echo=echo
        )
        return cls(engine)

    def session(self) -> Session:
        return self.SessionLocal()

    def create_all(self):
        Base.metadata.create_all(bind=self.engine)

    def dispose(self):
        self.engine.dispose()


# Database dependency
def get_db(request: Request) -> Iterator[Session]:
    """Database dependency for FastAPI"""
    database: Optional[Database] = getattr(request.app.state, "database", None)
    if database is None:
        raise ConfigurationError(
            "Server Configuration Error: Database connection is not available. "
            "Please ensure the DB_CONNECTION_STRING secret is set correctly."
        )

    db = database.session()
    try:
        yield db
    finally:
        db.close()
