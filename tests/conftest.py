"""
Pytest fixtures for ServiVENT tests.

Provides an in-memory SQLite database shared by the test session and the
application, a seeded catalog and a test client.
"""

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from servivent.config.database import Base, Database
from servivent.config.settings import Settings
from servivent.main import create_app
from servivent.shared.database.models import (
    Branch, User, Provider, Product
)


@pytest.fixture(scope='function')
def database():
    """Fresh in-memory database for each test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    database = Database(engine)
    database.create_all()

    yield database

    Base.metadata.drop_all(bind=engine)
    database.dispose()


@pytest.fixture(scope='function')
def settings():
    return Settings(database_url=None, log_level="WARNING")


@pytest.fixture(scope='function')
def app(settings, database):
    return create_app(settings, database=database)


@pytest.fixture(scope='function')
def client(app):
    return TestClient(app)


@pytest.fixture(scope='function')
def db_session(database):
    session = database.session()
    yield session
    session.close()


@pytest.fixture(scope='function')
def catalog(db_session):
    """Two branches, two products, a user and a provider."""
    central = Branch(id=1, nombre="Sucursal Central")
    norte = Branch(id=2, nombre="Sucursal Norte")
    user = User(id="11111111-1111-1111-1111-111111111111", nombre="Ana Pérez",
                email="ana@servivent.test", rol="Administrador", id_sucursal=1)
    provider = Provider(id="22222222-2222-2222-2222-222222222222", nombre="Distribuidora Andina")
    runner = Product(id=7, sku="ZAP-001", nombre="Zapatilla Runner", precio_base=120)
    mochila = Product(id=8, sku="MOC-002", nombre="Mochila Urbana", precio_base=80)

    db_session.add_all([central, norte, user, provider, runner, mochila])
    db_session.commit()

    return SimpleNamespace(
        branch_id=1,
        other_branch_id=2,
        user_id=user.id,
        provider_id=provider.id,
        runner_id=7,
        backpack_id=8,
    )
