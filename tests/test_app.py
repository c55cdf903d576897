import json
import logging
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from servivent.config.settings import Settings
from servivent.core.exceptions import ConfigurationError, TransactionFailureError
from servivent.core.logging import JsonFormatter
from servivent.main import create_app
from servivent.modules.sales import SalesService
from servivent.shared.database.models import BranchPrice
from servivent.shared.database import transaction
from servivent.shared.database.transaction import atomic
from servivent.shared.database.upsert import insert_for


ENDPOINTS = [
    "/api/v1/create-purchase",
    "/api/v1/create-sale",
    "/api/v1/registrar-pago-compra",
    "/api/v1/eliminar-pago-compra",
    "/api/v1/receive-purchase-stock",
    "/api/v1/update-branch-prices",
]


# ==================== CONFIGURACIÓN ====================

@pytest.mark.parametrize("path", ENDPOINTS)
def test_missing_database_is_a_server_configuration_error(path):
    client = TestClient(create_app(Settings(database_url=None, log_level="WARNING")))

    response = client.post(path, json={})

    assert response.status_code == 500
    assert response.json()["msg"].startswith("Server Configuration Error")


def test_settings_read_connection_string_from_environment(monkeypatch):
    monkeypatch.setenv("DB_CONNECTION_STRING", "postgresql://servivent@localhost/servivent")

    assert Settings().database_url == "postgresql://servivent@localhost/servivent"


def test_health(client):
    response = client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


# ==================== CORS ====================

@pytest.mark.parametrize("path", ENDPOINTS)
def test_preflight_returns_cors_headers(client, path):
    response = client.options(path, headers={
        "Origin": "http://localhost:5173",
        "Access-Control-Request-Method": "POST",
        "Access-Control-Request-Headers": "authorization, x-client-info, apikey, content-type",
    })

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"
    allowed = response.headers["access-control-allow-headers"].lower()
    for header in ("authorization", "x-client-info", "apikey", "content-type"):
        assert header in allowed


def test_error_responses_carry_cors_headers(client):
    response = client.post("/api/v1/receive-purchase-stock", json={},
                           headers={"Origin": "http://localhost:5173"})

    assert response.status_code == 400
    assert response.headers["access-control-allow-origin"] == "*"


# ==================== TRANSACCIONES ====================

def test_atomic_commits_on_success():
    session = MagicMock()

    with atomic(session, "prueba"):
        pass

    session.commit.assert_called_once()
    session.rollback.assert_not_called()


def test_atomic_wraps_database_errors():
    session = MagicMock()

    with pytest.raises(TransactionFailureError) as excinfo:
        with atomic(session, "prueba"):
            raise OperationalError("INSERT ...", {}, Exception("could not serialize access"))

    assert excinfo.value.msg == "Error de base de datos: could not serialize access"
    assert excinfo.value.status_code == 500
    session.rollback.assert_called_once()
    session.commit.assert_not_called()


def test_failed_rollback_is_logged_and_original_error_kept():
    session = MagicMock()
    session.rollback.side_effect = SQLAlchemyError("connection lost")

    with patch.object(transaction.logger, "error") as log_error:
        with pytest.raises(ValueError, match="original"):
            with atomic(session, "prueba"):
                raise ValueError("original")

    logged = " ".join(call.args[0] for call in log_error.call_args_list)
    assert "Fallo al revertir" in logged
    assert "connection lost" in logged


def test_commit_failure_rolls_back():
    session = MagicMock()
    session.commit.side_effect = OperationalError("COMMIT", {}, Exception("server closed the connection"))

    with pytest.raises(TransactionFailureError, match="server closed the connection"):
        with atomic(session, "prueba"):
            pass

    session.rollback.assert_called_once()


def test_unsupported_dialect_is_a_configuration_error():
    session = MagicMock()
    session.get_bind.return_value.dialect.name = "mssql"

    with pytest.raises(ConfigurationError, match="mssql"):
        insert_for(session, BranchPrice)


# ==================== ERRORES INESPERADOS ====================

def test_unexpected_error_returns_msg(app, catalog):
    client = TestClient(app, raise_server_exceptions=False)

    with patch.object(SalesService, "create_sale", side_effect=RuntimeError("fallo inesperado")):
        response = client.post("/api/v1/create-sale", json={
            "id_sucursal": catalog.branch_id,
            "id_usuario": catalog.user_id,
            "monto_total": 10.0,
            "metodo_pago": "Efectivo",
            "items": [{"id_producto": catalog.runner_id, "cantidad": 1, "precio_unitario": 10.0}],
        })

    assert response.status_code == 500
    assert response.json() == {"msg": "fallo inesperado"}


# ==================== LOGGING ====================

def test_json_log_lines_carry_request_fields():
    record = logging.makeLogRecord({
        "name": "servivent.core.middleware",
        "levelname": "INFO",
        "msg": "POST /api/v1/create-sale - Status: 200",
        "method": "POST",
        "path": "/api/v1/create-sale",
        "status_code": 200,
        "duration_ms": 12.5,
    })

    line = json.loads(JsonFormatter(service="ServiVENT API").format(record))

    assert line["service"] == "ServiVENT API"
    assert line["message"] == "POST /api/v1/create-sale - Status: 200"
    assert line["request"] == {
        "method": "POST",
        "path": "/api/v1/create-sale",
        "status_code": 200,
        "duration_ms": 12.5,
    }


def test_json_log_lines_without_request_fields():
    record = logging.makeLogRecord({"name": "servivent.main", "levelname": "INFO", "msg": "Compra creada"})

    line = json.loads(JsonFormatter(service="ServiVENT API").format(record))

    assert "request" not in line
    assert line["logger"] == "servivent.main"
