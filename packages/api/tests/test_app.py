# This project was developed with assistance from AI tools.
"""Application wiring: health, error bodies and startup."""

import logging
from unittest.mock import AsyncMock, MagicMock

from fastapi.testclient import TestClient

from snang_api.core.config import Settings
from snang_api.main import create_app
from snang_api.services.consent import get_consent_service
from snang_api.services.document import get_document_store


def _fake_store() -> MagicMock:
    store = MagicMock()
    store.list_documents = AsyncMock(return_value=[])
    store.fetch_summary = AsyncMock(return_value=None)
    return store


def test_health(make_client):
    response = make_client().get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_error_body_echoes_request_id(make_client):
    client = make_client({get_document_store: _fake_store()})

    response = client.get("/api/documents", headers={"X-Request-ID": "req-123"})

    assert response.status_code == 400
    assert response.json() == {
        "error": "buyer_hash or case_id is required",
        "code": None,
        "request_id": "req-123",
    }


def test_error_body_generates_request_id(make_client):
    client = make_client({get_document_store: _fake_store()})

    response = client.get("/api/documents")

    assert response.status_code == 400
    assert response.json()["request_id"]


def test_overridden_dependency_is_the_installed_object(make_client):
    store = _fake_store()
    client = make_client({get_document_store: store})

    response = client.get("/api/documents", params={"buyer_hash": "h1"})

    assert response.status_code == 200
    store.list_documents.assert_awaited_once_with(buyer_hash="h1", case_id=None)


def test_unknown_route_uses_error_body(make_client):
    response = make_client().get("/nope")

    assert response.status_code == 404
    assert response.json()["error"] == "Not Found"


def test_malformed_body_is_422(make_client):
    client = make_client({get_consent_service: MagicMock()})

    response = client.post("/api/consent/grant", json={"buyer_hash": 123})

    assert response.status_code == 422
    assert "error" in response.json()


def test_missing_database_is_generic_500(make_client):
    # No dependency override and no lifespan: there is no DatabaseService.
    params = {"buyer_hash": "h", "type": "PDPA_BASIC"}
    response = make_client().get("/api/consent/check", params=params)

    assert response.status_code == 500
    assert response.json()["error"] == "Internal server error"


def test_lifespan_creates_and_disposes_database(settings, caplog):
    caplog.set_level(logging.INFO)
    app = create_app(settings)

    with TestClient(app):
        assert app.state.db_service is not None
        assert app.state.settings is settings

    assert "PDPA consent gate: ENABLED" in caplog.text
    assert "Database engine disposed" in caplog.text


def test_gate_disabled_is_logged_as_warning(caplog):
    settings = Settings(_env_file=None, PDPA_GATE_ENABLED=False, DEMO_MODE=True)

    with TestClient(create_app(settings)):
        pass

    warnings = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
    assert "PDPA consent gate: DISABLED (demo bypass active)" in warnings
    assert any("DEMO BUILD" in message for message in warnings)
