import sys

import pytest
from fastapi.testclient import TestClient

from demandscan.api import create_app
from demandscan.core.config.models import AppConfig
from demandscan.core.errors import ConfigError

from conftest import LONG_PAGE, add_admin, add_keywords, add_source


@pytest.fixture
def client(session_factory, backend, rate_limiter, email_sender):
    app = create_app(
        AppConfig(),
        session_factory=session_factory,
        backend=backend,
        rate_limiter=rate_limiter,
        email_sender=email_sender,
    )
    return TestClient(app)


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_fetch_sources_without_sources(client):
    response = client.post("/functions/fetch-sources")

    assert response.status_code == 200
    assert response.json() == {"message": "No active sources to fetch", "fetched": 0}


def test_fetch_sources_reports_per_source_results(client, session, site):
    source = add_source(session, "Board", "https://board.example/wanted")
    site.add("https://board.example/wanted", LONG_PAGE)

    body = client.post("/functions/fetch-sources").json()

    assert body["successful"] == 1
    assert body["results"][0]["sourceId"] == source.id


def test_detect_leads_end_to_end(client, session, site):
    add_keywords(session, product=["solar panel"], intent=["looking for"])
    add_admin(session, "admin-1")
    add_source(session, "Board", "https://board.example/wanted")
    site.add("https://board.example/wanted", LONG_PAGE)
    client.post("/functions/fetch-sources")

    body = client.get("/functions/detect-leads").json()

    assert body == {
        "message": "Lead detection complete",
        "leadsFound": 1,
        "leadsInserted": 1,
        "whatsappLinks": [],
    }


def test_detect_leads_without_keywords(client):
    body = client.post("/functions/detect-leads").json()
    assert body == {"message": "No keywords configured", "leadsFound": 0}


def test_cors_preflight(client):
    response = client.options(
        "/functions/detect-leads",
        headers={
            "Origin": "https://dashboard.example",
            "Access-Control-Request-Method": "POST",
        },
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"


def test_configuration_error_is_500(monkeypatch):
    def broken_config(*args, **kwargs):
        raise ConfigError("Database URL is not configured")

    monkeypatch.setattr(
        sys.modules["demandscan.api.app"], "load_app_config", broken_config
    )
    client = TestClient(create_app())

    response = client.post("/functions/fetch-sources")

    assert response.status_code == 500
    assert response.json() == {"error": "Server configuration error"}


def test_storage_error_is_500():
    class BrokenSession:
        def execute(self, *args, **kwargs):
            from sqlalchemy.exc import OperationalError

            raise OperationalError("SELECT", {}, Exception("database is locked"))

        def rollback(self):
            pass

        def commit(self):
            pass

        def close(self):
            pass

    client = TestClient(create_app(AppConfig(), session_factory=BrokenSession))

    response = client.post("/functions/detect-leads")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch keywords"}
