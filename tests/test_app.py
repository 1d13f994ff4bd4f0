"""Application Tests - health, metadata, trace ids, error envelope and configuration"""
import pytest

from api.config import Config, ConfigError

pytestmark = pytest.mark.e2e


def test_healthz(client):
    response = client.get("/healthz")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["uptime"] >= 0
    assert "timestamp" in data


def test_root(client):
    data = client.get("/").json()
    assert data["name"] == "Guitar Repair API"
    assert data["health"] == "/healthz"


def test_trace_id_echoed(client):
    response = client.get("/healthz", headers={"X-Trace-Id": "trace-123"})

    assert response.headers["X-Trace-Id"] == "trace-123"
    assert "X-Process-Time" in response.headers


def test_trace_id_generated(client):
    assert client.get("/healthz").headers["X-Trace-Id"]


def test_error_envelope(client):
    response = client.delete("/v1/repairs/nope", headers={"X-Trace-Id": "trace-err"})

    body = response.json()
    assert set(body) == {"code", "message", "hint", "traceId", "meta"}
    assert body["traceId"] == "trace-err"
    assert body["meta"]["path"] == "/v1/repairs/nope"


def test_unknown_route(client):
    response = client.get("/v1/nothing-here")

    assert response.status_code == 404
    assert response.json()["code"] == "HTTP_ERROR"


def test_untrusted_host_rejected(client):
    response = client.get("/healthz", headers={"Host": "evil.example.com"})
    assert response.status_code == 400


class TestConfig:

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for name in (
            "APP_ENV", "APP_LOG_LEVEL", "REPAIR_DB_PATH", "REPAIR_PDF_PATH",
            "RATE_LIMIT_DEFAULT", "RATE_LIMIT_ENABLED", "LIST_PAGE_SIZE_MAX",
        ):
            monkeypatch.delenv(name, raising=False)

    def test_defaults(self):
        config = Config()

        assert config.REPAIR_DB_PATH == "data/repair_history.json"
        assert config.REPAIR_PDF_PATH == "data/repair_catalog.pdf"
        assert config.RATE_LIMIT_DEFAULT == "120/minute"
        assert config.RATE_LIMIT_ENABLED is True
        assert config.LIST_PAGE_SIZE_MAX == 10000
        assert config.is_development()

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("APP_ENV", "production")
        monkeypatch.setenv("APP_LOG_LEVEL", "debug")
        monkeypatch.setenv("RATE_LIMIT_ENABLED", "no")
        monkeypatch.setenv("LIST_PAGE_SIZE_MAX", "500")

        config = Config()

        assert config.is_production()
        assert config.APP_LOG_LEVEL == "DEBUG"
        assert config.RATE_LIMIT_ENABLED is False
        assert config.LIST_PAGE_SIZE_MAX == 500

    @pytest.mark.parametrize("name, value", [
        ("APP_LOG_LEVEL", "LOUD"),
        ("LIST_PAGE_SIZE_MAX", "0"),
        ("LIST_PAGE_SIZE_MAX", "many"),
        ("RATE_LIMIT_DEFAULT", "lots"),
        ("REPAIR_DB_PATH", " "),
    ])
    def test_invalid_values(self, monkeypatch, name, value):
        monkeypatch.setenv(name, value)
        with pytest.raises(ConfigError):
            Config()
