"""Unit tests for the sitedrop.runtime module."""

from __future__ import annotations

from http import HTTPStatus

import falcon.asgi
import falcon.testing
import pytest

from sitedrop.runtime import create_app, parse_port


@pytest.fixture
def unconfigured(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear the bucket variable so the runtime starts probe-only."""
    monkeypatch.delenv("SITEDROP_SITE_BUCKET", raising=False)


@pytest.fixture
def configured(monkeypatch: pytest.MonkeyPatch) -> None:
    """Provide the environment needed to build deployment services."""
    monkeypatch.setenv("SITEDROP_SITE_BUCKET", "sites")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")


class TestCreateApp:
    """Tests for the create_app factory function."""

    @pytest.mark.usefixtures("unconfigured")
    def test_probe_only_without_bucket(self) -> None:
        """Without a bucket the app serves probes but no webhook."""
        client = falcon.testing.TestClient(create_app())

        assert client.simulate_get("/health").status_code == HTTPStatus.OK
        assert (
            client.simulate_get("/ready").status_code
            == HTTPStatus.SERVICE_UNAVAILABLE
        )
        assert (
            client.simulate_post("/webhooks/push", body="{}").status_code
            == HTTPStatus.NOT_FOUND
        )

    @pytest.mark.usefixtures("configured")
    def test_webhooks_enabled_with_bucket(self) -> None:
        """With a bucket configured the webhook route is registered."""
        app = create_app()
        client = falcon.testing.TestClient(app)

        assert isinstance(app, falcon.asgi.App)
        assert client.simulate_get("/ready").json == {"status": "ready"}
        result = client.simulate_post("/webhooks/push", body="not json")
        assert result.status_code == HTTPStatus.BAD_REQUEST

    @pytest.mark.usefixtures("configured")
    def test_invalid_config_fails_fast(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """A bad timeout value stops start-up."""
        from sitedrop.errors import ConfigError

        monkeypatch.setenv("SITEDROP_HTTP_TIMEOUT_S", "never")

        with pytest.raises(ConfigError, match="SITEDROP_HTTP_TIMEOUT_S"):
            create_app()


class TestParsePort:
    """Tests for SITEDROP_PORT validation."""

    @pytest.mark.parametrize("value", ["1", "8080", "65535"])
    def test_valid(self, value: str) -> None:
        """Ports inside the range are accepted."""
        assert parse_port(value) == int(value)

    @pytest.mark.parametrize("value", ["0", "65536", "-1", "http", ""])
    def test_invalid_exits(self, value: str) -> None:
        """Anything else exits with status 1."""
        with pytest.raises(SystemExit) as excinfo:
            parse_port(value)

        assert excinfo.value.code == 1
