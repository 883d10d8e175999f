"""
Tests for environment-driven configuration.
"""

import pytest
from pydantic import ValidationError

from laptop_tracker.core.config import AppConfig, IntuneConfig, KandjiConfig, TeamsConfig


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Run each test away from any local .env file."""
    monkeypatch.chdir(tmp_path)
    for name in (
        "KANDJI_API_URL",
        "KANDJI_REGION",
        "INTUNE_TENANT_ID",
        "TENANT_ID",
        "INTUNE_CLIENT_ID",
        "CLIENT_ID",
    ):
        monkeypatch.delenv(name, raising=False)


class TestKandjiConfig:
    """Test Kandji endpoint resolution."""

    def test_eu_region(self):
        config = KandjiConfig(subdomain="acme", region="eu")
        assert config.devices_url == "https://acme.api.eu.kandji.io/api/v1/devices"

    def test_us_region(self):
        config = KandjiConfig(subdomain="acme", region="US")
        assert config.devices_url == "https://acme.api.kandji.io/api/v1/devices"

    def test_explicit_url_wins(self):
        config = KandjiConfig(subdomain="acme", api_url="https://proxy.local/devices")
        assert config.devices_url == "https://proxy.local/devices"

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("KANDJI_SUBDOMAIN", "globex")
        monkeypatch.setenv("KANDJI_API_TOKEN", "tok")

        config = KandjiConfig()

        assert config.subdomain == "globex"
        assert config.api_token == "tok"


class TestIntuneConfig:
    """Test Intune settings."""

    def test_disabled_by_default(self, monkeypatch):
        monkeypatch.delenv("INTUNE_INTEGRATION_ENABLED", raising=False)
        assert IntuneConfig().integration_enabled is False

    def test_unprefixed_credentials(self, monkeypatch):
        monkeypatch.setenv("TENANT_ID", "tenant-1")
        monkeypatch.setenv("CLIENT_ID", "client-1")

        config = IntuneConfig()

        assert config.tenant_id == "tenant-1"
        assert config.client_id == "client-1"

    def test_prefixed_credentials_take_precedence(self, monkeypatch):
        monkeypatch.setenv("TENANT_ID", "plain")
        monkeypatch.setenv("INTUNE_TENANT_ID", "prefixed")
        assert IntuneConfig().tenant_id == "prefixed"


class TestAppConfig:
    """Test application settings."""

    def test_log_level_normalized(self):
        assert AppConfig(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            AppConfig(log_level="chatty")

    def test_refresh_interval_lower_bound(self):
        with pytest.raises(ValidationError):
            AppConfig(refresh_interval_seconds=1)

    def test_teams_requires_webhook(self):
        assert TeamsConfig(notifications_enabled=True, webhook_url="").active is False
        assert TeamsConfig(notifications_enabled=True, webhook_url="https://hook").active is True
