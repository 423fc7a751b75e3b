"""Tests for application settings."""
import pytest
from pydantic import ValidationError

from maasflow.config.settings import HostFilterSettings, MaasSettings, Settings
from maasflow.core.options import EmptyFilterPolicy


class TestMaasSettings:
    """Test MAAS connection settings."""

    def test_defaults(self):
        """MAAS settings have sensible defaults."""
        maas = MaasSettings()
        assert maas.url == "http://localhost/MAAS"
        assert maas.api_key is None
        assert maas.api_version == "1.0"


class TestSettings:
    """Test main settings."""

    def test_defaults(self):
        """Defaults drive nodes to Deployed and select no zone."""
        settings = Settings()
        assert settings.target_state == "Deployed"
        assert settings.preview is False
        assert settings.period == 0.0
        assert settings.hosts.empty_policy == EmptyFilterPolicy.INCLUDE_ALL
        assert settings.zones.empty_policy == EmptyFilterPolicy.INCLUDE_NONE

    def test_env_overrides(self, monkeypatch):
        """Nested settings are read from prefixed environment variables."""
        monkeypatch.setenv("MAASFLOW_PREVIEW", "true")
        monkeypatch.setenv("MAASFLOW_MAAS__URL", "http://maas.lab/MAAS")
        monkeypatch.setenv("MAASFLOW_ZONES__INCLUDE", '["^lab$"]')
        monkeypatch.setenv("MAASFLOW_ZONES__EMPTY_POLICY", "include_all")

        settings = Settings()
        assert settings.preview is True
        assert settings.maas.url == "http://maas.lab/MAAS"
        assert settings.zones.include == ["^lab$"]
        assert settings.zones.empty_policy == EmptyFilterPolicy.INCLUDE_ALL

    def test_partial_zone_override_keeps_zone_default(self, monkeypatch):
        """Overriding only zone includes leaves the zone empty policy alone."""
        monkeypatch.setenv("MAASFLOW_ZONES__INCLUDE", '["^lab$"]')

        settings = Settings()
        assert settings.zones.include == ["^lab$"]
        assert settings.zones.empty_policy == EmptyFilterPolicy.INCLUDE_NONE
        assert settings.hosts.empty_policy == EmptyFilterPolicy.INCLUDE_ALL

    def test_unprefixed_env_is_ignored(self, monkeypatch):
        """Nested sections never read bare environment variable names."""
        monkeypatch.setenv("INCLUDE", '["^x$"]')
        monkeypatch.setenv("EXCLUDE", '["^y$"]')
        monkeypatch.setenv("EMPTY_POLICY", "include_all")
        monkeypatch.setenv("URL", "http://other/MAAS")
        monkeypatch.setenv("API_KEY", "a:b:c")

        settings = Settings()
        assert settings.maas.url == "http://localhost/MAAS"
        assert settings.maas.api_key is None
        assert settings.hosts.include == []
        assert settings.hosts.exclude == []
        assert settings.zones.include == []
        assert settings.zones.empty_policy == EmptyFilterPolicy.INCLUDE_NONE

    def test_processing_options(self):
        """Settings build frozen processing options."""
        settings = Settings(
            verbose=True,
            action_timeout=10.0,
            hosts=HostFilterSettings(include=["^web-"], exclude=["-99$"]),
        )
        options = settings.processing_options()
        assert options.verbose is True
        assert options.action_timeout == 10.0
        assert options.hosts.include == ("^web-",)
        assert options.hosts.exclude == ("-99$",)
        assert options.zones.empty_policy == EmptyFilterPolicy.INCLUDE_NONE

        with pytest.raises(ValidationError):
            options.preview = True
