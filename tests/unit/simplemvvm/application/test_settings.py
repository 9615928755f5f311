"""Unit tests for HostSettings."""

import pytest
from pydantic import ValidationError

from simplemvvm.application.settings import HostSettings


class TestHostSettings:
    """Test cases for host configuration."""

    def test_defaults(self, monkeypatch):
        """Test the default options."""
        for name in ("AUTO_WIRE", "ALLOW_SCOPED_FROM_ROOT", "VALIDATE_ON_BUILD"):
            monkeypatch.delenv(f"SIMPLEMVVM_{name}", raising=False)

        settings = HostSettings()

        assert settings.auto_wire is False
        assert settings.allow_scoped_from_root is False
        assert settings.validate_on_build is False

    def test_explicit_values(self):
        """Test that options can be passed directly."""
        settings = HostSettings(auto_wire=True, validate_on_build=True)

        assert settings.auto_wire is True
        assert settings.validate_on_build is True

    def test_values_from_environment(self, monkeypatch):
        """Test that options are read from SIMPLEMVVM_* variables."""
        monkeypatch.setenv("SIMPLEMVVM_AUTO_WIRE", "true")
        monkeypatch.setenv("SIMPLEMVVM_ALLOW_SCOPED_FROM_ROOT", "1")

        settings = HostSettings()

        assert settings.auto_wire is True
        assert settings.allow_scoped_from_root is True

    def test_settings_are_frozen(self):
        """Test that settings cannot change after the host reads them."""
        settings = HostSettings()

        with pytest.raises(ValidationError):
            settings.auto_wire = True

    def test_invalid_value(self, monkeypatch):
        """Test that invalid environment values are rejected."""
        monkeypatch.setenv("SIMPLEMVVM_VALIDATE_ON_BUILD", "sometimes")

        with pytest.raises(ValidationError):
            HostSettings()
