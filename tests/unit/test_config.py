"""
Unit tests for configuration loading.

Settings are built with _env_file=None so a developer's local .env never
leaks into the assertions; the environment is driven via monkeypatch.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from csr_inspector.config import AppSettings, LimitSettings, ServerSettings


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("SERVER__HOST", "SERVER__PORT", "LIMITS__MAX_PEM_CHARS", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


class TestDefaults:
    def test_defaults(self) -> None:
        """
        GIVEN no environment variables
        WHEN AppSettings is created
        THEN every field has its documented default.
        """
        settings = AppSettings(_env_file=None)
        assert settings.server == ServerSettings(host="0.0.0.0", port=8000)
        assert settings.limits.max_pem_chars == 65_536
        assert settings.log_level == "INFO"


class TestEnvironmentOverrides:
    def test_nested_delimiter(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SERVER__PORT", "9000")
        monkeypatch.setenv("LIMITS__MAX_PEM_CHARS", "4096")
        settings = AppSettings(_env_file=None)
        assert settings.server.port == 9000
        assert settings.limits.max_pem_chars == 4096

    def test_log_level_is_normalized(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", " debug ")
        assert AppSettings(_env_file=None).log_level == "DEBUG"


class TestValidation:
    def test_unknown_log_level(self) -> None:
        with pytest.raises(ValidationError, match="Unknown log level"):
            AppSettings(_env_file=None, log_level="LOUD")

    @pytest.mark.parametrize("port", [0, 70000])
    def test_port_out_of_range(self, port: int) -> None:
        with pytest.raises(ValidationError):
            ServerSettings(port=port)

    def test_pem_limit_floor(self) -> None:
        with pytest.raises(ValidationError):
            LimitSettings(max_pem_chars=10)
