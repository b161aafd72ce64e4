"""Tests for environment-driven defaults."""

from __future__ import annotations

from healthz.config import Settings


class TestSettings:
    def test_defaults(self, monkeypatch) -> None:
        for var in ("HEALTHZ_RUNTIME_TTL", "HEALTHZ_CHECK_PERIOD", "HEALTHZ_REMOTE_TIMEOUT"):
            monkeypatch.delenv(var, raising=False)
        s = Settings(_env_file=None)
        assert s.runtime_ttl == 15.0
        assert s.check_period == 1.0
        assert s.remote_timeout == 10.0
        assert s.remote_body_excerpt == 1024

    def test_env_override(self, monkeypatch) -> None:
        monkeypatch.setenv("HEALTHZ_RUNTIME_TTL", "5")
        monkeypatch.setenv("HEALTHZ_REMOTE_TIMEOUT", "2.5")
        s = Settings(_env_file=None)
        assert s.runtime_ttl == 5.0
        assert s.remote_timeout == 2.5
