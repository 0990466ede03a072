"""Tests for environment-driven configuration."""

import pytest

from core.config import (
    check_required_env_vars,
    get_archive_sweep_minutes,
    get_cron_secret,
    get_unknown_block_type_policy,
)


class TestUnknownBlockTypePolicy:
    def test_defaults_to_fail(self, monkeypatch):
        monkeypatch.delenv("UNKNOWN_BLOCK_TYPE_POLICY", raising=False)
        assert get_unknown_block_type_policy() == "fail"

    def test_case_insensitive(self, monkeypatch):
        monkeypatch.setenv("UNKNOWN_BLOCK_TYPE_POLICY", "SKIP")
        assert get_unknown_block_type_policy() == "skip"

    def test_rejects_unknown_value(self, monkeypatch):
        monkeypatch.setenv("UNKNOWN_BLOCK_TYPE_POLICY", "ignore")
        with pytest.raises(ValueError):
            get_unknown_block_type_policy()


def test_archive_sweep_minutes(monkeypatch):
    monkeypatch.delenv("ARCHIVE_SWEEP_MINUTES", raising=False)
    assert get_archive_sweep_minutes() == 15
    monkeypatch.setenv("ARCHIVE_SWEEP_MINUTES", "2")
    assert get_archive_sweep_minutes() == 2


def test_empty_cron_secret_is_unset(monkeypatch):
    monkeypatch.setenv("CRON_SECRET", "")
    assert get_cron_secret() is None


class TestCheckRequiredEnvVars:
    def test_production_fails_without_database(self, monkeypatch):
        monkeypatch.setenv("RAILWAY_ENVIRONMENT", "production")
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.setenv("JWT_SECRET", "x")
        monkeypatch.setenv("CRON_SECRET", "y")

        ok, _ = check_required_env_vars()
        assert not ok

    def test_dev_only_warns(self, monkeypatch):
        monkeypatch.delenv("RAILWAY_ENVIRONMENT", raising=False)
        monkeypatch.setenv("DEV_MODE", "true")
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.delenv("CRON_SECRET", raising=False)
        monkeypatch.setenv("JWT_SECRET", "x")

        ok, warnings = check_required_env_vars()
        assert ok
        assert any("DATABASE_URL" in w for w in warnings)
        assert not any("CRON_SECRET" in w for w in warnings)
