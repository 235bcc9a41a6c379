"""Tests for configuration loading."""

import pytest
from pydantic import ValidationError

from finagent.config.settings import AppSettings, GeminiSettings, LedgerSettings


class TestSettings:

    def test_ledger_defaults(self, monkeypatch):
        monkeypatch.delenv("LEDGER_EXPENSE_DISPLAY_LIMIT", raising=False)
        settings = LedgerSettings()
        assert settings.expense_display_limit == 50
        assert settings.monthly_window_days == 30
        assert settings.bill_default_due_days == 30
        assert settings.goal_default_horizon_days == 365

    def test_ledger_env_override(self, monkeypatch):
        monkeypatch.setenv("LEDGER_MONTHLY_WINDOW_DAYS", "7")
        assert LedgerSettings().monthly_window_days == 7

    def test_gemini_disabled_without_key(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        assert not GeminiSettings().enabled

    def test_gemini_enabled_with_key(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "test-key")
        assert GeminiSettings().enabled

    def test_unknown_storage_backend(self, monkeypatch):
        monkeypatch.setenv("STORAGE_BACKEND", "postgres")
        with pytest.raises(ValidationError):
            AppSettings()
