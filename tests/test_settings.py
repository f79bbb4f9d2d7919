"""Tests for engine settings."""

import pytest

from lodgely.infra.settings import EngineSettings, load_settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("LODGELY_PENDING_BLOCKS", "LODGELY_ALLOW_PAST_START", "DATABASE_URL"):
        monkeypatch.delenv(name, raising=False)


class TestLoadSettings:
    def test_defaults(self):
        assert load_settings() == EngineSettings()

    @pytest.mark.parametrize("raw", ["1", "true", "TRUE", "yes", " on "])
    def test_truthy_flags(self, monkeypatch, raw):
        monkeypatch.setenv("LODGELY_PENDING_BLOCKS", raw)
        monkeypatch.setenv("LODGELY_ALLOW_PAST_START", raw)

        settings = load_settings()

        assert settings.pending_blocks is True
        assert settings.allow_past_start is True

    @pytest.mark.parametrize("raw", ["0", "false", "no", "off", ""])
    def test_falsy_flags(self, monkeypatch, raw):
        monkeypatch.setenv("LODGELY_PENDING_BLOCKS", raw)

        assert load_settings().pending_blocks is False

    def test_invalid_flag(self, monkeypatch):
        monkeypatch.setenv("LODGELY_PENDING_BLOCKS", "maybe")

        with pytest.raises(ValueError, match="LODGELY_PENDING_BLOCKS"):
            load_settings()

    def test_database_url(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgres://u:p@h/db")

        assert load_settings().database_url == "postgres://u:p@h/db"

    def test_empty_database_url_is_none(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "")

        assert load_settings().database_url is None
