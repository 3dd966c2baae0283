"""Tests for environment-driven settings."""

import pytest

from logtree.config import Settings, get_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("LOGTREE_LOG_LEVEL", "LOGTREE_MAX_WORKERS", "LOGTREE_ENCODING"):
        monkeypatch.delenv(name, raising=False)


class TestGetSettings:
    def test_defaults(self):
        assert get_settings() == Settings()

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("LOGTREE_LOG_LEVEL", "debug")
        monkeypatch.setenv("LOGTREE_MAX_WORKERS", "4")
        monkeypatch.setenv("LOGTREE_ENCODING", "latin-1")
        assert get_settings() == Settings(log_level="DEBUG", max_workers=4, encoding="latin-1")

    @pytest.mark.parametrize("value", ["many", "0", "-2"])
    def test_bad_worker_count_falls_back(self, monkeypatch, caplog, value):
        monkeypatch.setenv("LOGTREE_MAX_WORKERS", value)
        assert get_settings().max_workers == 1
        assert "LOGTREE_MAX_WORKERS" in caplog.text

    def test_unknown_encoding_falls_back(self, monkeypatch, caplog):
        monkeypatch.setenv("LOGTREE_ENCODING", "no-such-codec")
        assert get_settings().encoding == "utf-8"
        assert "unknown encoding" in caplog.text
