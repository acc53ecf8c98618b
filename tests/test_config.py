"""
Tests for runtime settings.
"""

import logging

import pytest
from pydantic import ValidationError

from zypher import config
from zypher.config import Settings


class TestSettings:
    def test_defaults(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        s = Settings()
        assert s.app_name == "Zypher"
        assert s.log_level == "INFO"
        assert s.max_workers == 4
        assert s.max_upload_mb == 200

    def test_environment_overrides(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("ZYPHER_MAX_WORKERS", "8")
        monkeypatch.setenv("ZYPHER_LOG_LEVEL", "debug")
        s = Settings()
        assert s.max_workers == 8
        assert s.log_level == "DEBUG"

    def test_dotenv_file(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".env").write_text("ZYPHER_MAX_UPLOAD_MB=50\n")
        assert Settings().max_upload_mb == 50

    def test_unknown_log_level(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("ZYPHER_LOG_LEVEL", "chatty")
        with pytest.raises(ValidationError):
            Settings()

    def test_worker_count_must_be_positive(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("ZYPHER_MAX_WORKERS", "0")
        with pytest.raises(ValidationError):
            Settings()


def test_configure_logging(monkeypatch):
    calls = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.update(kw))
    config.configure_logging("WARNING")
    assert calls == {"level": "WARNING", "format": config.LOG_FORMAT}
