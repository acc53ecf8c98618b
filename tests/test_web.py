"""
Tests for the upload checks in the web tabs.
"""

import importlib
from pathlib import Path
from types import SimpleNamespace

import pytest

from zypher.config import settings

WEB_ROOT = Path(__file__).resolve().parent.parent / "WEB"


@pytest.fixture
def web(monkeypatch):
    monkeypatch.syspath_prepend(str(WEB_ROOT))
    monkeypatch.setattr(settings, "max_upload_mb", 1)
    return SimpleNamespace(
        status=importlib.import_module("status"),
        utils=importlib.import_module("utils"),
        decrypt_tab=importlib.import_module("tabs.decrypt_tab"),
    )


def _upload(name, size):
    return SimpleNamespace(name=name, size=size, getvalue=lambda: b"\x00" * 16)


class TestUploadLimit:
    def test_threshold(self, web):
        assert not web.utils.upload_too_large(1024 * 1024)
        assert web.utils.upload_too_large(1024 * 1024 + 1)

    @pytest.mark.parametrize("oversized", [0, 1, 2])
    def test_decrypt_rejects_oversized_upload(self, web, monkeypatch, oversized):
        calls = []
        monkeypatch.setattr(web.status, "set_status", lambda message, kind: calls.append((message, kind)))

        def _never(*args, **kwargs):
            raise AssertionError("oversized uploads must not be decrypted")

        monkeypatch.setattr(web.decrypt_tab.zypher, "import_private_key", _never)
        monkeypatch.setattr(web.decrypt_tab.zypher, "open_file", _never)

        uploads = [
            _upload("report.pdf.encrypted", 10),
            _upload("encrypted_key.json", 10),
            _upload("private_key.pem", 10),
        ]
        uploads[oversized] = _upload(uploads[oversized].name, 2 * 1024 * 1024)

        web.decrypt_tab._decrypt(*uploads)
        assert len(calls) == 1
        message, kind = calls[0]
        assert kind == web.status.ERROR
        assert uploads[oversized].name in message
