import logging
import runpy

import pytest
from fastapi.testclient import TestClient

from regimeniq.config import get_settings
from regimeniq.logging_config import setup_logging
from regimeniq.main import app, get_rules


@pytest.fixture
def fresh_caches():
    get_settings.cache_clear()
    get_rules.cache_clear()
    yield
    get_settings.cache_clear()
    get_rules.cache_clear()


def test_startup_fails_on_missing_rules_file(monkeypatch, tmp_path, fresh_caches, restore_root_logging):
    monkeypatch.setenv("REGIMENIQ_RULES_PATH", str(tmp_path / "missing.json"))

    with pytest.raises(OSError):
        with TestClient(app):
            pass


def test_startup_with_default_rules(monkeypatch, fresh_caches, restore_root_logging):
    monkeypatch.delenv("REGIMENIQ_RULES_PATH", raising=False)

    with TestClient(app) as client:
        assert client.get("/health").json() == {"status": "ok"}


def test_setup_logging_installs_single_console_handler(restore_root_logging):
    root_logger = restore_root_logging
    root_logger.addHandler(logging.NullHandler())

    setup_logging("debug")

    assert root_logger.level == logging.DEBUG
    assert len(root_logger.handlers) == 1
    handler = root_logger.handlers[0]
    assert isinstance(handler, logging.StreamHandler)
    assert handler.formatter._fmt == "%(asctime)s [%(name)s] %(levelname)s: %(message)s"


def test_running_module_starts_uvicorn(monkeypatch):
    calls = []
    monkeypatch.setattr("uvicorn.run", lambda *args, **kwargs: calls.append((args, kwargs)))

    runpy.run_module("regimeniq.main", run_name="__main__")

    assert calls[0][0] == ("regimeniq.main:app",)
    assert calls[0][1]["port"] == 8000
