"""Tests for the server entry point."""

import importlib

import api.main
from config import config


class TestRun:
    """Tests for serving the app."""

    def test_import_leaves_logging_alone(self, monkeypatch):
        calls = []
        monkeypatch.setattr("logging.basicConfig", lambda **kwargs: calls.append(kwargs))

        importlib.reload(api.main)

        assert calls == []

    def test_run_configures_logging_and_serves(self, monkeypatch):
        logging_calls = []
        served = []
        monkeypatch.setattr("logging.basicConfig", lambda **kwargs: logging_calls.append(kwargs))
        monkeypatch.setattr(api.main.uvicorn, "run", lambda app, **kwargs: served.append((app, kwargs)))

        api.main.run()

        assert logging_calls[0]["level"] == config.log_level
        ((app, kwargs),) = served
        assert app is api.main.app
        assert kwargs["host"] == config.host
        assert kwargs["port"] == config.port
