"""Tests for the server CLI entry point."""

import os

import uvicorn

from minicloud.server_cli import main


def test_main_runs_uvicorn_with_flags(monkeypatch):
    calls = []
    monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
    monkeypatch.delenv("MINICLOUD_LOCAL_MODE", raising=False)
    monkeypatch.delenv("MINICLOUD_KUBECTL_BIN", raising=False)

    main(["--host", "127.0.0.1", "--port", "9090", "--local", "--kubectl", "/usr/local/bin/kubectl"])

    assert calls == [("minicloud.main:app", {"host": "127.0.0.1", "port": 9090})]
    assert os.environ["MINICLOUD_LOCAL_MODE"] == "1"
    assert os.environ["MINICLOUD_KUBECTL_BIN"] == "/usr/local/bin/kubectl"


def test_main_defaults_from_settings(monkeypatch):
    calls = []
    monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.append(kwargs))

    main([])

    assert calls == [{"host": "0.0.0.0", "port": 8080}]
