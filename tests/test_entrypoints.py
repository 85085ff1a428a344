import runpy
import sys

import pytest


def test_cli_main_calls_app(monkeypatch):
    import geodraw.cli as cli

    called = {"ok": False}

    def _fake_app():
        called["ok"] = True

    monkeypatch.setattr(cli, "app", _fake_app)
    cli.main()
    assert called["ok"] is True


def test_python_m_geodraw_invokes_cli_main(monkeypatch):
    import geodraw.cli as cli

    called = {"ok": False}

    def _fake_main():
        called["ok"] = True

    monkeypatch.setattr(cli, "main", _fake_main)

    sys.modules.pop("geodraw.__main__", None)
    runpy.run_module("geodraw.__main__", run_name="__main__")
    assert called["ok"] is True


def test_geodraw_cli_module_guard_runs(monkeypatch):
    """Run geodraw/cli.py as a script with --help so it exits quickly."""
    monkeypatch.setattr(sys, "argv", ["geodraw", "--help"])
    sys.modules.pop("geodraw.cli", None)
    with pytest.raises(SystemExit) as e:
        runpy.run_module("geodraw.cli", run_name="__main__")
    assert e.value.code == 0


def test_package_exports():
    import geodraw

    assert geodraw.__version__ == "1.0.0"
    for name in geodraw.__all__:
        assert hasattr(geodraw, name)
