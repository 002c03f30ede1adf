"""Tests for the production entrypoint helpers."""
import pytest

from app.catalog.config import load_settings
from scripts.start import check_serving_settings, gunicorn_argv


def _settings(monkeypatch, **env):
    for k in ("PORT", "WEB_CONCURRENCY", "WEB_TIMEOUT_SECONDS", "LOG_LEVEL"):
        monkeypatch.delenv(k, raising=False)
    for k, v in env.items():
        monkeypatch.setenv(k, v)
    return load_settings()


def test_defaults(monkeypatch):
    argv = gunicorn_argv(_settings(monkeypatch))
    assert argv[:2] == ["gunicorn", "app.wsgi:app"]
    assert argv[argv.index("--bind") + 1] == "0.0.0.0:8080"
    assert argv[argv.index("--workers") + 1] == "2"
    assert argv[argv.index("--timeout") + 1] == "60"
    assert argv[argv.index("--log-level") + 1] == "info"


def test_serving_settings_from_env(monkeypatch):
    s = _settings(monkeypatch, PORT="9000", WEB_CONCURRENCY="4", WEB_TIMEOUT_SECONDS="15", LOG_LEVEL="warn")
    check_serving_settings(s)
    argv = gunicorn_argv(s)
    assert argv[argv.index("--bind") + 1] == "0.0.0.0:9000"
    assert argv[argv.index("--workers") + 1] == "4"
    assert argv[argv.index("--timeout") + 1] == "15"
    assert argv[argv.index("--log-level") + 1] == "warning"


@pytest.mark.parametrize(
    "env",
    [{"PORT": "0"}, {"PORT": "70000"}, {"WEB_CONCURRENCY": "0"}, {"WEB_TIMEOUT_SECONDS": "0"}],
)
def test_out_of_range_rejected(monkeypatch, env):
    with pytest.raises(RuntimeError):
        check_serving_settings(_settings(monkeypatch, **env))


def test_non_integer_rejected(monkeypatch):
    with pytest.raises(RuntimeError, match="PORT"):
        _settings(monkeypatch, PORT="eighty")
