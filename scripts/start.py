#!/usr/bin/env python3
"""
Production entrypoint for the catalog API.

Checks the serving settings (PORT, WEB_CONCURRENCY, WEB_TIMEOUT_SECONDS from
app.catalog.config), migrates and seeds the database through release.py, then
replaces itself with gunicorn serving app.wsgi:app.

Usage:
    python scripts/start.py
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.catalog.config import Settings, load_settings  # noqa: E402

WSGI_APP = "app.wsgi:app"
GUNICORN_LOG_LEVELS = frozenset({"debug", "info", "warning", "error", "critical"})


def check_serving_settings(settings: Settings) -> None:
    """Fail fast on values gunicorn would reject later with a less useful error."""
    if not 1 <= settings.port <= 65535:
        raise RuntimeError(f"PORT must be between 1 and 65535, got {settings.port}.")
    if settings.web_workers < 1:
        raise RuntimeError(f"WEB_CONCURRENCY must be at least 1, got {settings.web_workers}.")
    if settings.web_timeout_seconds < 1:
        raise RuntimeError(f"WEB_TIMEOUT_SECONDS must be at least 1, got {settings.web_timeout_seconds}.")


def gunicorn_argv(settings: Settings) -> list[str]:
    argv = [
        "gunicorn",
        WSGI_APP,
        "--bind", f"0.0.0.0:{settings.port}",
        "--workers", str(settings.web_workers),
        "--timeout", str(settings.web_timeout_seconds),
        # engine is disposed after fork (see create_app)
        "--preload",
        "--access-logfile", "-",
        "--error-logfile", "-",
    ]
    level = {"WARN": "warning"}.get(settings.log_level, settings.log_level.lower())
    if level in GUNICORN_LOG_LEVELS:
        argv += ["--log-level", level]
    return argv


def main() -> None:
    try:
        settings = load_settings()
        check_serving_settings(settings)
    except RuntimeError as e:
        print(f"ERROR: {e}", flush=True)
        sys.exit(1)

    from scripts.release import run_release
    try:
        run_release()
    except Exception as e:
        print(f"Release failed: {e}", flush=True)
        sys.exit(1)

    argv = gunicorn_argv(settings)
    print("Starting: " + " ".join(argv), flush=True)
    os.execvp(argv[0], argv)


if __name__ == "__main__":
    main()
