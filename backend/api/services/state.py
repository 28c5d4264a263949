"""Process-wide safety session.

The service tracks one pedestrian, so there is exactly one `SafetyEngine` (and
one set of settings) per process. Routes reach it through `get_engine`, which
FastAPI can also use as a dependency.
"""

from __future__ import annotations

from threading import RLock

from backend.api.services.engine import SafetyEngine
from backend.core.config.settings import BackendSettings, load_settings, settings_to_dict

_settings: BackendSettings | None = None
_engine: SafetyEngine | None = None
_lock = RLock()


def get_settings() -> BackendSettings:
    """Settings in effect; read from YAML/env the first time."""

    global _settings
    with _lock:
        if _settings is None:
            _settings = load_settings()
    return _settings


def _replace_engine() -> SafetyEngine:
    global _engine
    if _engine is not None:
        _engine.stop()
    _engine = SafetyEngine(get_settings())
    _engine.start()
    return _engine


def reload_settings(data: dict | None = None) -> BackendSettings:
    """Re-read settings, apply `data` on top, and renew an open session.

    If no session is open yet, the next `get_engine` call picks the new
    settings up.
    """

    global _settings
    with _lock:
        base = load_settings()
        _settings = BackendSettings(**{**settings_to_dict(base), **data}) if data else base
        if _engine is not None:
            _replace_engine()
    return _settings


def get_engine() -> SafetyEngine:
    """The active session, opened on first use."""

    with _lock:
        if _engine is None:
            return _replace_engine()
        return _engine


def reset_engine() -> SafetyEngine:
    """Drop gait and hysteresis state by opening a fresh session."""

    with _lock:
        return _replace_engine()


def stop_engine() -> None:
    """Close the active session, if any."""

    global _engine
    with _lock:
        if _engine is not None:
            _engine.stop()
            _engine = None
