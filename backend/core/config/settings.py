"""Backend configuration.

Settings are loaded from YAML defaults and overridden by environment variables
prefixed with `WG_`.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BackendSettings(BaseSettings):
    """Runtime configuration loaded from YAML defaults and `WG_` env overrides."""

    # Vertical acceleration a bounce must exceed to count as a step.
    step_threshold: float = 1.8
    # Minimum gap between two accepted steps (debounce).
    step_delay_ms: int = 500
    # No accepted step for this long means the user stopped.
    step_timeout_ms: int = 2000

    # Box area (px^2) above which a centered person is DANGER.
    danger_area_threshold: int = 60000
    # Fraction of the half-width a box center may stray from the image center.
    center_tolerance_percent: float = 0.35

    person_label: str = Field("Person", description="detector class label kept for risk assessment")
    # Suppress haptic output while the user is standing still.
    gate_on_walking: bool = True

    model_config = SettingsConfigDict(env_prefix="WG_", validate_assignment=True)

    @field_validator("step_threshold")
    @classmethod
    def _validate_step_threshold(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("step_threshold must be > 0")
        return float(v)

    @field_validator("step_delay_ms", "step_timeout_ms", "danger_area_threshold")
    @classmethod
    def _validate_positive_int(cls, v: int) -> int:
        if int(v) <= 0:
            raise ValueError("value must be > 0")
        return int(v)

    @field_validator("center_tolerance_percent")
    @classmethod
    def _validate_center_tolerance(cls, v: float) -> float:
        if not 0.0 < float(v) <= 1.0:
            raise ValueError("center_tolerance_percent must be in (0, 1]")
        return float(v)

    @field_validator("person_label")
    @classmethod
    def _validate_person_label(cls, v: str) -> str:
        v2 = str(v).strip()
        if not v2:
            raise ValueError("person_label must not be empty")
        return v2


def settings_to_dict(settings: BackendSettings) -> dict[str, Any]:
    """Convert settings to a plain dict."""

    return settings.model_dump()


def _config_path() -> Path:
    """Return the YAML configuration path (defaults to config/backend.config.yml)."""

    return Path(os.getenv("WG_CONFIG", "config/backend.config.yml"))


def load_settings() -> BackendSettings:
    """Load settings from YAML and environment variables.

    YAML provides defaults; environment variables override.
    """

    data: dict[str, Any] = {}
    path = _config_path()
    if path.exists():
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

    env_settings = BackendSettings()
    env_overrides: dict[str, Any] = {
        name: getattr(env_settings, name) for name in env_settings.model_fields_set
    }

    merged = {**data, **env_overrides}
    return BackendSettings(**merged)


def detector_kwargs_from_settings(settings: BackendSettings) -> dict[str, Any]:
    """Return `StepDetector` constructor arguments."""

    return {
        "step_threshold": settings.step_threshold,
        "step_delay_ms": settings.step_delay_ms,
        "step_timeout_ms": settings.step_timeout_ms,
    }


def classifier_kwargs_from_settings(settings: BackendSettings) -> dict[str, Any]:
    """Return `CollisionRiskClassifier` tuning arguments (without the screen center)."""

    return {
        "danger_area_threshold": settings.danger_area_threshold,
        "center_tolerance_percent": settings.center_tolerance_percent,
    }
