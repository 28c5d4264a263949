"""Sensitivity configuration endpoints.

Any change here starts a new safety session: gait state and the approach
baseline are tuned by these values, so they are not carried across.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from backend.api.schemas.models import ConfigSchema
from backend.api.services.state import get_settings, reload_settings
from backend.core.config.presets import list_presets, preset_patch
from backend.core.config.settings import BackendSettings, settings_to_dict

router = APIRouter()


def _as_schema(settings: BackendSettings) -> ConfigSchema:
    return ConfigSchema(**settings_to_dict(settings))


@router.get("/config", response_model=ConfigSchema)
def get_config() -> ConfigSchema:
    """Thresholds currently used by the step detector and risk classifier."""

    return _as_schema(get_settings())


@router.get("/config/presets")
def get_presets() -> dict[str, list[dict[str, object]]]:
    return {"presets": list_presets()}


@router.post("/config/presets/{preset_id}", response_model=ConfigSchema)
def apply_preset(preset_id: str) -> ConfigSchema:
    """Switch to a named sensitivity preset."""

    try:
        patch = preset_patch(preset_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Unknown preset") from None
    return _as_schema(reload_settings(patch))


@router.post("/config", response_model=ConfigSchema)
def update_config(cfg: ConfigSchema) -> ConfigSchema:
    """Replace the thresholds for this process only.

    Values are not written back to disk; use `WG_*` variables or the YAML file
    for anything that must survive a restart.
    """

    return _as_schema(reload_settings(cfg.model_dump()))
