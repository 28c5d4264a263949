from __future__ import annotations

from typing import Any


# Sensitivity presets. Each one patches the gait and risk thresholds only.
#
# Notes:
# - step_threshold: lower picks up softer strides (slow walkers, glasses mount)
# - danger_area_threshold: lower warns while people are still further away
# - center_tolerance_percent: wider corridor counts more people as "in path"


PRESETS: dict[str, dict[str, Any]] = {
    # Warn early; accepts more false alarms.
    "prudent": {
        "step_threshold": 1.5,
        "step_delay_ms": 400,
        "step_timeout_ms": 2500,
        "danger_area_threshold": 45000,
        "center_tolerance_percent": 0.45,
    },
    # Defaults tuned on the phone build.
    "equilibre": {
        "step_threshold": 1.8,
        "step_delay_ms": 500,
        "step_timeout_ms": 2000,
        "danger_area_threshold": 60000,
        "center_tolerance_percent": 0.35,
    },
    # Only buzz for people squarely in front and very close.
    "discret": {
        "step_threshold": 2.2,
        "step_delay_ms": 500,
        "step_timeout_ms": 1500,
        "danger_area_threshold": 80000,
        "center_tolerance_percent": 0.25,
    },
}


PRESET_LABELS: dict[str, str] = {
    "prudent": "Prudent",
    "equilibre": "Équilibré",
    "discret": "Discret",
}


def list_presets() -> list[dict[str, Any]]:
    return [
        {
            "id": preset_id,
            "label": PRESET_LABELS.get(preset_id, preset_id),
            "settings": PRESETS[preset_id],
        }
        for preset_id in PRESETS.keys()
    ]


def preset_patch(preset_id: str) -> dict[str, Any]:
    if preset_id not in PRESETS:
        raise KeyError(preset_id)
    return dict(PRESETS[preset_id])
