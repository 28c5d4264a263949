"""Replay a recorded session through the safety pipeline.

Input is JSON Lines, one event per line, in arrival order:

    {"type": "sample", "timestamp_ms": 1200, "vertical_accel": 2.1}
    {"type": "frame", "image_width": 640, "image_height": 480,
     "detections": [{"bbox": [250, 100, 390, 460], "labels": ["Person"]}]}
"""

from __future__ import annotations

import argparse
import json
from dataclasses import asdict, is_dataclass
from enum import Enum
from pathlib import Path

from backend.core.analytics.pipeline import SafetyPipeline
from backend.core.config.settings import (
    BackendSettings,
    classifier_kwargs_from_settings,
    detector_kwargs_from_settings,
)
from backend.core.gait.step_detector import StepDetector
from backend.core.types import BoundingBox, Detection, FrameAssessment


def _to_jsonable(obj):
    if is_dataclass(obj):
        return _to_jsonable(asdict(obj))
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, dict):
        return {str(k): _to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_to_jsonable(v) for v in obj]
    return obj


def _parse_detection(raw: dict) -> Detection:
    left, top, right, bottom = (int(v) for v in raw["bbox"])
    return Detection(
        bbox=BoundingBox(left, top, right, bottom),
        labels=tuple(raw.get("labels", ())),
        confidence=raw.get("confidence"),
    )


def build_pipeline(settings: BackendSettings) -> SafetyPipeline:
    return SafetyPipeline(
        step_detector=StepDetector(**detector_kwargs_from_settings(settings)),
        person_label=settings.person_label,
        gate_on_walking=settings.gate_on_walking,
        **classifier_kwargs_from_settings(settings),
    )


def replay(lines, pipeline: SafetyPipeline) -> list[FrameAssessment]:
    """Feed recorded events to `pipeline` and return one assessment per frame."""

    outputs: list[FrameAssessment] = []
    for lineno, line in enumerate(lines, start=1):
        line = line.strip()
        if not line:
            continue
        event = json.loads(line)
        kind = event.get("type")
        if kind == "sample":
            pipeline.process_sample(int(event["timestamp_ms"]), float(event["vertical_accel"]))
        elif kind == "frame":
            detections = [_parse_detection(d) for d in event.get("detections", [])]
            outputs.append(
                pipeline.process_frame(
                    detections,
                    int(event["image_width"]),
                    int(event["image_height"]),
                    timestamp=event.get("timestamp"),
                )
            )
        else:
            raise ValueError(f"line {lineno}: unknown event type {kind!r}")
    return outputs


def run(args):
    in_path = Path(args.input)
    if not in_path.exists():
        raise SystemExit(f"Cannot open recording {args.input}")
    settings = BackendSettings(
        step_threshold=args.step_threshold,
        step_delay_ms=args.step_delay_ms,
        step_timeout_ms=args.step_timeout_ms,
        danger_area_threshold=args.danger_area_threshold,
        center_tolerance_percent=args.center_tolerance,
        person_label=args.person_label,
        gate_on_walking=not args.no_gate,
    )
    with open(in_path, encoding="utf-8") as f:
        outputs = replay(f, build_pipeline(settings))
    out_path = Path(args.output)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(_to_jsonable(outputs), f, indent=2)
    print(f"Wrote {len(outputs)} frame assessments to {out_path}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Replay a recorded sensor/detection session")
    parser.add_argument("--input", required=True, help="Path to JSON Lines recording")
    parser.add_argument("--output", required=True, help="Where to save JSON output")
    parser.add_argument("--step-threshold", type=float, default=1.8)
    parser.add_argument("--step-delay-ms", type=int, default=500)
    parser.add_argument("--step-timeout-ms", type=int, default=2000)
    parser.add_argument("--danger-area-threshold", type=int, default=60000)
    parser.add_argument("--center-tolerance", type=float, default=0.35)
    parser.add_argument("--person-label", default="Person")
    parser.add_argument(
        "--no-gate", action="store_true", help="Report haptic risk even while standing still"
    )
    return parser


def main() -> None:
    run(build_parser().parse_args())


if __name__ == "__main__":
    main()
