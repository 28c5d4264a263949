"""Sensor and frame ingestion endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from backend.api.schemas.models import (
    AssessmentSchema,
    FrameRequestSchema,
    SampleBatchSchema,
    SampleResultSchema,
)
from backend.api.services.engine import SafetyEngine
from backend.api.services.state import get_engine, reset_engine
from backend.core.types import AccelSample

router = APIRouter()


@router.post("/sensor/samples", response_model=SampleResultSchema)
def post_samples(batch: SampleBatchSchema, engine: SafetyEngine = Depends(get_engine)) -> SampleResultSchema:
    """Feed accelerometer samples (in order) to the step detector."""

    samples = [AccelSample(s.timestamp_ms, s.vertical_accel) for s in batch.samples]
    try:
        walking = engine.process_samples(samples)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from None
    return SampleResultSchema(walking=walking, processed=len(samples))


@router.post("/frames", response_model=AssessmentSchema)
def post_frame(frame: FrameRequestSchema, engine: SafetyEngine = Depends(get_engine)) -> AssessmentSchema:
    """Assess the detections of one frame and return the gated risk."""

    detections = [d.to_detection() for d in frame.detections]
    try:
        assessment = engine.process_frame(
            detections, frame.image_width, frame.image_height, timestamp=frame.timestamp
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from None
    return AssessmentSchema.from_assessment(assessment)


@router.post("/session/reset")
def post_reset() -> dict[str, str]:
    """Start a new session with fresh gait and hysteresis state."""

    reset_engine()
    return {"status": "reset"}
