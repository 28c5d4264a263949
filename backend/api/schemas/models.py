"""Pydantic models for the HTTP/WS API."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from backend.core.types import BoundingBox, Detection, FrameAssessment, RiskLevel


class SampleSchema(BaseModel):
    """One vertical-acceleration reading."""

    timestamp_ms: int
    vertical_accel: float


class SampleBatchSchema(BaseModel):
    """Sensor samples in arrival order."""

    samples: list[SampleSchema]


class SampleResultSchema(BaseModel):
    walking: bool
    processed: int


class DetectionSchema(BaseModel):
    """Detector output for one object in image pixels."""

    bbox: tuple[int, int, int, int]
    labels: list[str] = Field(default_factory=list)
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)

    def to_detection(self) -> Detection:
        return Detection(bbox=BoundingBox(*self.bbox), labels=tuple(self.labels), confidence=self.confidence)


class FrameRequestSchema(BaseModel):
    """All detections of one video frame."""

    image_width: int
    image_height: int
    timestamp: float | None = None
    detections: list[DetectionSchema] = Field(default_factory=list)


class DetectionResultSchema(BaseModel):
    bbox: tuple[int, int, int, int]
    risk: RiskLevel


class AssessmentSchema(BaseModel):
    """Per-frame risk payload."""

    frame_id: int
    timestamp: float
    frame_size: tuple[int, int]
    results: list[DetectionResultSchema]
    worst_risk: RiskLevel
    haptic: RiskLevel
    walking: bool

    @classmethod
    def from_assessment(cls, assessment: FrameAssessment) -> AssessmentSchema:
        return cls(
            frame_id=assessment.frame_id,
            timestamp=assessment.timestamp,
            frame_size=assessment.frame_size,
            results=[
                DetectionResultSchema(bbox=r.bbox.as_tuple(), risk=r.risk) for r in assessment.results
            ],
            worst_risk=assessment.worst_risk,
            haptic=assessment.haptic,
            walking=assessment.walking,
        )


class StatsSchema(BaseModel):
    """High-level session stats payload."""

    walking: bool
    samples_processed: int
    frames_processed: int
    last_frame_id: int | None = None
    worst_risk: RiskLevel | None = None
    haptic: RiskLevel | None = None
    error: str | None = None


class ConfigSchema(BaseModel):
    """Runtime configuration payload."""

    step_threshold: float = Field(gt=0.0)
    step_delay_ms: int = Field(gt=0)
    step_timeout_ms: int = Field(gt=0)
    danger_area_threshold: int = Field(gt=0)
    center_tolerance_percent: float = Field(gt=0.0, le=1.0)
    person_label: str = "Person"
    gate_on_walking: bool = True

    @field_validator("person_label")
    @classmethod
    def _validate_person_label(cls, v: str) -> str:
        v2 = v.strip()
        if not v2:
            raise ValueError("person_label must not be empty")
        return v2
