"""Shared type definitions used across the backend.

This module intentionally centralizes small, stable types (boxes, samples,
risk levels and per-frame assessments) so the gait, risk and pipeline code can
stay strongly typed.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

FrameSize = tuple[int, int]


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned rectangle in image pixel coordinates."""

    left: int
    top: int
    right: int
    bottom: int

    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def height(self) -> int:
        return self.bottom - self.top

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def center_x(self) -> int:
        return self.left + self.width // 2

    def as_tuple(self) -> tuple[int, int, int, int]:
        return (self.left, self.top, self.right, self.bottom)


class RiskLevel(str, Enum):
    """Collision risk for one detected person.

    Ordering goes through `_RISK_RANK`, not through declaration order.
    """

    NONE = "none"
    WARNING = "warning"
    DANGER = "danger"

    @property
    def rank(self) -> int:
        return _RISK_RANK[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank >= other.rank


_RISK_RANK: dict[RiskLevel, int] = {
    RiskLevel.NONE: 0,
    RiskLevel.WARNING: 1,
    RiskLevel.DANGER: 2,
}


def worst_risk(levels: Iterable[RiskLevel]) -> RiskLevel:
    """Return the most severe level in `levels` (NONE when empty)."""

    return max(levels, key=lambda level: level.rank, default=RiskLevel.NONE)


@dataclass
class AccelSample:
    """One vertical-acceleration reading from the motion sensor."""

    timestamp_ms: int
    vertical_accel: float


@dataclass
class Detection:
    """Perception output for one object, before class filtering."""

    bbox: BoundingBox
    labels: tuple[str, ...] = ()
    confidence: float | None = None


@dataclass
class DetectionResult:
    """A person box paired with its assessed risk (used for rendering)."""

    bbox: BoundingBox
    risk: RiskLevel


@dataclass
class FrameAssessment:
    """Metadata payload associated with a processed frame."""

    frame_id: int
    timestamp: float
    frame_size: FrameSize
    results: list[DetectionResult] = field(default_factory=list)
    worst_risk: RiskLevel = RiskLevel.NONE
    # Risk forwarded to the haptic driver after the walking gate.
    haptic: RiskLevel = RiskLevel.NONE
    walking: bool = False
