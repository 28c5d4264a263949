"""Safety pipeline orchestration.

This module ties together gait detection, person filtering and collision risk
assessment into a single per-sample / per-frame processing pipeline, and
applies the walking gate before anything reaches the haptic driver.
"""

from __future__ import annotations

import time
from collections.abc import Iterable

from backend.core.gait.step_detector import StepDetector
from backend.core.risk.collision import CollisionRiskClassifier
from backend.core.types import Detection, FrameAssessment, RiskLevel, worst_risk

DEFAULT_PERSON_LABEL = "Person"


class SafetyPipeline:
    """End-to-end processing for one session.

    Responsibilities:
    - feed accelerometer samples to the step detector
    - keep only person detections and assess each one, in input order
    - reduce a frame to its worst risk and gate it on the walking flag

    The classifier is created from the first frame's width unless one is
    injected.
    """

    def __init__(
        self,
        step_detector: StepDetector | None = None,
        classifier: CollisionRiskClassifier | None = None,
        *,
        danger_area_threshold: int = 60000,
        center_tolerance_percent: float = 0.35,
        person_label: str = DEFAULT_PERSON_LABEL,
        gate_on_walking: bool = True,
    ) -> None:
        """Create a pipeline with optional injected components."""

        self.step_detector = step_detector or StepDetector()
        self._classifier = classifier
        self.danger_area_threshold = danger_area_threshold
        self.center_tolerance_percent = center_tolerance_percent
        self.person_label = person_label
        self.gate_on_walking = gate_on_walking
        self.frame_id = 0

    @property
    def walking(self) -> bool:
        return self.step_detector.is_walking

    @property
    def classifier(self) -> CollisionRiskClassifier | None:
        return self._classifier

    def process_sample(self, timestamp_ms: int, vertical_accel: float) -> bool:
        """Feed one accelerometer sample and return the walking flag."""

        self.step_detector.process(timestamp_ms, vertical_accel)
        return self.step_detector.is_walking

    def is_person(self, det: Detection) -> bool:
        wanted = self.person_label.casefold()
        return any(label.casefold() == wanted for label in det.labels)

    def _classifier_for(self, image_width: int, image_height: int) -> CollisionRiskClassifier:
        if self._classifier is None:
            self._classifier = CollisionRiskClassifier.for_frame(
                image_width,
                image_height,
                danger_area_threshold=self.danger_area_threshold,
                center_tolerance_percent=self.center_tolerance_percent,
            )
        return self._classifier

    def process_frame(
        self,
        detections: Iterable[Detection],
        image_width: int,
        image_height: int,
        timestamp: float | None = None,
    ) -> FrameAssessment:
        """Assess every person in a frame and return the frame assessment.

        Raises:
            ValueError: if the image size is not positive.
        """

        if image_width <= 0 or image_height <= 0:
            raise ValueError(f"image size must be positive, got {image_width}x{image_height}")
        classifier = self._classifier_for(image_width, image_height)

        results = [
            classifier.assess_risk(det.bbox, image_width, image_height)
            for det in detections
            if self.is_person(det)
        ]
        worst = worst_risk(r.risk for r in results)
        walking = self.step_detector.is_walking
        haptic = worst if walking or not self.gate_on_walking else RiskLevel.NONE

        self.frame_id += 1
        return FrameAssessment(
            frame_id=self.frame_id,
            timestamp=time.time() if timestamp is None else float(timestamp),
            frame_size=(int(image_width), int(image_height)),
            results=results,
            worst_risk=worst,
            haptic=haptic,
            walking=walking,
        )
