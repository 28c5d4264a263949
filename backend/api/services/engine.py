from __future__ import annotations

import logging
import threading
from collections.abc import Iterable

from backend.core.analytics.pipeline import SafetyPipeline
from backend.core.config.settings import (
    BackendSettings,
    classifier_kwargs_from_settings,
    detector_kwargs_from_settings,
)
from backend.core.gait.step_detector import StepDetector
from backend.core.types import AccelSample, Detection, FrameAssessment

logger = logging.getLogger(__name__)


class SafetyEngine:
    """Owns the per-session `SafetyPipeline` and serializes access to it.

    Sensor samples and frames may arrive from different request handlers; the
    gait and risk state are temporal, so every call goes through one lock and
    is applied in arrival order.
    """

    def __init__(self, settings: BackendSettings) -> None:
        self.settings = settings
        self.pipeline = SafetyPipeline(
            step_detector=StepDetector(**detector_kwargs_from_settings(settings)),
            person_label=settings.person_label,
            gate_on_walking=settings.gate_on_walking,
            **classifier_kwargs_from_settings(settings),
        )
        self.running = False
        self._lock = threading.Lock()
        self._latest_assessment: FrameAssessment | None = None
        self.samples_processed = 0
        self.frames_processed = 0
        self.last_error: str | None = None

    def start(self) -> None:
        """Mark the session active. Safe to call multiple times."""

        if self.running:
            return
        self.running = True
        logger.debug("Safety session started")

    def stop(self) -> None:
        """End the session; the engine is discarded afterwards."""

        if not self.running:
            return
        self.running = False
        logger.debug(
            "Safety session stopped after %d samples, %d frames",
            self.samples_processed,
            self.frames_processed,
        )

    def walking(self) -> bool:
        with self._lock:
            return self.pipeline.walking

    def process_samples(self, samples: Iterable[AccelSample]) -> bool:
        """Feed samples in order and return the walking flag after the last one.

        Raises:
            ValueError: on an out-of-order timestamp. Samples before it are kept.
        """

        with self._lock:
            was_walking = self.pipeline.walking
            try:
                for sample in samples:
                    self.pipeline.process_sample(sample.timestamp_ms, sample.vertical_accel)
                    self.samples_processed += 1
            except ValueError as exc:
                self.last_error = str(exc)
                logger.warning("Rejected sensor sample: %s", exc)
                raise
            finally:
                walking = self.pipeline.walking
                if walking != was_walking:
                    logger.info("User %s walking", "started" if walking else "stopped")
            return walking

    def process_frame(
        self,
        detections: Iterable[Detection],
        image_width: int,
        image_height: int,
        timestamp: float | None = None,
    ) -> FrameAssessment:
        with self._lock:
            try:
                assessment = self.pipeline.process_frame(detections, image_width, image_height, timestamp)
            except ValueError as exc:
                self.last_error = str(exc)
                logger.warning("Rejected frame: %s", exc)
                raise
            self.frames_processed += 1
            self._latest_assessment = assessment
            return assessment

    def latest_assessment(self) -> FrameAssessment | None:
        """Return the most recent frame assessment."""

        with self._lock:
            return self._latest_assessment
