"""Walking detection from vertical acceleration.

Walking produces a quasi-periodic vertical "bounce". A step is the rising crest
of that bounce above `step_threshold`, counted at most once per crest and at
most once per `step_delay_ms`. The user is considered stopped once no step has
been accepted for `step_timeout_ms`.
"""

from __future__ import annotations

from backend.core.types import AccelSample


class StepDetector:
    """Rising-edge peak detector with debounce and inactivity timeout.

    Not thread-safe: calls must be serialized by the caller and arrive in
    chronological order.
    """

    def __init__(
        self,
        step_threshold: float = 1.8,
        step_delay_ms: int = 500,
        step_timeout_ms: int = 2000,
    ) -> None:
        if step_threshold <= 0:
            raise ValueError("step_threshold must be > 0")
        if step_delay_ms <= 0:
            raise ValueError("step_delay_ms must be > 0")
        if step_timeout_ms <= 0:
            raise ValueError("step_timeout_ms must be > 0")
        self.step_threshold = float(step_threshold)
        self.step_delay_ms = int(step_delay_ms)
        self.step_timeout_ms = int(step_timeout_ms)

        # None until the first accepted step.
        self._last_step_timestamp_ms: int | None = None
        self._is_peak = False
        self._last_accel = 0.0
        self._is_walking = False
        self._last_sample_timestamp_ms: int | None = None

    @property
    def is_walking(self) -> bool:
        return self._is_walking

    def process(self, timestamp_ms: int, vertical_accel: float) -> None:
        """Update the gait state from one sensor sample.

        Raises:
            ValueError: if `timestamp_ms` is earlier than the previous sample's.
        """

        if self._last_sample_timestamp_ms is not None and timestamp_ms < self._last_sample_timestamp_ms:
            raise ValueError(
                f"timestamp {timestamp_ms} precedes previous sample {self._last_sample_timestamp_ms}"
            )
        self._last_sample_timestamp_ms = timestamp_ms

        if vertical_accel > self._last_accel and vertical_accel > self.step_threshold and not self._is_peak:
            self._is_peak = True
            if (
                self._last_step_timestamp_ms is None
                or timestamp_ms - self._last_step_timestamp_ms > self.step_delay_ms
            ):
                self._last_step_timestamp_ms = timestamp_ms
                self._is_walking = True
        elif vertical_accel < self._last_accel:
            # Falling side of the bounce: arm for the next crest.
            self._is_peak = False

        if (
            self._is_walking
            and self._last_step_timestamp_ms is not None
            and timestamp_ms - self._last_step_timestamp_ms > self.step_timeout_ms
        ):
            self._is_walking = False

        self._last_accel = vertical_accel

    def process_sample(self, sample: AccelSample) -> None:
        self.process(sample.timestamp_ms, sample.vertical_accel)
