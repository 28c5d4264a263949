from __future__ import annotations

import pytest

from backend.core.gait.step_detector import StepDetector
from backend.core.types import AccelSample


def _feed(detector: StepDetector, samples: list[tuple[int, float]]) -> list[bool]:
    out = []
    for t, a in samples:
        detector.process(t, a)
        out.append(detector.is_walking)
    return out


def test_walking_onset_on_first_peak_after_falling_sample():
    det = StepDetector(step_threshold=1.8, step_delay_ms=500, step_timeout_ms=2000)
    det.process(0, -0.5)  # falling
    assert det.is_walking is False
    det.process(0, 2.0)
    assert det.is_walking is True


def test_peak_at_realistic_device_timestamp_is_accepted():
    det = StepDetector()
    det.process(1_700_000_000_000, 2.5)
    assert det.is_walking is True


def test_below_threshold_bounce_is_not_a_step():
    det = StepDetector(step_threshold=1.8)
    assert _feed(det, [(100, 0.5), (200, 1.7), (300, 0.2), (400, 1.79)]) == [False] * 4


def test_debounced_peak_does_not_move_last_step_time():
    det = StepDetector(step_threshold=1.8, step_delay_ms=500, step_timeout_ms=2000)
    _feed(det, [(0, -0.5), (0, 2.0), (150, 0.0)])
    det.process(300, 2.0)  # within step_delay_ms of the first step
    assert det.is_walking is True
    det.process(450, 0.0)
    det.process(600, 2.0)  # accepted only if the last step is still t=0
    # 2500 - 600 = 1900 <= timeout; had t=300 been counted, t=600 would have
    # been debounced and 2500 - 300 > 2000 would stop walking.
    det.process(2500, 1.0)
    assert det.is_walking is True


def test_timeout_stops_walking():
    det = StepDetector(step_threshold=1.8, step_delay_ms=500, step_timeout_ms=2000)
    _feed(det, [(0, -0.5), (0, 2.0), (150, 0.0), (600, 2.0)])
    assert det.is_walking is True
    det.process(2600, 0.5)  # elapsed exactly 2000: not yet
    assert det.is_walking is True
    det.process(3000, 0.5)
    assert det.is_walking is False


def test_single_peak_per_crest_while_signal_keeps_rising():
    det = StepDetector(step_threshold=1.8, step_delay_ms=100, step_timeout_ms=1000)
    det.process(0, 2.0)
    # Still rising well past the delay, but the peak flag blocks a new step,
    # so the last step stays at t=0 and the timeout fires.
    det.process(500, 2.5)
    det.process(1001, 3.0)
    assert det.is_walking is False


def test_flat_signal_keeps_peak_flag():
    det = StepDetector(step_threshold=1.8, step_delay_ms=100, step_timeout_ms=5000)
    det.process(0, 2.0)
    det.process(200, 2.0)  # flat: still in the same crest
    det.process(400, 2.5)  # rising but peak never cleared
    det.process(5300, 2.5)
    assert det.is_walking is False


def test_non_peak_samples_never_stop_walking_before_timeout():
    det = StepDetector(step_timeout_ms=2000)
    det.process(0, 2.0)
    walking = _feed(det, [(t, -1.0 if t % 200 else 1.0) for t in range(100, 2001, 100)])
    assert all(walking)


def test_decreasing_timestamp_is_rejected_without_state_change():
    det = StepDetector()
    det.process(1000, 2.0)
    with pytest.raises(ValueError):
        det.process(999, -1.0)
    det.process(1000, 1.0)
    assert det.is_walking is True


def test_process_sample_delegates():
    det = StepDetector()
    det.process_sample(AccelSample(timestamp_ms=10, vertical_accel=3.0))
    assert det.is_walking is True


@pytest.mark.parametrize(
    "kwargs",
    [
        {"step_threshold": 0.0},
        {"step_threshold": -1.0},
        {"step_delay_ms": 0},
        {"step_timeout_ms": -5},
    ],
)
def test_rejects_non_positive_configuration(kwargs):
    with pytest.raises(ValueError):
        StepDetector(**kwargs)


def test_is_walking_is_read_only():
    det = StepDetector()
    with pytest.raises(AttributeError):
        det.is_walking = True  # type: ignore[misc]


def test_identical_inputs_are_deterministic():
    samples = [(t, (2.2 if (t // 100) % 5 == 0 else -0.4)) for t in range(0, 6000, 50)]
    a, b = StepDetector(), StepDetector()
    assert _feed(a, samples) == _feed(b, samples)
