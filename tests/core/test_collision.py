from __future__ import annotations

import pytest

from backend.core.risk.collision import CollisionRiskClassifier
from backend.core.types import BoundingBox, RiskLevel

W, H = 640, 480  # image center 320, tolerance 0.35 * 320 = 112 px


def centered_box(area_height: int, width: int = 200) -> BoundingBox:
    return BoundingBox(320 - width // 2, 0, 320 + width // 2, area_height)


def make() -> CollisionRiskClassifier:
    return CollisionRiskClassifier(screen_center_x=W // 2, danger_area_threshold=60000)


def test_cold_start_centered_below_threshold_is_none():
    clf = make()
    res = clf.assess_risk(centered_box(250), W, H)  # 200 * 250 = 50000
    assert res.risk is RiskLevel.NONE
    assert clf.previous_person_area == 0


def test_danger_seeds_baseline_then_smaller_box_resets():
    clf = make()
    big = centered_box(350)  # 70000
    res = clf.assess_risk(big, W, H)
    assert res.risk is RiskLevel.DANGER
    assert res.bbox is big
    assert clf.previous_person_area == 70000

    res = clf.assess_risk(centered_box(250), W, H)  # 50000
    assert res.risk is RiskLevel.NONE
    assert clf.previous_person_area == 0


def test_baseline_tracks_largest_area_during_danger_run():
    clf = make()
    clf.assess_risk(centered_box(350), W, H)  # 70000
    clf.assess_risk(centered_box(400), W, H)  # 80000
    assert clf.previous_person_area == 80000
    res = clf.assess_risk(centered_box(320), W, H)  # 64000, still too close
    assert res.risk is RiskLevel.DANGER
    assert clf.previous_person_area == 80000


def test_off_center_is_none_and_resets_regardless_of_area():
    clf = make()
    clf.assess_risk(centered_box(350), W, H)
    res = clf.assess_risk(BoundingBox(0, 0, 200, 480), W, H)  # center 100, area 96000
    assert res.risk is RiskLevel.NONE
    assert clf.previous_person_area == 0


def test_center_exactly_at_tolerance_is_not_centered():
    clf = make()
    box = BoundingBox(382, 0, 482, 1000)  # center 432 = 320 + 112
    assert clf.assess_risk(box, W, H).risk is RiskLevel.NONE
    box = BoundingBox(381, 0, 481, 1000)  # center 431
    assert clf.assess_risk(box, W, H).risk is RiskLevel.DANGER


def test_repeated_none_keeps_baseline_at_zero():
    clf = make()
    for _ in range(5):
        assert clf.assess_risk(centered_box(100), W, H).risk is RiskLevel.NONE
        assert clf.previous_person_area == 0


def test_area_equal_to_threshold_is_not_danger():
    clf = CollisionRiskClassifier(screen_center_x=320, danger_area_threshold=40000)
    assert clf.assess_risk(centered_box(200), W, H).risk is RiskLevel.NONE  # exactly 40000


def test_centering_uses_call_image_width_not_stored_center():
    clf = CollisionRiskClassifier(screen_center_x=100)
    # Centered for a 640 px frame even though the stored center is 100.
    assert clf.assess_risk(centered_box(350), W, H).risk is RiskLevel.DANGER
    assert clf.screen_center_x == 100


def test_shared_baseline_is_cleared_by_another_person():
    clf = make()
    clf.assess_risk(centered_box(350), W, H)
    clf.assess_risk(BoundingBox(0, 0, 50, 50), W, H)  # someone at the edge
    assert clf.previous_person_area == 0


def test_for_frame_binds_screen_center():
    clf = CollisionRiskClassifier.for_frame(1280, 720, danger_area_threshold=1000)
    assert clf.screen_center_x == 640
    assert clf.danger_area_threshold == 1000


@pytest.mark.parametrize("size", [(0, 480), (640, 0), (-1, 480)])
def test_rejects_non_positive_image_size(size):
    clf = make()
    with pytest.raises(ValueError):
        clf.assess_risk(centered_box(350), *size)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"screen_center_x": 0},
        {"screen_center_x": 320, "danger_area_threshold": 0},
        {"screen_center_x": 320, "center_tolerance_percent": 0.0},
    ],
)
def test_rejects_invalid_configuration(kwargs):
    with pytest.raises(ValueError):
        CollisionRiskClassifier(**kwargs)


def test_identical_inputs_are_deterministic():
    boxes = [centered_box(h) for h in (100, 350, 400, 250, 320, 380)] + [BoundingBox(0, 0, 10, 10)]
    a, b = make(), make()
    assert [a.assess_risk(x, W, H).risk for x in boxes] == [b.assess_risk(x, W, H).risk for x in boxes]
