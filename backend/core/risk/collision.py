"""Collision risk for a single detected person.

A person is only a risk when their box is horizontally centered in the frame,
i.e. in the walking path. A centered box larger than `danger_area_threshold`
is DANGER on its own. Below that, the classifier remembers the largest area
seen during the current run of risky frames and reports WARNING while the
box keeps growing (the person is approaching). Any NONE result wipes that
memory.
"""

from __future__ import annotations

from typing import Any

from backend.core.types import BoundingBox, DetectionResult, RiskLevel


class CollisionRiskClassifier:
    """Classify person boxes into NONE / WARNING / DANGER.

    One instance holds a single hysteresis slot shared by every call, whatever
    person the box belongs to.
    """

    def __init__(
        self,
        screen_center_x: int,
        danger_area_threshold: int = 60000,
        center_tolerance_percent: float = 0.35,
    ) -> None:
        if screen_center_x <= 0:
            raise ValueError("screen_center_x must be > 0")
        if danger_area_threshold <= 0:
            raise ValueError("danger_area_threshold must be > 0")
        if center_tolerance_percent <= 0:
            raise ValueError("center_tolerance_percent must be > 0")
        # Kept for reference only; centering uses each call's image width.
        self._screen_center_x = int(screen_center_x)
        self.danger_area_threshold = int(danger_area_threshold)
        self.center_tolerance_percent = float(center_tolerance_percent)
        self._previous_person_area = 0

    @classmethod
    def for_frame(cls, image_width: int, image_height: int, **kwargs: Any) -> CollisionRiskClassifier:
        """Create a classifier bound to the center of the first analysed frame."""

        _check_image_size(image_width, image_height)
        return cls(screen_center_x=image_width // 2, **kwargs)

    @property
    def screen_center_x(self) -> int:
        return self._screen_center_x

    @property
    def previous_person_area(self) -> int:
        return self._previous_person_area

    def assess_risk(self, box: BoundingBox, image_width: int, image_height: int) -> DetectionResult:
        """Assess one person box and update the approach baseline.

        Raises:
            ValueError: if the image width or height is not positive.
        """

        _check_image_size(image_width, image_height)

        box_center_x = box.center_x
        box_area = box.area
        image_center_x = image_width // 2
        center_tolerance_pixels = image_center_x * self.center_tolerance_percent
        is_centered = abs(box_center_x - image_center_x) < center_tolerance_pixels

        risk = RiskLevel.NONE
        if is_centered:
            is_too_close = box_area > self.danger_area_threshold
            is_getting_closer = box_area > self._previous_person_area and self._previous_person_area > 0
            if is_too_close:
                risk = RiskLevel.DANGER
            elif is_getting_closer:
                risk = RiskLevel.WARNING

        if risk is RiskLevel.NONE:
            self._previous_person_area = 0
        elif box_area > self._previous_person_area:
            self._previous_person_area = box_area

        return DetectionResult(bbox=box, risk=risk)


def _check_image_size(image_width: int, image_height: int) -> None:
    if image_width <= 0 or image_height <= 0:
        raise ValueError(f"image size must be positive, got {image_width}x{image_height}")
