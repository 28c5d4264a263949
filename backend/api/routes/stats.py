"""Stats endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from backend.api.schemas.models import StatsSchema
from backend.api.services.engine import SafetyEngine
from backend.api.services.state import get_engine

router = APIRouter()


@router.get("/stats", response_model=StatsSchema)
def stats(engine: SafetyEngine = Depends(get_engine)) -> StatsSchema:
    """Return high-level session statistics."""

    assessment = engine.latest_assessment()
    if assessment is None:
        return StatsSchema(
            walking=engine.walking(),
            samples_processed=engine.samples_processed,
            frames_processed=engine.frames_processed,
            error=engine.last_error,
        )
    return StatsSchema(
        walking=engine.walking(),
        samples_processed=engine.samples_processed,
        frames_processed=engine.frames_processed,
        last_frame_id=assessment.frame_id,
        worst_risk=assessment.worst_risk,
        haptic=assessment.haptic,
        error=engine.last_error,
    )
