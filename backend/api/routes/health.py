"""Liveness endpoint; answers without touching the safety session."""

from fastapi import APIRouter

router = APIRouter()


@router.get("/health")
def health() -> dict[str, str]:
    """Liveness probe polled by the phone and glasses clients before streaming."""

    return {"status": "ok"}
