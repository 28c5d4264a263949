"""Push channel for the haptic driver."""

from __future__ import annotations

import asyncio
import logging
import time

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from backend.api.schemas.models import AssessmentSchema
from backend.api.services.engine import SafetyEngine
from backend.api.services.state import get_engine

router = APIRouter()

logger = logging.getLogger(__name__)

POLL_INTERVAL_S = 0.02


def _is_closed_send_error(exc: BaseException) -> bool:
    # Uvicorn raises this when an ASGI websocket.send happens after close.
    if not isinstance(exc, RuntimeError):
        return False
    msg = str(exc)
    return "Unexpected ASGI message 'websocket.send'" in msg or "response already completed" in msg


@router.websocket("/stream/haptics")
async def stream_haptics(ws: WebSocket):
    """Send every new frame assessment; reply to `{"type": "ping"}` with a pong.

    The session engine is looked up on each tick, so a reset or config change
    switches the socket over to the new session.
    """

    await ws.accept()

    async def _poll_and_handle_ping() -> None:
        try:
            msg = await asyncio.wait_for(ws.receive_json(), timeout=0.001)
        except asyncio.TimeoutError:
            return
        except WebSocketDisconnect:
            raise
        except Exception:
            # Not JSON (or a binary frame): ignore it.
            return
        if not isinstance(msg, dict) or msg.get("type") != "ping":
            return
        await ws.send_json({"type": "pong", "t": msg.get("t"), "server_time": time.time()})

    last_engine: SafetyEngine | None = None
    last_id = -1
    try:
        while True:
            await _poll_and_handle_ping()
            engine = get_engine()
            if engine is not last_engine:
                last_engine = engine
                last_id = -1

            assessment = engine.latest_assessment()
            if assessment is not None and assessment.frame_id != last_id:
                payload = AssessmentSchema.from_assessment(assessment).model_dump(mode="json")
                await ws.send_json(payload)
                last_id = assessment.frame_id

            await asyncio.sleep(POLL_INTERVAL_S)
    except WebSocketDisconnect:
        return
    except RuntimeError as e:
        if _is_closed_send_error(e):
            return
        logger.exception("Haptics websocket crashed")
        await ws.close(code=1011)
    except Exception:
        logger.exception("Haptics websocket crashed")
        await ws.close(code=1011)
