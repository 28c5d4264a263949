"""HTTP/WS entrypoint for the phone and glasses clients.

Run with `python -m backend.api.main` during development, or point any ASGI
server at `backend.api.main:app`.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.api.routes import config, health, session, stats, stream


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    """Close the active safety session on shutdown."""

    from backend.api.services.state import stop_engine

    yield
    stop_engine()


app = FastAPI(title="WalkGuard API", lifespan=lifespan)

# Clients connect from the companion app's webview and from dev dashboards.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for module in (health, config, session, stats, stream):
    app.include_router(module.router)


if __name__ == "__main__":
    uvicorn.run("backend.api.main:app", host="0.0.0.0", port=8000, reload=True)
