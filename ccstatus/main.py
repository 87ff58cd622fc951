"""ccstatus FastAPI app — serves transcript status summaries over HTTP."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from ccstatus.routers.status import status_router
from ccstatus.observability import initialize as initialize_observability, shutdown as shutdown_observability

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("ccstatus")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle."""
    logger.info("ccstatus API starting up")
    initialize_observability(app)
    yield
    logger.info("ccstatus API shutting down")
    shutdown_observability(app)


app = FastAPI(
    title="ccstatus API",
    description="Current todos, skills, agents and tools for Claude Code transcripts",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(status_router)


@app.get("/api/health")
def health():
    """Health check endpoint."""
    return {"status": "ok"}
