"""Transcript status API."""
from __future__ import annotations

import logging
from pathlib import Path

from fastapi import APIRouter, HTTPException, Query

from ccstatus.models import StatusResponse
from ccstatus.parsers.platforms.registry import parse_transcript_file
from ccstatus.status_line import render_status_line

logger = logging.getLogger("ccstatus.api")

status_router = APIRouter(prefix="/api/status", tags=["status"])


@status_router.get("", response_model=StatusResponse)
async def get_status(
    path: str = Query("", description="Absolute path to a session .jsonl transcript"),
    color: bool = Query(False, description="Include ANSI colors in the rendered line"),
):
    """Reduce a transcript and return its state with the rendered status line."""
    raw_path = (path or "").strip()
    if not raw_path:
        raise HTTPException(status_code=400, detail="Query parameter 'path' is required")

    transcript = Path(raw_path).expanduser()
    if not transcript.is_file():
        return StatusResponse(path=str(transcript), exists=False)

    state = parse_transcript_file(transcript)
    return StatusResponse(
        path=str(transcript),
        exists=True,
        state=state,
        line=render_status_line(state, color=color),
    )
