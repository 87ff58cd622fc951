"""Reduce a Claude Code JSONL transcript to its current TranscriptState."""
from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any, Iterable, Iterator

from ccstatus import config
from ccstatus.models import ToolState, TranscriptState
from ccstatus.observability import record_malformed_lines, record_transcript_parse, start_span
from ccstatus.parsers.platforms.claude_code.classifier import classify_record
from ccstatus.parsers.platforms.claude_code.tracker import EntityTracker, TurnBoundary

logger = logging.getLogger("ccstatus.parser")


def _keep_recent(items: list[Any], limit: int) -> list[Any]:
    if limit <= 0:
        return []
    if len(items) <= limit:
        return items
    return items[-limit:]


def limit_recent(tracker: EntityTracker) -> TranscriptState:
    """Snapshot the tracker, keeping only the most recently started entries."""
    return TranscriptState(
        tools=ToolState(
            running=_keep_recent(list(tracker.running_tools.values()), config.MAX_RUNNING_TOOLS),
            completed=dict(tracker.completed_tools),
        ),
        agents=_keep_recent(list(tracker.agents.values()), config.MAX_AGENTS),
        skills=_keep_recent(list(tracker.skills.values()), config.MAX_SKILLS),
        todos=tracker.todos,
    )


def _decode_line(raw: bytes) -> dict[str, Any] | None:
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        return None
    if not text.strip():
        return None
    try:
        record = json.loads(text)
    except json.JSONDecodeError:
        return None
    return record if isinstance(record, dict) else None


def _iter_lines(path: Path) -> Iterator[bytes]:
    try:
        with path.open("rb") as handle:
            for raw in handle:
                yield raw
    except OSError as exc:
        logger.debug("Transcript unreadable (%s): %s", path, exc)


def reduce_records(lines: Iterable[bytes]) -> tuple[TranscriptState, int]:
    """Fold raw JSONL lines into a state; also returns the skipped-line count."""
    tracker = EntityTracker()
    turns = TurnBoundary()
    malformed = 0

    for line_no, raw in enumerate(lines, start=1):
        record = _decode_line(raw)
        if record is None:
            if raw.strip():
                malformed += 1
                logger.debug("Skipping malformed transcript line %d", line_no)
            continue

        classified = classify_record(record)
        turns.observe(classified, tracker)
        tracker.apply(classified)

    return limit_recent(tracker), malformed


def parse_transcript_file(path: Path) -> TranscriptState:
    """Scan a transcript from start to end and return its current state.

    A missing or unreadable file yields an empty state.
    """
    started = time.perf_counter()
    with start_span("ccstatus.parse_transcript", {"transcript.path": str(path)}):
        if not path.is_file():
            logger.debug("Transcript not found: %s", path)
            record_transcript_parse("missing", (time.perf_counter() - started) * 1000)
            return TranscriptState()

        state, malformed = reduce_records(_iter_lines(path))

    record_malformed_lines(malformed)
    record_transcript_parse("success", (time.perf_counter() - started) * 1000)
    return state
