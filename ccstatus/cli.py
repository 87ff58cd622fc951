#!/usr/bin/env python3
"""Print a one-line status summary for a Claude Code transcript.

Usage:
  claude-status ~/.claude/projects/<project>/<session>.jsonl
  claude-status <transcript> --json
  claude-status <transcript> --watch
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from ccstatus import config
from ccstatus.file_watcher import TranscriptWatcher
from ccstatus.models import TranscriptState
from ccstatus.parsers.platforms.registry import parse_transcript_file
from ccstatus.status_line import render_status_line

logger = logging.getLogger("ccstatus")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="claude-status",
        description="Summarize todos, skills, agents and tools from a Claude Code transcript.",
    )
    parser.add_argument("transcript_path", nargs="?", default="", help="Path to the session .jsonl transcript")
    parser.add_argument("--json", action="store_true", help="Print the reduced state as JSON")
    parser.add_argument("--watch", action="store_true", help="Re-print whenever the transcript changes")
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI colors")
    return parser


def _format(state: TranscriptState, as_json: bool, color: bool) -> str:
    if as_json:
        return state.model_dump_json()
    return render_status_line(state, color=color)


async def _watch(path: Path, as_json: bool, color: bool) -> int:
    last_output: Optional[str] = None

    def on_state(state: TranscriptState) -> None:
        nonlocal last_output
        output = _format(state, as_json, color)
        if output == last_output:
            return
        last_output = output
        print(output, flush=True)

    watcher = TranscriptWatcher(path, on_state)
    await watcher.run()
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    logging.basicConfig(level=getattr(logging, config.LOG_LEVEL, logging.WARNING))
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not args.transcript_path:
        parser.print_usage(sys.stderr)
        return 1

    path = Path(args.transcript_path).expanduser()
    color = not args.no_color

    if args.watch:
        try:
            return asyncio.run(_watch(path, args.json, color))
        except KeyboardInterrupt:
            return 0

    if not path.exists():
        logger.debug("Transcript does not exist yet: %s", path)
        return 0

    output = _format(parse_transcript_file(path), args.json, color)
    if output:
        print(output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
