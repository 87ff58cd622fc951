"""Transcript parser registry for platform-specific implementations."""
from __future__ import annotations

from pathlib import Path

from ccstatus.models import TranscriptState
from ccstatus.parsers.platforms.claude_code import parser as claude_code_parser


def parse_transcript_file(path: Path) -> TranscriptState:
    """Reduce a transcript by delegating to the matching platform parser.

    Claude Code is currently the only platform; every path is routed to its
    JSONL reducer regardless of suffix, since live transcripts are sometimes
    symlinked or copied under other names.
    """
    return claude_code_parser.parse_transcript_file(Path(path))
