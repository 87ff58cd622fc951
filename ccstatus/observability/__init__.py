"""Observability helpers."""

from ccstatus.observability.otel import (
    initialize,
    shutdown,
    start_span,
    record_transcript_parse,
    record_malformed_lines,
)

__all__ = [
    "initialize",
    "shutdown",
    "start_span",
    "record_transcript_parse",
    "record_malformed_lines",
]
