"""Transcript watcher using watchfiles.

Re-runs the reducer whenever the watched transcript is added or modified and
hands the fresh state to a callback.
"""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Awaitable, Callable, Optional, Union

from watchfiles import awatch, Change

from ccstatus import config
from ccstatus.models import TranscriptState
from ccstatus.parsers.platforms.registry import parse_transcript_file

logger = logging.getLogger("ccstatus.watcher")

StateCallback = Callable[[TranscriptState], Union[None, Awaitable[None]]]


class TranscriptWatcher:
    """Watches one transcript file and reports its state after each change.

    The parent directory is watched rather than the file itself so that a
    transcript which does not exist yet is picked up once it is created.
    """

    def __init__(self, path: Path, on_state: StateCallback):
        self.path = Path(path).expanduser().resolve(strict=False)
        self._on_state = on_state
        self._stop_event: Optional[asyncio.Event] = None
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    def stop(self) -> None:
        self._running = False
        if self._stop_event is not None:
            self._stop_event.set()

    async def _emit(self) -> None:
        state = parse_transcript_file(self.path)
        result = self._on_state(state)
        if asyncio.iscoroutine(result):
            await result

    async def run(self) -> None:
        """Emit the current state, then one state per relevant change."""
        watch_dir = self.path.parent
        if not watch_dir.is_dir():
            logger.warning(f"Transcript directory does not exist: {watch_dir}")
            return

        self._running = True
        self._stop_event = asyncio.Event()
        await self._emit()
        logger.info(f"Watching transcript {self.path}")

        try:
            async for changes in awatch(
                watch_dir,
                stop_event=self._stop_event,
                debounce=config.WATCH_DEBOUNCE_MS,
                recursive=False,
            ):
                if not self._running:
                    break
                if self._is_relevant(changes):
                    await self._emit()
        except asyncio.CancelledError:
            logger.info("Transcript watcher cancelled")
        except Exception as e:
            logger.error(f"Transcript watcher error: {e}")
        finally:
            self._running = False

    def _is_relevant(self, changes: set[tuple[Change, str]]) -> bool:
        """True when the batch touches the watched transcript.

        Deletions also count: the reducer then reports an empty state.
        """
        for _change_type, path_str in changes:
            if Path(path_str).resolve(strict=False) == self.path:
                return True
        return False
