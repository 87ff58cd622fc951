import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from watchfiles import Change

from ccstatus import file_watcher
from ccstatus.file_watcher import TranscriptWatcher


def _tool_use_line(tool_id: str, name: str) -> str:
    return json.dumps({
        "type": "assistant",
        "message": {"content": [{"type": "tool_use", "id": tool_id, "name": name, "input": {}}]},
    })


class TranscriptWatcherTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(tmpdir.cleanup)
        self.root = Path(tmpdir.name)
        self.path = self.root / "session.jsonl"

    async def test_emits_initial_state_and_state_after_relevant_changes(self) -> None:
        self.path.write_text(_tool_use_line("toolu_1", "Read") + "\n", encoding="utf-8")
        states = []
        path = self.path

        async def fake_awatch(*paths, **kwargs):
            with path.open("a", encoding="utf-8") as handle:
                handle.write(_tool_use_line("toolu_2", "Grep") + "\n")
            yield {(Change.modified, str(path))}
            yield {(Change.added, str(path.parent / "other.jsonl"))}

        watcher = TranscriptWatcher(self.path, states.append)
        with patch.object(file_watcher, "awatch", fake_awatch):
            await watcher.run()

        self.assertEqual(len(states), 2)
        self.assertEqual([t.name for t in states[0].tools.running], ["Read"])
        self.assertEqual([t.name for t in states[1].tools.running], ["Read", "Grep"])
        self.assertFalse(watcher.is_running)

    async def test_missing_transcript_reports_empty_state(self) -> None:
        states = []

        async def fake_awatch(*paths, **kwargs):
            return
            yield

        watcher = TranscriptWatcher(self.path, states.append)
        with patch.object(file_watcher, "awatch", fake_awatch):
            await watcher.run()

        self.assertEqual(len(states), 1)
        self.assertTrue(states[0].is_empty())

    async def test_async_callbacks_are_awaited(self) -> None:
        self.path.write_text(_tool_use_line("toolu_1", "Bash") + "\n", encoding="utf-8")
        seen = []

        async def on_state(state):
            seen.append(state)

        async def fake_awatch(*paths, **kwargs):
            return
            yield

        with patch.object(file_watcher, "awatch", fake_awatch):
            await TranscriptWatcher(self.path, on_state).run()

        self.assertEqual(len(seen), 1)

    async def test_missing_directory_returns_without_watching(self) -> None:
        states = []
        watcher = TranscriptWatcher(self.root / "nope" / "session.jsonl", states.append)

        await watcher.run()

        self.assertEqual(states, [])

    def test_relevance_filter_matches_only_watched_file(self) -> None:
        watcher = TranscriptWatcher(self.path, lambda state: None)

        self.assertTrue(watcher._is_relevant({(Change.deleted, str(self.path))}))
        self.assertFalse(watcher._is_relevant({(Change.modified, str(self.root / "notes.md"))}))


if __name__ == "__main__":
    unittest.main()
