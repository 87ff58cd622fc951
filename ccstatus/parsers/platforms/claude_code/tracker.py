"""Entity tracking for transcript reduction.

``EntityTracker`` owns the id-keyed maps for running tools, agents and
skills, the completed-tool counters and the todo summary. Python dicts keep
insertion order, which is what recency limiting relies on: the last entries
of each map are the most recently started ones.

``TurnBoundary`` watches classified records and clears stale activity from
the tracker once a new user turn is confirmed by the assistant's reply.
"""
from __future__ import annotations

from collections import Counter
from pathlib import PurePosixPath
from typing import Any

from ccstatus.models import AgentEntry, RunningTool, SkillEntry, TodoState
from ccstatus.parsers.platforms.claude_code.classifier import ClassifiedRecord, ToolFinish, ToolStart

_TRUNCATE_SUFFIX = "..."

_FILE_TOOLS = {"Read", "Write", "Edit", "NotebookEdit"}
_PATTERN_TOOLS = {"Glob", "Grep"}
_WEB_TOOLS = {"WebFetch", "WebSearch"}

_PATTERN_MAX_LEN = 20
_COMMAND_MAX_LEN = 25
_DESCRIPTION_MAX_LEN = 30
_WEB_MAX_LEN = 25


def truncate(value: str, max_len: int) -> str:
    if len(value) <= max_len:
        return value
    return value[: max(0, max_len - len(_TRUNCATE_SUFFIX))] + _TRUNCATE_SUFFIX


def _basename(path: str) -> str:
    return PurePosixPath(path).name or path


def _first_str(payload: dict[str, Any], *keys: str) -> str | None:
    # The first key present wins, even when its value is not a string.
    for key in keys:
        if key in payload:
            value = payload[key]
            return value if isinstance(value, str) else None
    return None


def extract_target(name: str, tool_input: Any) -> str | None:
    """Short human-readable summary of a tool call's arguments."""
    if not isinstance(tool_input, dict):
        return None

    if name in _FILE_TOOLS:
        path = _first_str(tool_input, "file_path", "notebook_path")
        return _basename(path) if path is not None else None
    if name in _PATTERN_TOOLS:
        pattern = _first_str(tool_input, "pattern")
        return truncate(pattern, _PATTERN_MAX_LEN) if pattern is not None else None
    if name == "Bash":
        command = _first_str(tool_input, "command")
        return truncate(command, _COMMAND_MAX_LEN) if command is not None else None
    if name == "Task":
        description = _first_str(tool_input, "description")
        return truncate(description, _DESCRIPTION_MAX_LEN) if description is not None else None
    if name in _WEB_TOOLS:
        location = _first_str(tool_input, "url", "query")
        return truncate(location, _WEB_MAX_LEN) if location is not None else None
    return None


def summarize_todos(items: list[Any]) -> TodoState:
    """Build a todo summary from a complete todo-list snapshot."""
    todos = [item for item in items if _is_todo_item(item)]
    current = next(
        (item.get("activeForm") for item in todos if item.get("status") == "in_progress"),
        None,
    )
    return TodoState(
        current=current,
        done=sum(1 for item in todos if item.get("status") == "completed"),
        total=len(todos),
    )


def _is_todo_item(item: Any) -> bool:
    if not isinstance(item, dict):
        return False
    for key in ("status", "activeForm"):
        value = item.get(key)
        if value is not None and not isinstance(value, str):
            return False
    return True


class EntityTracker:
    """Mutable reduction state threaded through a single transcript scan."""

    def __init__(self) -> None:
        self.running_tools: dict[str, RunningTool] = {}
        self.agents: dict[str, AgentEntry] = {}
        self.skills: dict[str, SkillEntry] = {}
        self.completed_tools: Counter[str] = Counter()
        self.todos = TodoState()

    # ── start events ────────────────────────────────────────────────

    def apply_start(self, event: ToolStart, timestamp: str | None) -> None:
        if event.kind == "todo":
            self._start_todo(event)
        elif event.kind == "agent":
            self._start_agent(event, timestamp)
        elif event.kind == "skill":
            self._start_skill(event)
        else:
            self._insert(self.running_tools, event.tool_use_id, RunningTool(
                name=event.name,
                target=extract_target(event.name, event.input),
            ))

    def _start_todo(self, event: ToolStart) -> None:
        if not isinstance(event.input, dict):
            return
        items = event.input.get("todos")
        if isinstance(items, list):
            self.update_todos(items)

    def _start_agent(self, event: ToolStart, timestamp: str | None) -> None:
        if event.input is None:
            return
        payload = event.input if isinstance(event.input, dict) else {}
        agent_type = payload.get("subagent_type")
        self._insert(self.agents, event.tool_use_id, AgentEntry(
            agentType=agent_type if isinstance(agent_type, str) else "agent",
            status="running",
            startTime=timestamp,
        ))

    def _start_skill(self, event: ToolStart) -> None:
        if event.input is None:
            return
        payload = event.input if isinstance(event.input, dict) else {}
        raw_name = payload.get("skill")
        skill_name = raw_name if isinstance(raw_name, str) else "skill"

        # One entry per skill name: a new invocation supersedes older ones.
        stale_ids = [key for key, entry in self.skills.items() if entry.name == skill_name]
        for key in stale_ids:
            del self.skills[key]
        self._insert(self.skills, event.tool_use_id, SkillEntry(name=skill_name, status="running"))

    @staticmethod
    def _insert(target: dict[str, Any], key: str, value: Any) -> None:
        target.pop(key, None)
        target[key] = value

    # ── finish events ───────────────────────────────────────────────

    def apply_finish(self, event: ToolFinish, timestamp: str | None) -> bool:
        """Close the entity started with ``event.tool_use_id``.

        Returns False when no tracked entity matches.
        """
        status = "error" if event.is_error else "completed"

        agent = self.agents.get(event.tool_use_id)
        if agent is not None:
            agent.status = status
            agent.endTime = timestamp
            return True

        skill = self.skills.get(event.tool_use_id)
        if skill is not None:
            skill.status = status
            return True

        tool = self.running_tools.pop(event.tool_use_id, None)
        if tool is not None:
            self.completed_tools[tool.name] += 1
            return True

        return False

    # ── todos / resets ──────────────────────────────────────────────

    def update_todos(self, items: list[Any]) -> None:
        self.todos = summarize_todos(items)

    def reset_turn(self) -> None:
        """Drop activity from the previous turn, keeping background agents."""
        self.running_tools.clear()
        self.skills.clear()
        self.completed_tools.clear()
        self.agents = {key: agent for key, agent in self.agents.items() if agent.status == "running"}

    def apply(self, record: ClassifiedRecord) -> None:
        if record.todos is not None:
            self.update_todos(record.todos)
        for event in record.events:
            if isinstance(event, ToolStart):
                self.apply_start(event, record.timestamp)
            else:
                self.apply_finish(event, record.timestamp)


class TurnBoundary:
    """Two-state machine: idle, or waiting for the reply to a new user turn."""

    def __init__(self) -> None:
        self.pending_reset = False

    def observe(self, record: ClassifiedRecord, tracker: EntityTracker) -> bool:
        """Advance on one record; returns True when the tracker was reset."""
        if record.is_turn_start:
            self.pending_reset = True
            return False
        if record.is_turn_confirmation and self.pending_reset:
            tracker.reset_turn()
            self.pending_reset = False
            return True
        return False
