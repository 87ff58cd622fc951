"""Classify Claude Code transcript records into reducer events."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Union

_AGENT_NOTIFICATION_PREFIX = "<agent-notification>"

StartKind = Literal["todo", "agent", "skill", "tool"]

# Tool names that are tracked outside the regular tool map.
_START_KIND_BY_TOOL: dict[str, StartKind] = {
    "TodoWrite": "todo",
    "Task": "agent",
    "Skill": "skill",
}


@dataclass
class ToolStart:
    tool_use_id: str
    name: str
    kind: StartKind
    input: Any = None


@dataclass
class ToolFinish:
    tool_use_id: str
    is_error: bool = False


BlockEvent = Union[ToolStart, ToolFinish]


@dataclass
class ClassifiedRecord:
    record_type: str = ""
    timestamp: str | None = None
    is_top_level: bool = True
    is_turn_start: bool = False
    is_turn_confirmation: bool = False
    todos: list[Any] | None = None
    events: list[BlockEvent] = field(default_factory=list)


def _message_content(record: dict[str, Any]) -> Any:
    message = record.get("message")
    if not isinstance(message, dict):
        return None
    return message.get("content")


def _has_tool_result_block(content: Any) -> bool:
    if not isinstance(content, list):
        return False
    return any(isinstance(block, dict) and block.get("type") == "tool_result" for block in content)


def _is_synthetic_user_record(record: dict[str, Any]) -> bool:
    """True for user records that were injected rather than typed by the user."""
    content = _message_content(record)
    if _has_tool_result_block(content):
        return True
    if record.get("isMeta") is True:
        return True
    # Skill content injected in reply to a Skill tool call.
    if "sourceToolUseID" in record:
        return True
    if isinstance(content, str) and content.startswith(_AGENT_NOTIFICATION_PREFIX):
        return True
    return False


def _classify_block(block: Any) -> BlockEvent | None:
    if not isinstance(block, dict):
        return None
    block_type = block.get("type")

    if block_type == "tool_use":
        tool_use_id = block.get("id")
        name = block.get("name")
        if not isinstance(tool_use_id, str) or not isinstance(name, str):
            return None
        if not tool_use_id or not name:
            return None
        return ToolStart(
            tool_use_id=tool_use_id,
            name=name,
            kind=_START_KIND_BY_TOOL.get(name, "tool"),
            input=block.get("input"),
        )

    if block_type == "tool_result":
        tool_use_id = block.get("tool_use_id")
        if not isinstance(tool_use_id, str) or not tool_use_id:
            return None
        return ToolFinish(tool_use_id=tool_use_id, is_error=block.get("is_error") is True)

    return None


def classify_record(record: dict[str, Any]) -> ClassifiedRecord:
    """Derive the turn signals and block events carried by one record.

    Records tagged with ``agentId`` come from a sub-agent's own transcript and
    never take part in turn detection, but their block events are still
    reported so the tracker can merge them.
    """
    raw_type = record.get("type")
    record_type = raw_type if isinstance(raw_type, str) else ""
    raw_ts = record.get("timestamp")
    timestamp = raw_ts if isinstance(raw_ts, str) else None
    is_top_level = "agentId" not in record

    classified = ClassifiedRecord(
        record_type=record_type,
        timestamp=timestamp,
        is_top_level=is_top_level,
    )

    if is_top_level:
        if record_type == "user":
            classified.is_turn_start = not _is_synthetic_user_record(record)
        elif record_type == "assistant":
            classified.is_turn_confirmation = True

    todos = record.get("todos")
    if isinstance(todos, list):
        classified.todos = todos

    content = _message_content(record)
    if isinstance(content, list):
        for block in content:
            event = _classify_block(block)
            if event is not None:
                classified.events.append(event)

    return classified
