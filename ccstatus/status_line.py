"""Render a TranscriptState as a one-line terminal status summary."""
from __future__ import annotations

from ccstatus import config
from ccstatus.date_utils import calculate_elapsed, now_seconds
from ccstatus.models import AgentEntry, SkillEntry, TodoState, ToolState, TranscriptState

# Catppuccin Mocha palette
GREEN = "\x1b[38;2;166;227;161m"
YELLOW = "\x1b[38;2;249;226;175m"
RED = "\x1b[38;2;243;139;168m"
LAVENDER = "\x1b[38;2;180;190;254m"
GRAY = "\x1b[0;37m"
RESET = "\x1b[0m"

# Nerd Font icons
ICON_SPINNER = "\uf110"
ICON_CHECK = "\uf00c"
ICON_ERROR = "\uf00d"
ICON_TODOS = "\uf14a"  # checkbox
ICON_AGENTS = "\uee0d"  # robot
ICON_TOOLS = "\uf0ad"  # wrench
ICON_SKILLS = "\uf0e7"  # lightning bolt

_STATUS_STYLE: dict[str, tuple[str, str]] = {
    "running": (YELLOW, ICON_SPINNER),
    "completed": (GREEN, ICON_CHECK),
    "error": (RED, ICON_ERROR),
}


class _Painter:
    def __init__(self, color: bool) -> None:
        self.color = color

    def __call__(self, code: str, text: str) -> str:
        if not self.color:
            return text
        return f"{code}{text}{RESET}"

    def status(self, status: str) -> str:
        code, icon = _STATUS_STYLE.get(status, _STATUS_STYLE["running"])
        return self(code, icon)

    def section(self, icon: str, body: str) -> str:
        return f"{self(LAVENDER, icon)} {body}"


def format_todos(todos: TodoState, paint: _Painter) -> str | None:
    if todos.total == 0:
        return None

    complete = todos.done == todos.total
    marker = paint.status("completed" if complete else "running")
    progress = f"{todos.done}/{todos.total}"

    if todos.current is not None:
        label = f"All done ({progress})" if complete else f"{todos.current} ({progress})"
    else:
        label = progress
    return paint.section(ICON_TODOS, f"{marker} {label}")


def format_skills(skills: list[SkillEntry], paint: _Painter) -> str | None:
    if not skills:
        return None
    parts = [f"{paint.status(skill.status)} {skill.name}" for skill in skills]
    return paint.section(ICON_SKILLS, " ".join(parts))


def format_agents(agents: list[AgentEntry], paint: _Painter, now: int) -> str | None:
    if not agents:
        return None
    parts = []
    for agent in agents:
        elapsed = calculate_elapsed(agent.startTime, agent.endTime, now)
        suffix = f" ({elapsed}s)" if elapsed > 0 else ""
        parts.append(f"{paint.status(agent.status)} {agent.agentType}{suffix}")
    return paint.section(ICON_AGENTS, " ".join(parts))


def format_tools(tools: ToolState, paint: _Painter) -> str | None:
    parts: list[str] = []

    # sorted() is stable, so equal counts keep first-completed order.
    completed = sorted(tools.completed.items(), key=lambda item: item[1], reverse=True)
    for name, count in completed[: config.MAX_COMPLETED_TOOLS_SHOWN]:
        suffix = f" ×{count}" if count > 1 else ""
        parts.append(f"{paint.status('completed')} {name}{suffix}")

    for tool in tools.running[: config.MAX_RUNNING_TOOLS_SHOWN]:
        target = f" {tool.target}" if tool.target is not None else ""
        parts.append(f"{paint.status('running')} {tool.name}{target}")

    if not parts:
        return None
    return paint.section(ICON_TOOLS, " ".join(parts))


def render_status_line(state: TranscriptState, *, color: bool = True, now: int | None = None) -> str:
    """Join the todo, skill, agent and tool sections; empty when nothing to show."""
    paint = _Painter(color)
    now_value = now_seconds() if now is None else now

    sections = [
        format_todos(state.todos, paint),
        format_skills(state.skills, paint),
        format_agents(state.agents, paint, now_value),
        format_tools(state.tools, paint),
    ]
    parts = [section for section in sections if section]
    if not parts:
        return ""
    return f" {paint(GRAY, '|')} ".join(parts)
