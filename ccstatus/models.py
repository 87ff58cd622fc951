"""Pydantic models for the reduced transcript state."""
from __future__ import annotations
from pydantic import BaseModel, Field
from typing import Literal, Optional

EntityStatus = Literal["running", "completed", "error"]


# ── Tool-related models ─────────────────────────────────────────────

class RunningTool(BaseModel):
    name: str
    target: Optional[str] = None


class ToolState(BaseModel):
    running: list[RunningTool] = Field(default_factory=list)
    completed: dict[str, int] = Field(default_factory=dict)


# ── Agent / skill models ────────────────────────────────────────────

class AgentEntry(BaseModel):
    agentType: str = "agent"
    status: EntityStatus = "running"
    startTime: Optional[str] = None
    endTime: Optional[str] = None


class SkillEntry(BaseModel):
    name: str
    status: EntityStatus = "running"


# ── Todo models ─────────────────────────────────────────────────────

class TodoState(BaseModel):
    current: Optional[str] = None
    done: int = 0
    total: int = 0


# ── Reducer output ──────────────────────────────────────────────────

class TranscriptState(BaseModel):
    tools: ToolState = Field(default_factory=ToolState)
    agents: list[AgentEntry] = Field(default_factory=list)
    skills: list[SkillEntry] = Field(default_factory=list)
    todos: TodoState = Field(default_factory=TodoState)

    def is_empty(self) -> bool:
        return (
            not self.tools.running
            and not self.tools.completed
            and not self.agents
            and not self.skills
            and self.todos.total == 0
        )


class StatusResponse(BaseModel):
    path: str
    exists: bool = False
    state: TranscriptState = Field(default_factory=TranscriptState)
    line: str = ""
