# =============================================================================
# core/models.py  —  Data Models (the "nouns" of the system)
# =============================================================================
#
# These dataclasses define the *shape* of every record the tool server keeps
# and every answer a tool hands back.  They carry almost no behavior — they're
# structured bags of data that the stores mutate and the tools format.
#
# WHY DATACLASSES?
#   - They auto-generate __init__, __repr__, and __eq__ for free.
#   - They serve as living documentation: reading these classes tells you
#     exactly what data the server remembers between tool calls.
#   - FastMCP serializes them for us, so a tool can return a ToolResult and
#     the client receives clean JSON.
# =============================================================================

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal, Optional

Priority = Literal["low", "medium", "high"]
TaskStatus = Literal["all", "pending", "completed"]

# Higher rank sorts first in task listings.
PRIORITY_RANK: dict[str, int] = {"high": 3, "medium": 2, "low": 1}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# -----------------------------------------------------------------------------
# Task — one to-do item managed by the task tools
# -----------------------------------------------------------------------------
@dataclass
class Task:
    """A task tracked by the server.

    The id is either supplied by the caller or generated by the store.
    `updated_at` stays None until the task is changed after creation.
    """

    id: str
    title: str
    description: str
    completed: bool = False
    priority: Priority = "medium"
    tags: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: Optional[datetime] = None


# -----------------------------------------------------------------------------
# EnvironmentVariable — a key/value pair managed by the env tools
# -----------------------------------------------------------------------------
@dataclass
class EnvironmentVariable:
    key: str
    value: str
    description: Optional[str] = None
    is_secret: bool = False
    created_at: datetime = field(default_factory=utcnow)
    updated_at: Optional[datetime] = None


# -----------------------------------------------------------------------------
# ToolResult — the uniform envelope EVERY tool returns
# -----------------------------------------------------------------------------
# Two fields, nothing more:
#   - success: did the operation do what was asked?
#   - text:    a human-readable body the agent can show or reason about
#
# "Not found" is a result, not an exception: a lookup of a missing task comes
# back as success=False with an explanation.  Only genuinely unexpected
# faults escape a handler.
# -----------------------------------------------------------------------------
@dataclass
class ToolResult:
    success: bool
    text: str

    @classmethod
    def ok(cls, text: str) -> "ToolResult":
        return cls(success=True, text=text)

    @classmethod
    def error(cls, text: str) -> "ToolResult":
        return cls(success=False, text=f"Error: {text}")


# -----------------------------------------------------------------------------
# EmailMessage / SendResult — what goes into and comes out of the mailer
# -----------------------------------------------------------------------------
@dataclass
class EmailMessage:
    to: list[str]
    subject: str
    text: Optional[str] = None
    html: Optional[str] = None
    cc: list[str] = field(default_factory=list)
    bcc: list[str] = field(default_factory=list)


@dataclass
class SendResult:
    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None
