"""Pydantic contracts for the task document core."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

import pydantic as pd

from md_task.constants import (
    DONE_MARKER,
    HIGH_SYMBOL,
    LOW_SYMBOL,
    MEDIUM_SYMBOL,
    PENDING_MARKER,
)


class Priority(str, Enum):
    """Task priority levels.

    Enum values are the lowercase names accepted on the command line and in
    configuration files. Each level is bound to a single glyph that is stored
    inline in the task line, directly after the checkbox marker.
    """

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def symbol(self) -> str:
        return _PRIORITY_SYMBOLS[self]

    @classmethod
    def from_symbol(cls, symbol: str) -> Optional["Priority"]:
        """Return the priority bound to a glyph, or None for an unknown glyph."""
        for priority, glyph in _PRIORITY_SYMBOLS.items():
            if glyph == symbol:
                return priority
        return None

    @classmethod
    def names(cls) -> List[str]:
        return [member.value for member in cls]


_PRIORITY_SYMBOLS = {
    Priority.HIGH: HIGH_SYMBOL,
    Priority.MEDIUM: MEDIUM_SYMBOL,
    Priority.LOW: LOW_SYMBOL,
}

PRIORITY_SYMBOLS = tuple(_PRIORITY_SYMBOLS.values())


class LineKind(Enum):
    """Kinds of lines recognized in a task document."""

    TASK_LIST_HEADER = "task_list_header"
    ARCHIVE_HEADER = "archive_header"
    PENDING = "pending"
    DONE = "done"
    OTHER = "other"


class ParsedLine(pd.BaseModel):
    """A single classified document line.

    Only checklist lines carry ``priority`` and ``text``. The original line is
    always kept in ``raw`` so that lines which are not rewritten pass through
    byte for byte.
    """

    kind: LineKind
    raw: str
    priority: Optional[Priority] = None
    text: str = ""

    model_config = pd.ConfigDict(frozen=True)

    @property
    def is_task(self) -> bool:
        return self.kind in (LineKind.PENDING, LineKind.DONE)

    @property
    def marker(self) -> str:
        if self.kind == LineKind.PENDING:
            return PENDING_MARKER
        if self.kind == LineKind.DONE:
            return DONE_MARKER
        return ""

    def render(self) -> str:
        """Rebuild the line from its fields.

        Non-task lines are returned unchanged.
        """
        if not self.is_task:
            return self.raw
        if self.priority is None:
            return f"{self.marker}{self.text}"
        return f"{self.marker}{self.priority.symbol} {self.text}"

    def display_text(self) -> str:
        """Task content without the checkbox marker, as shown by ``list``."""
        if not self.is_task:
            return self.raw
        return self.render()[len(self.marker) :]


class TaskError(Enum):
    """Logical failures reported by the mutation engine."""

    TASK_NOT_FOUND = "task_not_found"
    COMPLETED_TASK_NOT_FOUND = "completed_task_not_found"
    INVALID_PRIORITY = "invalid_priority"


class MutationResult(pd.BaseModel):
    """Outcome of a single document mutation.

    Attributes:
        ok: Whether the mutation was applied
        lines: The resulting document lines (an unchanged copy on failure)
        error: Failure kind when ``ok`` is False
        message: Human-readable summary of what happened
        count: Number of tasks affected by the mutation
    """

    ok: bool
    lines: List[str] = pd.Field(default_factory=list)
    error: Optional[TaskError] = None
    message: str = ""
    count: int = 0

    @classmethod
    def success(cls, lines: List[str], message: str = "", count: int = 1) -> "MutationResult":
        return cls(ok=True, lines=lines, message=message, count=count)

    @classmethod
    def failure(cls, lines: List[str], error: TaskError, message: str) -> "MutationResult":
        return cls(ok=False, lines=list(lines), error=error, message=message, count=0)


class NormalizeResult(pd.BaseModel):
    lines: List[str]
    modified: bool = False
    steps: List[str] = pd.Field(default_factory=list)


class ListingEntry(pd.BaseModel):
    number: int
    priority: Optional[Priority] = None
    text: str

    model_config = pd.ConfigDict(frozen=True)


class TaskListing(pd.BaseModel):
    """Read-only projection of a task document for display."""

    pending: List[ListingEntry] = pd.Field(default_factory=list)
    done: List[ListingEntry] = pd.Field(default_factory=list)
    archived: List[ListingEntry] = pd.Field(default_factory=list)

    @property
    def pending_count(self) -> int:
        return len(self.pending)

    @property
    def done_count(self) -> int:
        return len(self.done)

    @property
    def archived_count(self) -> int:
        return len(self.archived)

    @property
    def is_empty(self) -> bool:
        return not (self.pending or self.done or self.archived)
