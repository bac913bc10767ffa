"""Task mutation engine.

Each operation takes the full document as a list of lines and returns a
``MutationResult`` holding a new list. Inputs are never modified in place and
nothing here touches storage. Expected failures (an index that does not name
a task) are reported through ``MutationResult.error`` rather than raised.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from md_task.constants import ARCHIVE_HEADER, PENDING_MARKER, TASK_LIST_HEADER
from md_task.core.classifier import (
    active_content_end,
    find_archive_header,
    is_blank,
    is_done,
    is_pending,
    is_task,
    set_checkbox,
    task_insert_index,
)
from md_task.core.contracts import LineKind, MutationResult, Priority, TaskError

logger = logging.getLogger(__name__)


def build_task_line(text: str, priority: Priority) -> str:
    """Build a pending checklist line carrying the priority glyph."""
    return f"{PENDING_MARKER}{priority.symbol} {text}"


def _find_nth(lines: Sequence[str], n: int, predicate) -> Optional[int]:
    """Return the index of the n-th (1-based) line matching ``predicate``."""
    if n < 1:
        return None
    count = 0
    for idx, line in enumerate(lines):
        if predicate(line):
            count += 1
            if count == n:
                return idx
    return None


def _archive_section(active: List[str], tasks: List[str]) -> List[str]:
    """Append a new archive section holding ``tasks`` after the active content."""
    body = active[: active_content_end(active)]
    return [*body, "", ARCHIVE_HEADER, "", *tasks]


def append_task(lines: Sequence[str], text: str, priority: Priority) -> MutationResult:
    """Append a new pending task.

    An empty document becomes the task list header, a blank line and the task.
    Otherwise the task is placed at the end of the Active region, in front of
    the archive section when there is one.
    """
    task_line = build_task_line(text, priority)
    if not lines:
        return MutationResult.success(
            [TASK_LIST_HEADER, "", task_line], message=f"Task added: {text}"
        )

    new_lines = list(lines)
    new_lines.insert(task_insert_index(new_lines), task_line)
    return MutationResult.success(new_lines, message=f"Task added: {text}")


def mark_done(lines: Sequence[str], n: int) -> MutationResult:
    """Mark the n-th pending task as done.

    Numbering counts pending tasks only, in document order, starting at 1.
    """
    idx = _find_nth(lines, n, is_pending)
    if idx is None:
        return MutationResult.failure(
            lines, TaskError.TASK_NOT_FOUND, f"Task number {n} not found."
        )

    new_lines = list(lines)
    new_lines[idx] = set_checkbox(new_lines[idx], LineKind.DONE)
    logger.debug("Marked line %d as done", idx + 1)
    return MutationResult.success(new_lines, message=f"Task {n} marked as done.")


def remove_task(lines: Sequence[str], n: int) -> MutationResult:
    """Delete the n-th pending task."""
    idx = _find_nth(lines, n, is_pending)
    if idx is None:
        return MutationResult.failure(
            lines, TaskError.TASK_NOT_FOUND, f"Task number {n} not found."
        )

    new_lines = list(lines)
    removed = new_lines.pop(idx)
    logger.debug("Removed line %d: %s", idx + 1, removed)
    return MutationResult.success(new_lines, message=f"Task {n} removed.")


def archive_task(lines: Sequence[str], n: int) -> MutationResult:
    """Move the n-th completed task to the top of the archive section.

    Numbering counts every done task in document order, including tasks that
    are already archived. The archived task becomes the first entry under the
    archive header, so single archives read newest first.
    """
    idx = _find_nth(lines, n, is_done)
    if idx is None:
        return MutationResult.failure(
            lines,
            TaskError.COMPLETED_TASK_NOT_FOUND,
            f"Completed task number {n} not found.",
        )

    new_lines = list(lines)
    task_line = new_lines.pop(idx)
    message = f"Task {n} archived successfully."

    archive_idx = find_archive_header(new_lines)
    if archive_idx is None:
        return MutationResult.success(_archive_section(new_lines, [task_line]), message=message)

    insert_at = archive_idx + 1
    if insert_at == len(new_lines):
        new_lines.extend(["", task_line])
        return MutationResult.success(new_lines, message=message)
    if is_blank(new_lines[insert_at]):
        insert_at += 1
    new_lines.insert(insert_at, task_line)
    return MutationResult.success(new_lines, message=message)


def archive_all(lines: Sequence[str]) -> MutationResult:
    """Move every completed task in the Active region into the archive.

    Tasks keep their relative order and are inserted right after the last
    task already in the archive section, ahead of any trailing free text.
    """
    archive_idx = find_archive_header(lines)
    stop = len(lines) if archive_idx is None else archive_idx

    active: List[str] = []
    moved: List[str] = []
    for line in lines[:stop]:
        if is_done(line):
            moved.append(line)
        else:
            active.append(line)

    if not moved:
        return MutationResult.success(
            list(lines), message="No completed tasks to archive.", count=0
        )

    message = f"Archived {len(moved)} completed task(s)."
    if archive_idx is None:
        return MutationResult.success(
            _archive_section(active, moved), message=message, count=len(moved)
        )

    archive = list(lines[stop:])
    last_task = max((i for i, line in enumerate(archive) if is_task(line)), default=None)
    if last_task is not None:
        archive[last_task + 1 : last_task + 1] = moved
    elif len(archive) > 2 and is_blank(archive[1]):
        archive[2:2] = moved
    else:
        # No entries yet: keep the canonical blank line before the first one.
        archive[1:1] = ["", *moved]
    return MutationResult.success([*active, *archive], message=message, count=len(moved))
