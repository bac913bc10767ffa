"""Canonical-form pass over a task document.

The normalizer runs after every mutating command when ``auto_format`` is
enabled. It is idempotent: a second pass over its own output changes nothing
and reports ``modified=False``.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Sequence

from md_task.constants import TASK_LIST_HEADER
from md_task.core.classifier import (
    classify_line,
    find_archive_header,
    is_blank,
    is_pending,
    task_insert_index,
)
from md_task.core.contracts import NormalizeResult, Priority

logger = logging.getLogger(__name__)

BACKFILL_PRIORITY = Priority.MEDIUM


def ensure_header(lines: List[str]) -> List[str]:
    """Prepend the task list header and a blank line if the document lacks it."""
    if lines and lines[0] == TASK_LIST_HEADER:
        return lines
    return [TASK_LIST_HEADER, "", *lines]


def collapse_blank_runs(lines: List[str]) -> List[str]:
    """Collapse every run of consecutive blank lines into a single blank line."""
    collapsed: List[str] = []
    prev_blank = False
    for line in lines:
        blank = is_blank(line)
        if blank and prev_blank:
            continue
        collapsed.append(line)
        prev_blank = blank
    return collapsed


def backfill_priorities(lines: List[str]) -> List[str]:
    """Give every unmarked checklist line the medium priority glyph."""
    result: List[str] = []
    for line in lines:
        parsed = classify_line(line)
        if parsed.is_task and parsed.priority is None:
            result.append(parsed.model_copy(update={"priority": BACKFILL_PRIORITY}).render())
        else:
            result.append(line)
    return result


def relocate_archived_pending(lines: List[str]) -> List[str]:
    """Move pending tasks found in the archive section back in front of it.

    Extracted tasks keep their original order and join the end of the active
    content, where ``append_task`` would place a new task.
    """
    archive_idx = find_archive_header(lines)
    if archive_idx is None:
        return lines

    archive: List[str] = []
    stray: List[str] = []
    for line in lines[archive_idx:]:
        if is_pending(line):
            stray.append(line)
        else:
            archive.append(line)
    if not stray:
        return lines

    active = lines[:archive_idx]
    end = task_insert_index(active)
    relocated = [*active[:end], *stray, *active[end:], *archive]
    return collapse_blank_runs(relocated)


def ensure_trailing_newline(lines: List[str]) -> List[str]:
    """Append a blank line so the persisted text ends with a newline."""
    if not lines or lines[-1] == "":
        return lines
    if is_blank(lines[-1]):
        # A whitespace-only last line is already the end of a blank run.
        return [*lines[:-1], ""]
    return [*lines, ""]


def normalize(
    lines: Sequence[str], *, allow_incomplete_in_archive: bool = False
) -> NormalizeResult:
    """Rewrite a document into canonical form.

    Steps, in order:
        1. header: guarantee the task list header on the first line
        2. blank_lines: collapse runs of blank lines
        3. priorities: backfill the medium glyph on unmarked tasks
        4. archive: relocate pending tasks out of the archive section
           (skipped when ``allow_incomplete_in_archive`` is set)
        5. trailing_newline: guarantee the document ends with a newline

    Args:
        lines: Document lines
        allow_incomplete_in_archive: Keep pending tasks inside the archive

    Returns:
        NormalizeResult with the new lines, whether anything changed and the
        names of the steps that changed something.
    """
    steps: List[tuple[str, Callable[[List[str]], List[str]]]] = [
        ("header", ensure_header),
        ("blank_lines", collapse_blank_runs),
        ("priorities", backfill_priorities),
    ]
    if not allow_incomplete_in_archive:
        steps.append(("archive", relocate_archived_pending))
    steps.append(("trailing_newline", ensure_trailing_newline))

    current = list(lines)
    changed: List[str] = []
    for name, step in steps:
        updated = step(current)
        if updated != current:
            changed.append(name)
            logger.debug("Normalizer step '%s' changed the document", name)
        current = updated

    return NormalizeResult(lines=current, modified=bool(changed), steps=changed)
