"""Line classification for task documents.

Every operation re-derives structure from the raw lines, so this module is the
single place that knows what a checklist line or a section header looks like.
Classification never fails: anything that is not a header or a checklist line
is ``LineKind.OTHER``.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from md_task.constants import ARCHIVE_HEADER, DONE_MARKER, PENDING_MARKER, TASK_LIST_HEADER
from md_task.core.contracts import LineKind, ParsedLine, Priority, PRIORITY_SYMBOLS


def _split_priority(body: str) -> tuple[Optional[Priority], str]:
    """Split a leading priority glyph (and one following space) off a task body."""
    for symbol in PRIORITY_SYMBOLS:
        if body.startswith(symbol):
            rest = body[len(symbol) :]
            if rest.startswith(" "):
                rest = rest[1:]
            return Priority.from_symbol(symbol), rest
    return None, body


def classify_line(line: str) -> ParsedLine:
    """Classify a raw document line.

    Args:
        line: A single line without its trailing newline

    Returns:
        ParsedLine with the detected kind, and for checklist lines the
        priority (None when unmarked) and the free text after it.
    """
    if line == TASK_LIST_HEADER:
        return ParsedLine(kind=LineKind.TASK_LIST_HEADER, raw=line)
    if line == ARCHIVE_HEADER:
        return ParsedLine(kind=LineKind.ARCHIVE_HEADER, raw=line)

    for marker, kind in ((PENDING_MARKER, LineKind.PENDING), (DONE_MARKER, LineKind.DONE)):
        if line.startswith(marker):
            priority, text = _split_priority(line[len(marker) :])
            return ParsedLine(kind=kind, raw=line, priority=priority, text=text)

    return ParsedLine(kind=LineKind.OTHER, raw=line)


def classify_lines(lines: Sequence[str]) -> List[ParsedLine]:
    return [classify_line(line) for line in lines]


def is_pending(line: str) -> bool:
    return line.startswith(PENDING_MARKER)


def is_done(line: str) -> bool:
    return line.startswith(DONE_MARKER)


def is_task(line: str) -> bool:
    return is_pending(line) or is_done(line)


def is_blank(line: str) -> bool:
    return not line.strip()


def is_archive_header(line: str) -> bool:
    return line == ARCHIVE_HEADER


def find_archive_header(lines: Sequence[str]) -> Optional[int]:
    """Return the index of the first archive header, or None if absent."""
    for idx, line in enumerate(lines):
        if is_archive_header(line):
            return idx
    return None


def active_content_end(lines: Sequence[str], stop: Optional[int] = None) -> int:
    """Return the index just past the last non-blank line before ``stop``.

    ``stop`` defaults to the end of the document. Trailing blank lines in
    front of ``stop`` (the separator before the archive header, or the final
    newline of the file) are skipped, so inserting at the returned index keeps
    new tasks adjacent to existing content.
    """
    end = len(lines) if stop is None else stop
    while end > 0 and is_blank(lines[end - 1]):
        end -= 1
    return end


def set_checkbox(line: str, kind: LineKind) -> str:
    """Rewrite the checkbox marker of a checklist line, keeping priority and text."""
    parsed = classify_line(line)
    if not parsed.is_task:
        return line
    marker = DONE_MARKER if kind == LineKind.DONE else PENDING_MARKER
    return marker + line[len(parsed.marker) :]


def task_insert_index(lines: Sequence[str]) -> int:
    """Index at which a pending task joins the end of the Active region.

    The task lands after the last non-blank line in front of the archive
    header (or the end of the document). A bare task list header keeps the
    blank line that follows it.
    """
    archive_idx = find_archive_header(lines)
    stop = len(lines) if archive_idx is None else archive_idx
    end = active_content_end(lines, stop)
    if end > 0 and lines[end - 1] == TASK_LIST_HEADER and end < stop and is_blank(lines[end]):
        end += 1
    return end
