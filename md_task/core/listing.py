"""Read-only projection of a task document for the ``list`` command."""

from __future__ import annotations

from typing import Sequence

from md_task.core.classifier import classify_line
from md_task.core.contracts import LineKind, ListingEntry, TaskListing


def build_listing(lines: Sequence[str]) -> TaskListing:
    """Collect pending, done and archived tasks with per-category numbering.

    Done entries are numbered in document order, which matches the numbering
    used by ``archive_task`` for tasks in the Active region.
    """
    listing = TaskListing()
    in_archive = False

    for line in lines:
        parsed = classify_line(line)
        if parsed.kind == LineKind.ARCHIVE_HEADER:
            in_archive = True
            continue
        if not parsed.is_task:
            continue

        if parsed.kind == LineKind.PENDING:
            bucket = listing.pending
        elif in_archive:
            bucket = listing.archived
        else:
            bucket = listing.done
        bucket.append(
            ListingEntry(
                number=len(bucket) + 1,
                priority=parsed.priority,
                text=parsed.display_text(),
            )
        )

    return listing
