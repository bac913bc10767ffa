"""Task document core: line classification, mutations and normalization."""

from md_task.core.classifier import classify_line, classify_lines, find_archive_header
from md_task.core.contracts import (
    LineKind,
    ListingEntry,
    MutationResult,
    NormalizeResult,
    ParsedLine,
    Priority,
    TaskError,
    TaskListing,
)
from md_task.core.listing import build_listing
from md_task.core.mutations import (
    append_task,
    archive_all,
    archive_task,
    build_task_line,
    mark_done,
    remove_task,
)
from md_task.core.normalizer import normalize

__all__ = [
    "LineKind",
    "ListingEntry",
    "MutationResult",
    "NormalizeResult",
    "ParsedLine",
    "Priority",
    "TaskError",
    "TaskListing",
    "append_task",
    "archive_all",
    "archive_task",
    "build_listing",
    "build_task_line",
    "classify_line",
    "classify_lines",
    "find_archive_header",
    "mark_done",
    "normalize",
    "remove_task",
]
