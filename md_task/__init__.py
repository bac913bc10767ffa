"""Markdown task tracker: checklist tasks kept in a single document."""

__version__ = "0.1.0"

from md_task.core import (
    LineKind,
    MutationResult,
    NormalizeResult,
    Priority,
    TaskError,
    TaskListing,
    append_task,
    archive_all,
    archive_task,
    build_listing,
    classify_line,
    mark_done,
    normalize,
    remove_task,
)
from md_task.storage import TaskDocumentStore
from md_task.utils.config import MdTaskConfig, load_config
from md_task.workflow import CommandOutcome, TaskWorkflow

__all__ = [
    "__version__",
    "CommandOutcome",
    "LineKind",
    "MdTaskConfig",
    "MutationResult",
    "NormalizeResult",
    "Priority",
    "TaskDocumentStore",
    "TaskError",
    "TaskListing",
    "TaskWorkflow",
    "append_task",
    "archive_all",
    "archive_task",
    "build_listing",
    "classify_line",
    "load_config",
    "mark_done",
    "normalize",
    "remove_task",
]
