"""Command workflow: load, mutate once, normalize, persist.

``TaskWorkflow`` is the only place that combines the document core with
storage. Every mutating command follows the same pipeline:

    load -> one mutation -> normalize (if auto_format) -> save if changed

A failed mutation never writes, so logical errors leave the file untouched.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, Optional, Union

import pydantic as pd

from md_task.core.contracts import MutationResult, Priority, TaskError, TaskListing
from md_task.core.listing import build_listing
from md_task.core.mutations import append_task, archive_all, archive_task, mark_done, remove_task
from md_task.core.normalizer import normalize
from md_task.storage import TaskDocumentStore
from md_task.utils.config import MdTaskConfig

logger = logging.getLogger(__name__)


class CommandOutcome(pd.BaseModel):
    """Result of running one command through the workflow.

    Attributes:
        result: Mutation result (lines are the final, possibly normalized, lines)
        written: Whether the document was persisted
        normalized: Whether the normalizer changed anything
        path: Task document path
    """

    result: MutationResult
    written: bool = False
    normalized: bool = False
    path: Path

    @property
    def ok(self) -> bool:
        return self.result.ok

    @property
    def message(self) -> str:
        return self.result.message


class TaskWorkflow:
    """Runs task commands against a single task document."""

    def __init__(self, config: MdTaskConfig, store: Optional[TaskDocumentStore] = None):
        self.config = config
        self.store = store if store is not None else TaskDocumentStore(config.task_file)

    def _normalize(self, lines: List[str]) -> tuple[List[str], bool]:
        if not self.config.task_management.auto_format:
            return lines, False
        normalized = normalize(
            lines,
            allow_incomplete_in_archive=self.config.task_management.allow_incomplete_in_archive,
        )
        if normalized.modified:
            logger.debug(f"File format normalized ({', '.join(normalized.steps)})")
        return normalized.lines, normalized.modified

    def _run(self, mutate: Callable[[List[str]], MutationResult]) -> CommandOutcome:
        original = self.store.load()
        result = mutate(original)
        if not result.ok:
            logger.debug(f"Mutation failed: {result.error.value if result.error else 'unknown'}")
            return CommandOutcome(result=result, path=self.store.path)

        if not original and not result.lines:
            # Nothing to do on an absent or empty document; never create one.
            return CommandOutcome(result=result, path=self.store.path)

        lines, normalized = self._normalize(result.lines)
        written = False
        if lines != original:
            self.store.save(lines)
            written = True

        final = result.model_copy(update={"lines": lines})
        return CommandOutcome(
            result=final, written=written, normalized=normalized, path=self.store.path
        )

    def add(self, text: str, priority: Union[Priority, str, None] = None) -> CommandOutcome:
        """Append a pending task.

        Args:
            text: Task text
            priority: Priority, its name, or None for the configured default
        """
        if priority is None:
            resolved = self.config.task_management.default_priority
        else:
            try:
                resolved = Priority(priority)
            except ValueError:
                result = MutationResult.failure(
                    [],
                    TaskError.INVALID_PRIORITY,
                    f"Invalid priority '{priority}'. Use: {', '.join(Priority.names())}",
                )
                return CommandOutcome(result=result, path=self.store.path)

        outcome = self._run(lambda lines: append_task(lines, text, resolved))
        if not outcome.ok:
            return outcome
        message = f"Task added: {text} ({resolved.value} priority)"
        return outcome.model_copy(
            update={"result": outcome.result.model_copy(update={"message": message})}
        )

    def done(self, n: int) -> CommandOutcome:
        return self._run(lambda lines: mark_done(lines, n))

    def remove(self, n: int) -> CommandOutcome:
        return self._run(lambda lines: remove_task(lines, n))

    def archive(self, n: int) -> CommandOutcome:
        return self._run(lambda lines: archive_task(lines, n))

    def archive_all(self) -> CommandOutcome:
        return self._run(archive_all)

    def listing(self) -> Optional[TaskListing]:
        """Return the task listing, or None if there is no task document."""
        if not self.store.exists():
            return None
        return build_listing(self.store.load())

    def normalize_only(self) -> bool:
        """Normalize an existing document in place.

        Returns:
            True if the document was rewritten
        """
        if not self.store.exists():
            return False
        original = self.store.load()
        lines, _ = self._normalize(original)
        if lines == original:
            return False
        self.store.save(lines)
        return True
