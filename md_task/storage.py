"""Task document persistence."""

import logging
import os
import tempfile
from pathlib import Path
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)


def split_lines(text: str) -> List[str]:
    """Split document text into lines.

    Splitting on ``"\\n"`` keeps a trailing newline as a final empty line, so
    ``"\\n".join(split_lines(text)) == text`` for any LF text. One trailing
    ``"\\r"`` is stripped from each line, so CRLF documents load the same way
    and are written back with LF endings. Empty text is the empty document.
    """
    if not text:
        return []
    return [line.removesuffix("\r") for line in text.split("\n")]


def join_lines(lines: Sequence[str]) -> str:
    return "\n".join(lines)


class TaskDocumentStore:
    """Loads and persists the task document.

    A missing file is a valid state: it loads as the empty document. Writes
    are atomic (temp file in the same directory, then rename) so an
    interrupted write never leaves a partially written document behind.
    """

    def __init__(self, path: Path):
        """Initialize the store.

        Args:
            path: Path to the task document (relative paths resolve against
                the current working directory at use time)
        """
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def read_text(self) -> Optional[str]:
        """Return the document text, or None if the file does not exist."""
        if not self.exists():
            return None
        return self.path.read_text(encoding="utf-8")

    def load(self) -> List[str]:
        """Load the document as lines; an absent file is the empty document."""
        text = self.read_text()
        if text is None:
            logger.debug(f"Task file not found, using empty document: {self.path}")
            return []
        return split_lines(text)

    def save(self, lines: Sequence[str]) -> Path:
        """Persist the document with an atomic write.

        Args:
            lines: Full document lines

        Returns:
            Path to the written file
        """
        content = join_lines(lines)
        parent = self.path.parent
        parent.mkdir(parents=True, exist_ok=True)
        mode = self.path.stat().st_mode & 0o777 if self.exists() else 0o644

        fd, temp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=parent)
        temp_path = Path(temp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(content)
            # mkstemp creates the file as 0600; keep the document's usual mode.
            temp_path.chmod(mode)
            temp_path.replace(self.path)
        except OSError:
            temp_path.unlink(missing_ok=True)
            raise

        logger.debug(f"Wrote {len(lines)} line(s) to {self.path}")
        return self.path
