"""Shared pytest fixtures for md-task tests."""

from pathlib import Path
from typing import List

import pytest

from md_task.constants import ARCHIVE_HEADER, TASK_LIST_HEADER
from md_task.storage import TaskDocumentStore
from md_task.utils.config import FilePathsConfig, MdTaskConfig, TaskManagementConfig
from md_task.workflow import TaskWorkflow


SAMPLE_DOCUMENT: List[str] = [
    TASK_LIST_HEADER,
    "",
    "- [ ] 🔴 first",
    "- [ ] 🟡 second",
    "- [x] 🟢 finished",
    "- [ ] 🟢 third",
    "",
    ARCHIVE_HEADER,
    "",
    "- [x] 🟡 old",
    "",
]

MESSY_DOCUMENTS: List[List[str]] = [
    [],
    [""],
    ["", "", ""],
    [TASK_LIST_HEADER],
    ["free text only"],
    ["- [ ] no header", "- [x] done no header"],
    [ARCHIVE_HEADER, "- [ ] stray", "- [x] archived"],
    [TASK_LIST_HEADER, "", "- [ ] 🟡 a", "", "", "", "- [ ] b", "   ", ""],
    [TASK_LIST_HEADER, "", "- [ ] 🟡 a", "  "],
    [
        TASK_LIST_HEADER,
        "",
        "- [ ] 🟡 a",
        "",
        ARCHIVE_HEADER,
        "",
        "- [ ] 🟢 x",
        "",
        "- [x] 🟡 y",
        "- [ ] z",
        "",
        "",
    ],
    list(SAMPLE_DOCUMENT),
]


@pytest.fixture(params=range(len(MESSY_DOCUMENTS)))
def messy_document(request) -> List[str]:
    """Each of the hand-written irregular documents in turn."""
    return list(MESSY_DOCUMENTS[request.param])


@pytest.fixture
def sample_lines() -> List[str]:
    return list(SAMPLE_DOCUMENT)


@pytest.fixture
def task_file(tmp_path: Path) -> Path:
    return tmp_path / "tasks.md"


@pytest.fixture
def store(task_file: Path) -> TaskDocumentStore:
    return TaskDocumentStore(task_file)


@pytest.fixture
def make_config(task_file: Path):
    """Factory for configs pointing at the temporary task file."""

    def _make(**task_management) -> MdTaskConfig:
        return MdTaskConfig(
            task_management=TaskManagementConfig(**task_management),
            file_paths=FilePathsConfig(task_file=str(task_file)),
        )

    return _make


@pytest.fixture
def workflow(make_config) -> TaskWorkflow:
    return TaskWorkflow(make_config())


@pytest.fixture
def cli_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run CLI commands inside an isolated working and config directory."""
    work_dir = tmp_path / "work"
    work_dir.mkdir()
    monkeypatch.chdir(work_dir)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.delenv("MD_TASK_DEV", raising=False)
    monkeypatch.delenv("MD_TASK_VERBOSE", raising=False)
    return work_dir
