"""Tests for task document persistence."""

import os
import stat

import pytest

from md_task.storage import TaskDocumentStore, join_lines, split_lines


class TestLineSplitting:
    @pytest.mark.parametrize(
        "text",
        ["", "\n", "a", "a\n", "a\n\nb\n\n", "## タスク一覧\n\n- [ ] 🔴 牛乳\n"],
    )
    def test_text_round_trips(self, text):
        assert join_lines(split_lines(text)) == text

    def test_trailing_newline_is_final_empty_line(self):
        assert split_lines("a\nb\n") == ["a", "b", ""]

    def test_empty_text_is_empty_document(self):
        assert split_lines("") == []


class TestTaskDocumentStore:
    """Test TaskDocumentStore load and save."""

    def test_missing_file_loads_empty(self, store):
        assert not store.exists()
        assert store.read_text() is None
        assert store.load() == []

    def test_save_and_load(self, store, task_file, sample_lines):
        store.save(sample_lines)
        assert task_file.read_text(encoding="utf-8").endswith("- [x] 🟡 old\n")
        assert store.load() == sample_lines

    def test_save_creates_parent_directory(self, tmp_path):
        store = TaskDocumentStore(tmp_path / "nested" / "tasks.md")
        store.save(["## タスク一覧", ""])
        assert (tmp_path / "nested" / "tasks.md").read_text(encoding="utf-8") == "## タスク一覧\n"

    def test_save_leaves_no_temp_files(self, store, tmp_path):
        store.save(["a"])
        store.save(["b"])
        assert sorted(p.name for p in tmp_path.iterdir()) == ["tasks.md"]

    def test_new_file_is_world_readable(self, store, task_file):
        store.save(["a"])
        assert stat.S_IMODE(task_file.stat().st_mode) == 0o644

    def test_existing_mode_is_kept(self, store, task_file):
        task_file.write_text("a", encoding="utf-8")
        os.chmod(task_file, 0o600)
        store.save(["b"])
        assert stat.S_IMODE(task_file.stat().st_mode) == 0o600
        assert task_file.read_text(encoding="utf-8") == "b"

    def test_no_newline_translation(self, store, task_file):
        store.save(["a", "b", ""])
        assert task_file.read_bytes() == b"a\nb\n"

    def test_crlf_document_loads_without_carriage_returns(self, store, task_file):
        task_file.write_bytes("## タスク一覧\r\n\r\n- [ ] 🟡 a\r\n".encode("utf-8"))
        assert store.load() == ["## タスク一覧", "", "- [ ] 🟡 a", ""]


class TestCrlfSplitting:
    def test_crlf_text(self):
        assert split_lines("a\r\nb\r\n") == ["a", "b", ""]

    def test_crlf_written_back_as_lf(self):
        assert join_lines(split_lines("a\r\n\r\nb")) == "a\n\nb"
