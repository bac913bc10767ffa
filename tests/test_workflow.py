"""Tests for the load/mutate/normalize/save command workflow."""

from md_task.constants import ARCHIVE_HEADER, TASK_LIST_HEADER
from md_task.core.contracts import Priority, TaskError
from md_task.storage import join_lines
from md_task.workflow import TaskWorkflow


def _text(lines):
    return join_lines(lines)


class TestAdd:
    """Test TaskWorkflow.add()."""

    def test_add_to_absent_file(self, workflow, task_file):
        outcome = workflow.add("buy milk", "high")
        assert outcome.ok
        assert outcome.written
        assert outcome.message == "Task added: buy milk (high priority)"
        assert task_file.read_text(encoding="utf-8") == "## タスク一覧\n\n- [ ] 🔴 buy milk\n"

    def test_add_without_auto_format(self, make_config, task_file):
        workflow = TaskWorkflow(make_config(auto_format=False))
        outcome = workflow.add("buy milk", Priority.HIGH)
        assert not outcome.normalized
        assert task_file.read_text(encoding="utf-8") == "## タスク一覧\n\n- [ ] 🔴 buy milk"

    def test_default_priority_from_config(self, make_config, task_file):
        workflow = TaskWorkflow(make_config(default_priority="low"))
        outcome = workflow.add("later")
        assert outcome.message == "Task added: later (low priority)"
        assert "- [ ] 🟢 later" in task_file.read_text(encoding="utf-8")

    def test_invalid_priority_writes_nothing(self, workflow, task_file):
        outcome = workflow.add("x", "urgent")
        assert not outcome.ok
        assert outcome.result.error == TaskError.INVALID_PRIORITY
        assert not task_file.exists()

    def test_add_lands_before_archive(self, workflow, task_file, sample_lines):
        task_file.write_text(_text(sample_lines), encoding="utf-8")
        workflow.add("fourth", "medium")
        lines = task_file.read_text(encoding="utf-8").split("\n")
        assert lines.index("- [ ] 🟡 fourth") < lines.index(ARCHIVE_HEADER)

    def test_add_normalizes_messy_file(self, workflow, task_file):
        task_file.write_text("- [ ] plain\n\n\n\n", encoding="utf-8")
        outcome = workflow.add("new", "low")
        assert outcome.normalized
        assert task_file.read_text(encoding="utf-8") == (
            f"{TASK_LIST_HEADER}\n\n- [ ] 🟡 plain\n- [ ] 🟢 new\n"
        )


class TestOtherCommands:
    def test_done(self, workflow, task_file, sample_lines):
        task_file.write_text(_text(sample_lines), encoding="utf-8")
        outcome = workflow.done(1)
        assert outcome.message == "Task 1 marked as done."
        assert "- [x] 🔴 first" in task_file.read_text(encoding="utf-8")

    def test_failure_leaves_file_untouched(self, workflow, task_file, sample_lines):
        original = _text(sample_lines).replace("🟡 second", "second")
        task_file.write_text(original, encoding="utf-8")
        for outcome in (workflow.done(9), workflow.remove(9), workflow.archive(9)):
            assert not outcome.ok
            assert not outcome.written
        assert task_file.read_text(encoding="utf-8") == original

    def test_failure_on_absent_file_creates_nothing(self, workflow, task_file):
        outcome = workflow.done(1)
        assert outcome.result.error == TaskError.TASK_NOT_FOUND
        assert not task_file.exists()

    def test_archive_all_on_absent_file_creates_nothing(self, workflow, task_file):
        outcome = workflow.archive_all()
        assert outcome.ok
        assert outcome.result.count == 0
        assert not task_file.exists()

    def test_remove(self, workflow, task_file, sample_lines):
        task_file.write_text(_text(sample_lines), encoding="utf-8")
        workflow.remove(2)
        assert "second" not in task_file.read_text(encoding="utf-8")

    def test_archive_then_archive_all(self, workflow, task_file):
        task_file.write_text(
            f"{TASK_LIST_HEADER}\n\n- [x] 🟡 a\n- [x] 🟡 b\n- [ ] 🟡 c\n", encoding="utf-8"
        )
        assert workflow.archive(2).ok
        outcome = workflow.archive_all()
        assert outcome.result.count == 1
        assert task_file.read_text(encoding="utf-8") == (
            f"{TASK_LIST_HEADER}\n\n- [ ] 🟡 c\n\n{ARCHIVE_HEADER}\n\n- [x] 🟡 b\n- [x] 🟡 a\n"
        )

    def test_allow_incomplete_in_archive(self, make_config, task_file):
        text = f"{TASK_LIST_HEADER}\n\n- [x] 🟡 a\n\n{ARCHIVE_HEADER}\n\n- [ ] 🟡 kept\n"
        task_file.write_text(text, encoding="utf-8")
        workflow = TaskWorkflow(make_config(allow_incomplete_in_archive=True))
        workflow.archive(1)
        lines = task_file.read_text(encoding="utf-8").split("\n")
        assert lines.index("- [ ] 🟡 kept") > lines.index(ARCHIVE_HEADER)


class TestListing:
    def test_absent_file(self, workflow):
        assert workflow.listing() is None

    def test_listing_counts(self, workflow, task_file, sample_lines):
        task_file.write_text(_text(sample_lines), encoding="utf-8")
        listing = workflow.listing()
        assert (listing.pending_count, listing.done_count, listing.archived_count) == (3, 1, 1)

    def test_normalize_only(self, workflow, task_file):
        task_file.write_text("- [ ] a", encoding="utf-8")
        assert workflow.normalize_only()
        assert task_file.read_text(encoding="utf-8") == f"{TASK_LIST_HEADER}\n\n- [ ] 🟡 a\n"
        assert not workflow.normalize_only()

    def test_normalize_only_without_file(self, workflow, task_file):
        assert not workflow.normalize_only()
        assert not task_file.exists()


class TestLineEndings:
    def test_crlf_file_is_normalized(self, workflow, task_file):
        task_file.write_bytes(
            (
                f"{TASK_LIST_HEADER}\r\n\r\n- [ ] 🟡 a\r\n\r\n"
                f"{ARCHIVE_HEADER}\r\n\r\n- [ ] 🟡 stray\r\n"
            ).encode("utf-8")
        )
        assert workflow.normalize_only()
        assert task_file.read_bytes().decode("utf-8") == (
            f"{TASK_LIST_HEADER}\n\n- [ ] 🟡 a\n- [ ] 🟡 stray\n\n{ARCHIVE_HEADER}\n"
        )
