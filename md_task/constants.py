"""Constants for the md-task document layout and configuration files."""

from pathlib import Path

TASK_LIST_HEADER = "## タスク一覧"
ARCHIVE_HEADER = "## アーカイブ"

PENDING_MARKER = "- [ ] "
DONE_MARKER = "- [x] "

HIGH_SYMBOL = "🔴"
MEDIUM_SYMBOL = "🟡"
LOW_SYMBOL = "🟢"

DEFAULT_TASK_FILE = "tasks.md"

LOCAL_CONFIG_FILE = "md-task.toml"
GLOBAL_CONFIG_FILE = "config.toml"
CONFIG_DIR_NAME = "md-task"
DEV_CONFIG_DIR = "./dev-config"

DEV_ENV_VAR = "MD_TASK_DEV"
VERBOSE_ENV_VAR = "MD_TASK_VERBOSE"

PROJECT_ROOT_MARKERS = ("pyproject.toml", ".git")


def get_local_config_path(cwd: Path) -> Path:
    """Get the local (working directory) config file path."""
    return cwd / LOCAL_CONFIG_FILE


def get_global_config_path(config_dir: Path) -> Path:
    """Get the global config file path inside a config directory."""
    return config_dir / GLOBAL_CONFIG_FILE
