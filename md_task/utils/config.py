"""Configuration model and layered config file discovery.

Configuration files are TOML. They are searched in three places (local
working directory, project root, global config directory) and merged so that
more specific files override more general ones key by key.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import pydantic as pd

from md_task.constants import (
    CONFIG_DIR_NAME,
    DEFAULT_TASK_FILE,
    DEV_CONFIG_DIR,
    DEV_ENV_VAR,
    PROJECT_ROOT_MARKERS,
    get_global_config_path,
    get_local_config_path,
)
from md_task.core.contracts import Priority

logger = logging.getLogger(__name__)


class TaskManagementConfig(pd.BaseModel):
    default_priority: Priority = Priority.MEDIUM
    auto_format: bool = True
    allow_incomplete_in_archive: bool = False

    model_config = pd.ConfigDict(frozen=True, extra="ignore")


class DisplayConfig(pd.BaseModel):
    show_completed_by_default: bool = False

    model_config = pd.ConfigDict(frozen=True, extra="ignore")


class FilePathsConfig(pd.BaseModel):
    task_file: str = DEFAULT_TASK_FILE

    model_config = pd.ConfigDict(frozen=True, extra="ignore")


class MdTaskConfig(pd.BaseModel):
    """Read-only configuration snapshot for one invocation.

    Attributes:
        task_management: Priority default and normalization switches
        display: Defaults for the ``list`` command
        file_paths: Location of the task document
    """

    task_management: TaskManagementConfig = pd.Field(default_factory=TaskManagementConfig)
    display: DisplayConfig = pd.Field(default_factory=DisplayConfig)
    file_paths: FilePathsConfig = pd.Field(default_factory=FilePathsConfig)

    model_config = pd.ConfigDict(frozen=True, extra="ignore")

    @property
    def task_file(self) -> Path:
        return Path(self.file_paths.task_file)


def _format_toml_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def render_config_toml(config: MdTaskConfig) -> str:
    """Render a config as TOML text (one table per section)."""
    data = config.model_dump(mode="json")
    lines: List[str] = []
    for section, values in data.items():
        if lines:
            lines.append("")
        lines.append(f"[{section}]")
        for key, value in values.items():
            lines.append(f"{key} = {_format_toml_value(value)}")
    return "\n".join(lines) + "\n"


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge ``override`` into ``base`` recursively; override wins per key."""
    merged: Dict[str, Any] = dict(base)
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def get_config_dir(env: Optional[Mapping[str, str]] = None) -> Path:
    """Return the global configuration directory.

    ``MD_TASK_DEV`` selects a development directory next to the working
    directory. Otherwise ``$XDG_CONFIG_HOME/md-task`` or ``~/.config/md-task``.
    """
    env = os.environ if env is None else env
    if DEV_ENV_VAR in env:
        return Path(DEV_CONFIG_DIR)
    xdg = env.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / CONFIG_DIR_NAME
    return Path.home() / ".config" / CONFIG_DIR_NAME


def find_project_root(start: Path) -> Optional[Path]:
    """Return the nearest ancestor of ``start`` holding a project marker."""
    current = start.resolve()
    for candidate in (current, *current.parents):
        if any((candidate / marker).exists() for marker in PROJECT_ROOT_MARKERS):
            return candidate
    return None


class ConfigDiscovery:
    """Discover, read and merge md-task configuration files.

    Example:
        >>> discovery = ConfigDiscovery()
        >>> config = discovery.load()
        >>> discovery.loaded_paths
        [PosixPath('md-task.toml')]
    """

    def __init__(self, cwd: Optional[Path] = None, env: Optional[Mapping[str, str]] = None):
        """Initialize config discovery.

        Args:
            cwd: Working directory to search from (default: current directory)
            env: Environment mapping (default: ``os.environ``)
        """
        self.cwd = Path.cwd() if cwd is None else Path(cwd)
        self.env: Mapping[str, str] = os.environ if env is None else env
        self.loaded_paths: List[Path] = []

    @property
    def config_dir(self) -> Path:
        return get_config_dir(self.env)

    @property
    def local_config_path(self) -> Path:
        return get_local_config_path(self.cwd)

    @property
    def global_config_path(self) -> Path:
        return get_global_config_path(self.config_dir)

    def project_root(self) -> Optional[Path]:
        return find_project_root(self.cwd)

    def search_paths(self) -> List[Path]:
        """Return config file candidates, highest priority first."""
        paths = [self.local_config_path]

        root = self.project_root()
        if root is not None:
            project_config = get_local_config_path(root)
            if project_config.resolve() != self.local_config_path.resolve():
                paths.append(project_config)

        paths.append(self.global_config_path)
        return paths

    def _read_config_file(self, path: Path) -> Optional[Dict[str, Any]]:
        """Read and validate one config file.

        Returns:
            Parsed TOML data, or None if the file is missing, unreadable,
            malformed or fails validation
        """
        if not path.is_file():
            return None
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
            MdTaskConfig.model_validate(data)
        except (IOError, OSError, tomllib.TOMLDecodeError) as e:
            logger.warning(f"Failed to read config file {path}: {e}")
            return None
        except pd.ValidationError as e:
            logger.warning(f"Ignoring invalid config file {path}: {e}")
            return None
        return data

    def load(self) -> MdTaskConfig:
        """Load the effective configuration.

        Files are applied from lowest to highest priority (global, project,
        local), each one deep-merged over the previous result.
        """
        self.loaded_paths = []
        merged: Dict[str, Any] = {}
        for path in reversed(self.search_paths()):
            data = self._read_config_file(path)
            if data is None:
                continue
            merged = deep_merge(merged, data)
            self.loaded_paths.append(path)
            logger.debug(f"Loaded config from: {path}")

        return MdTaskConfig.model_validate(merged)


def load_config(cwd: Optional[Path] = None, env: Optional[Mapping[str, str]] = None) -> MdTaskConfig:
    return ConfigDiscovery(cwd=cwd, env=env).load()


def write_default_config(path: Path, *, overwrite: bool = False) -> bool:
    """Write the default configuration to ``path``.

    Returns:
        True if the file was written, False if it already existed and
        ``overwrite`` was not set
    """
    if path.exists() and not overwrite:
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_config_toml(MdTaskConfig()), encoding="utf-8")
    logger.debug(f"Wrote default config to {path}")
    return True
