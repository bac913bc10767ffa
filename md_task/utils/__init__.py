"""Utilities for md-task (configuration discovery)."""

from md_task.utils.config import ConfigDiscovery, MdTaskConfig, load_config

__all__ = ["ConfigDiscovery", "MdTaskConfig", "load_config"]
