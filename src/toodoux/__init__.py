"""
toodoux - Personal Task Management
==================================

Local, single-user task tracking with inline metadata.

Usage:
    from toodoux import Config, TaskManager, Task, from_words, validate

    config = Config.load()
    manager = TaskManager.new_from_config(config)

    bundle, name = from_words(["fix", "bug", "+backend", "!high"])
    validate(bundle)

    task = Task.new(name)
    task.apply_metadata(bundle)
    uid = manager.register_task(task)
    manager.save(config)
"""

from .schema import (
    Task,
    TaskRegistry,
    Status,
    Priority,
)

from .errors import (
    ToodouxError,
    ValidationError,
    InvalidValue,
    InvalidDependency,
    LoadError,
    SaveError,
    ConfigError,
)

from .metadata import MetadataBundle, from_words, validate
from .config import Config
from .manager import TaskManager, JsonTaskStore
from .render import friendly_duration, render_tasks

__version__ = "0.4.0"
__all__ = [
    "Task",
    "TaskRegistry",
    "Status",
    "Priority",
    "ToodouxError",
    "ValidationError",
    "InvalidValue",
    "InvalidDependency",
    "LoadError",
    "SaveError",
    "ConfigError",
    "MetadataBundle",
    "from_words",
    "validate",
    "Config",
    "TaskManager",
    "JsonTaskStore",
    "friendly_duration",
    "render_tasks",
]
