"""
toodoux - Task Manager
======================
Owns the task registry for one invocation: UID allocation, lookup,
removal and explicit save checkpoints. Storage is a single JSON file.
"""

import json
import logging
from pathlib import Path
from typing import Iterator, Optional, Tuple

import pydantic

from .config import Config
from .errors import LoadError, SaveError
from .schema import Task, TaskRegistry

logger = logging.getLogger("toodoux")


class JsonTaskStore:
    """Read and write a TaskRegistry as pretty-printed JSON"""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> TaskRegistry:
        """Load the registry; a missing file is an empty registry"""
        if not self.path.exists():
            logger.warning(f"Task store not found, starting empty: {self.path}")
            return TaskRegistry()

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            registry = TaskRegistry.model_validate(data)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, pydantic.ValidationError) as e:
            raise LoadError(f"cannot load tasks from {self.path}: {e}") from e

        logger.info(f"📂 Loaded {len(registry.tasks)} tasks from {self.path}")
        return registry

    def save(self, registry: TaskRegistry) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(registry.model_dump(mode="json"), f, indent=2)
        except (OSError, TypeError) as e:
            raise SaveError(f"cannot save tasks to {self.path}: {e}") from e

        logger.info(f"✅ Saved {len(registry.tasks)} tasks to {self.path}")


class TaskManager:
    """
    Task registry keyed by UID.

    UIDs are positive integers handed out by a counter that only moves
    forward, so a removed task's UID is never given to another task.
    Nothing is written until ``save`` is called.
    """

    def __init__(self, registry: Optional[TaskRegistry] = None):
        self._registry = registry if registry is not None else TaskRegistry()

    @classmethod
    def new_from_config(cls, config: Config) -> "TaskManager":
        """Load the registry the configuration points at (LoadError on failure)"""
        return cls(JsonTaskStore(config.tasks_path()).load())

    # ========================================
    # REGISTRY OPERATIONS
    # ========================================

    def register_task(self, task: Task) -> int:
        """Insert a task and return its new UID"""
        uid = self._allocate_uid()
        self._registry.tasks[uid] = task
        logger.info(f"➕ Registered task {uid}: {task.name}")
        return uid

    def get_mut(self, uid: int) -> Optional[Task]:
        """Task with this UID, or None if there is none"""
        return self._registry.tasks.get(uid)

    def tasks(self) -> Iterator[Tuple[int, Task]]:
        """All (uid, task) pairs, in registration order"""
        return iter(self._registry.tasks.items())

    def uids(self) -> Iterator[int]:
        return iter(self._registry.tasks)

    def remove_task(self, uid: int) -> Optional[Task]:
        task = self._registry.tasks.pop(uid, None)
        if task is not None:
            logger.info(f"🗑️ Removed task {uid}: {task.name}")
        return task

    def clear(self) -> int:
        """Remove every task; the UID counter keeps its value"""
        count = len(self._registry.tasks)
        self._registry.tasks.clear()
        logger.info(f"🗑️ Removed all {count} tasks")
        return count

    def __len__(self) -> int:
        return len(self._registry.tasks)

    @property
    def registry(self) -> TaskRegistry:
        return self._registry

    # ========================================
    # PERSISTENCE
    # ========================================

    def save(self, config: Config) -> None:
        """Write the whole registry (SaveError on failure)"""
        JsonTaskStore(config.tasks_path()).save(self._registry)

    # ========================================
    # HELPER METHODS
    # ========================================

    def _allocate_uid(self) -> int:
        uid = max(self._registry.next_uid, max(self._registry.tasks, default=0) + 1)
        self._registry.next_uid = uid + 1
        return uid
