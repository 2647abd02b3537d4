"""
toodoux - Configuration
=======================
User configuration, read from ``<root>/config.yaml``.

The root directory is, in order of precedence: the ``--config`` option,
the ``TOODOUX_CONFIG_DIR`` environment variable, ``~/.config/toodoux``.
"""

import logging
import os
from pathlib import Path
from typing import Optional

import pydantic
import yaml
from pydantic import BaseModel, Field, field_validator

from .errors import ConfigError
from .schema import Status

logger = logging.getLogger("toodoux")

CONFIG_FILE = "config.yaml"


def default_root() -> Path:
    env = os.getenv("TOODOUX_CONFIG_DIR")
    if env:
        return Path(env).expanduser().resolve()
    return (Path.home() / ".config" / "toodoux").resolve()


class Config(BaseModel):
    """Column names, status aliases and storage location"""
    root: Path = Field(default_factory=default_root, exclude=True)

    # Storage
    tasks_file: str = "tasks.json"  # Relative to root unless absolute

    # Column names
    uid_col_name: str = "UID"
    age_col_name: str = "Age"
    spent_col_name: str = "Spent"
    prio_col_name: str = "Prio"
    project_col_name: str = "Project"
    status_col_name: str = "Status"
    description_col_name: str = "Description"

    # Status aliases
    todo_alias: str = "TODO"
    wip_alias: str = "WIP"
    done_alias: str = "DONE"
    cancelled_alias: str = "CANCELLED"

    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        if not isinstance(logging.getLevelName(value.upper()), int):
            raise ValueError(f"unknown log level: {value}")
        return value.upper()

    @classmethod
    def load(cls, root: Optional[Path] = None) -> "Config":
        """Read the configuration, writing the defaults if there is none yet"""
        root = Path(root).expanduser().resolve() if root else default_root()
        path = root / CONFIG_FILE

        if not path.exists():
            logger.warning(f"No configuration at {path}, using defaults")
            config = cls(root=root)
            config.save()
            return config

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
            raise ConfigError(f"cannot read {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"{path} must contain a mapping")

        try:
            return cls(root=root, **data)
        except (TypeError, pydantic.ValidationError) as e:
            raise ConfigError(f"invalid configuration in {path}: {e}") from e

    def save(self) -> None:
        path = self.root / CONFIG_FILE
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                yaml.safe_dump(self.model_dump(mode="json"), f, sort_keys=False)
        except OSError as e:
            raise ConfigError(f"cannot write {path}: {e}") from e
        logger.info(f"⚙️ Wrote default configuration: {path}")

    def tasks_path(self) -> Path:
        path = Path(self.tasks_file).expanduser()
        return path if path.is_absolute() else self.root / path

    def status_alias(self, status: Status) -> str:
        return {
            Status.ONGOING: self.wip_alias,
            Status.TODO: self.todo_alias,
            Status.DONE: self.done_alias,
            Status.CANCELLED: self.cancelled_alias,
        }[status]
