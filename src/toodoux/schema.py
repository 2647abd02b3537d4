"""
toodoux - Task Schema Definition
================================
Task entity, lifecycle states and the persisted registry.
"""

from enum import Enum
from typing import Optional, Dict, Iterable, Set, TYPE_CHECKING
from datetime import date, datetime, timedelta, timezone
from pydantic import BaseModel, Field, field_validator

from .errors import InvalidValue

if TYPE_CHECKING:
    from .metadata import MetadataBundle


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Status(str, Enum):
    """Task lifecycle states, declared in display precedence"""
    ONGOING = "ongoing"       # Currently worked on
    TODO = "todo"             # Not started
    DONE = "done"             # Finished
    CANCELLED = "cancelled"   # Abandoned

    @property
    def rank(self) -> int:
        return list(Status).index(self)


class Priority(str, Enum):
    """Task priority levels, lowest first"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return list(Priority).index(self)

    @classmethod
    def from_token(cls, value: str) -> "Priority":
        """Map the literal of a priority tag (``high`` in ``!high``) to a level"""
        level = _PRIORITY_LITERALS.get(value.lower())
        if level is None:
            raise InvalidValue(value, "expected one of low, medium, high, critical")
        return level


_PRIORITY_LITERALS: Dict[str, Priority] = {
    "l": Priority.LOW,
    "low": Priority.LOW,
    "m": Priority.MEDIUM,
    "med": Priority.MEDIUM,
    "medium": Priority.MEDIUM,
    "h": Priority.HIGH,
    "high": Priority.HIGH,
    "c": Priority.CRITICAL,
    "crit": Priority.CRITICAL,
    "critical": Priority.CRITICAL,
}


class Task(BaseModel):
    """Individual task"""
    name: str
    status: Status = Status.TODO

    # Metadata
    priority: Optional[Priority] = None
    project: Optional[str] = None
    due: Optional[date] = None
    scheduled: Optional[date] = None
    depends_on: Set[int] = Field(default_factory=set)  # Task UIDs

    # Time tracking
    created_at: Optional[datetime] = Field(default_factory=utcnow)
    spent_time: timedelta = timedelta(0)
    ongoing_since: Optional[datetime] = None

    @field_validator("spent_time")
    @classmethod
    def _non_negative_spent_time(cls, value: timedelta) -> timedelta:
        if value < timedelta(0):
            raise ValueError("spent time cannot be negative")
        return value

    @classmethod
    def new(cls, name: str, dependencies: Iterable[int] = ()) -> "Task":
        return cls(name=name, depends_on=set(dependencies))

    def change_name(self, name: str) -> None:
        self.name = name

    def change_status(self, status: Status, now: Optional[datetime] = None) -> None:
        """Switch to another status, accounting for time spent while ongoing.

        Every transition is allowed. Leaving ONGOING folds the running span
        into ``spent_time``; entering it starts a new span.
        """
        if status == self.status:
            return

        now = now or utcnow()
        if self.status == Status.ONGOING and self.ongoing_since is not None:
            self.spent_time += max(now - self.ongoing_since, timedelta(0))
            self.ongoing_since = None
        if status == Status.ONGOING:
            self.ongoing_since = now

        self.status = status

    def elapsed_spent_time(self, now: Optional[datetime] = None) -> timedelta:
        """Spent time including the span currently running, if any"""
        if self.status != Status.ONGOING or self.ongoing_since is None:
            return self.spent_time
        now = now or utcnow()
        return self.spent_time + max(now - self.ongoing_since, timedelta(0))

    def age(self, now: Optional[datetime] = None) -> timedelta:
        if self.created_at is None:
            return timedelta(0)
        return (now or utcnow()) - self.created_at

    def apply_metadata(self, bundle: "MetadataBundle") -> None:
        """Overwrite every field the bundle sets; leave the others alone.

        Literals are resolved before anything is assigned so that a bad
        bundle leaves the task untouched.
        """
        for field, value in bundle.resolve().items():
            setattr(self, field, value)


class TaskRegistry(BaseModel):
    """Everything persisted in the task store"""
    next_uid: int = 1
    tasks: Dict[int, Task] = Field(default_factory=dict)
