"""
toodoux - Inline Metadata
=========================
Extract structured fields from the words of a task description.

    fix login bug +backend !high dep:3 due:2026-11-02

yields a bundle (project ``backend``, priority ``high``, dependency on
task 3, due date) and the residual name ``fix login bug``.

Recognized tags:
    !<level>        priority (l/low, m/med/medium, h/high, c/crit/critical)
    +<project>      project
    due:<date>      due date (YYYY-MM-DD)
    start:<date>    scheduled start date (YYYY-MM-DD)
    dep:<uid>       dependency on another task (accumulates)
"""

import logging
import re
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from pydantic import BaseModel, Field

from .errors import InvalidDependency, InvalidValue
from .schema import Priority

logger = logging.getLogger("toodoux")

DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

PRIORITY = "priority"
PROJECT = "project"
DUE = "due"
SCHEDULED = "scheduled"
DEPENDENCY = "dependency"

# (prefix, kind) in matching order
TAG_PREFIXES: Tuple[Tuple[str, str], ...] = (
    ("!", PRIORITY),
    ("+", PROJECT),
    ("due:", DUE),
    ("start:", SCHEDULED),
    ("dep:", DEPENDENCY),
)


class MetadataBundle(BaseModel):
    """Sparse set of metadata found in a list of words.

    Values are kept as typed by the user; ``resolve`` converts them.
    """
    priority: Optional[str] = None
    project: Optional[str] = None
    due: Optional[str] = None
    scheduled: Optional[str] = None
    dependencies: Set[str] = Field(default_factory=set)

    def is_empty(self) -> bool:
        return (
            self.priority is None
            and self.project is None
            and self.due is None
            and self.scheduled is None
            and not self.dependencies
        )

    def dependency_uids(self) -> Set[int]:
        return {_parse_uid(dep) for dep in self.dependencies}

    def resolve(self) -> Dict[str, Any]:
        """Task fields set by this bundle, converted to their types.

        Raises InvalidValue on the first literal that does not convert.
        """
        fields: Dict[str, Any] = {}
        if self.priority is not None:
            fields["priority"] = Priority.from_token(self.priority)
        if self.project is not None:
            fields["project"] = self.project
        if self.due is not None:
            fields["due"] = _parse_date(self.due)
        if self.scheduled is not None:
            fields["scheduled"] = _parse_date(self.scheduled)
        if self.dependencies:
            fields["depends_on"] = self.dependency_uids()
        return fields


def classify(token: str) -> Optional[Tuple[str, str]]:
    """Return ``(kind, value)`` if the token is a tag, None if it is content.

    A bare prefix (``!``, ``+``, ``due:``) is content.
    """
    for prefix, kind in TAG_PREFIXES:
        if token.startswith(prefix) and len(token) > len(prefix):
            return kind, token[len(prefix):]
    return None


def from_words(words: Iterable[str]) -> Tuple[MetadataBundle, str]:
    """Split words into a metadata bundle and the residual task name.

    Tags may appear anywhere. For repeated tags the last one wins, except
    dependencies which are all kept.
    """
    bundle = MetadataBundle()
    name: List[str] = []

    for word in words:
        tag = classify(word)
        if tag is None:
            name.append(word)
            continue

        kind, value = tag
        logger.debug(f"tag {word!r} -> {kind}={value!r}")
        if kind == PRIORITY:
            bundle.priority = value
        elif kind == PROJECT:
            bundle.project = value
        elif kind == DUE:
            bundle.due = value
        elif kind == SCHEDULED:
            bundle.scheduled = value
        elif kind == DEPENDENCY:
            bundle.dependencies.add(value)

    return bundle, " ".join(name)


def validate(
    bundle: MetadataBundle,
    task_uid: Optional[int] = None,
    known_uids: Optional[Iterable[int]] = None,
) -> None:
    """Check a bundle before it is applied to a task.

    Args:
        bundle: metadata produced by ``from_words``
        task_uid: UID of the task being edited, to reject self dependencies
        known_uids: when given, dependencies must name one of these tasks

    Raises:
        InvalidValue: a literal does not convert (priority, date, UID)
        InvalidDependency: self dependency or dependency on an unknown task
    """
    bundle.resolve()

    known = set(known_uids) if known_uids is not None else None
    for uid in sorted(bundle.dependency_uids()):
        if task_uid is not None and uid == task_uid:
            raise InvalidDependency(uid, "a task cannot depend on itself")
        if known is not None and uid not in known:
            raise InvalidDependency(uid, "no such task")


def _parse_date(value: str) -> date:
    if not DATE_RE.fullmatch(value):
        raise InvalidValue(value, "expected a date as YYYY-MM-DD")
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as e:
        raise InvalidValue(value, "expected a date as YYYY-MM-DD") from e


def _parse_uid(value: str) -> int:
    if not value.isdecimal() or int(value) < 1:
        raise InvalidValue(value, "expected a positive task UID")
    return int(value)
