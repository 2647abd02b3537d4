"""
toodoux - Task Rendering
========================
Aligned, colored task listings.

Rendering happens in two passes. The first one turns tasks into plain
text cells and folds over them to get column widths and the set of
columns to show. The second one pads the cells and decorates them with
``rich`` styles, so styling never changes the alignment.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from rich.console import Console
from rich.text import Text

from .config import Config
from .schema import Priority, Status, Task, utcnow

SEP = " "


class Column(str, Enum):
    UID = "uid"
    AGE = "age"
    SPENT = "spent"
    PRIORITY = "priority"
    PROJECT = "project"
    STATUS = "status"
    DESCRIPTION = "description"


# Columns shown only when at least one row has a value for them
OPTIONAL_COLUMNS = (Column.SPENT, Column.PRIORITY, Column.PROJECT)

PRIORITY_LABELS: Dict[Priority, str] = {
    Priority.LOW: "LOW",
    Priority.MEDIUM: "MED",
    Priority.HIGH: "HIGH",
    Priority.CRITICAL: "CRIT",
}

PRIORITY_STYLES: Dict[Priority, str] = {
    Priority.LOW: "dim bright_black",
    Priority.MEDIUM: "blue",
    Priority.HIGH: "red",
    Priority.CRITICAL: "black on bright_red",
}

STATUS_STYLES: Dict[Status, str] = {
    Status.TODO: "bold magenta",
    Status.ONGOING: "bold green",
    Status.DONE: "dim bright_black",
    Status.CANCELLED: "dim bright_red",
}


def friendly_duration(dur: timedelta) -> str:
    """Render a duration with the coarsest readable unit.

    >>> friendly_duration(timedelta(seconds=90))
    '1min'
    >>> friendly_duration(timedelta(days=100))
    '3m'
    """
    seconds = max(int(dur.total_seconds()), 0)
    minutes = seconds // 60
    hours = minutes // 60
    days = hours // 24
    weeks = days // 7

    if minutes < 1:
        return f"{seconds}s"
    if hours < 1:
        return f"{minutes}min"
    if days < 1:
        return f"{hours}h"
    if weeks < 2:
        return f"{days}d"
    if weeks < 4:
        return f"{weeks}w"
    return f"{weeks // 4}m"


def column_label(config: Config, column: Column) -> str:
    return {
        Column.UID: config.uid_col_name,
        Column.AGE: config.age_col_name,
        Column.SPENT: config.spent_col_name,
        Column.PRIORITY: config.prio_col_name,
        Column.PROJECT: config.project_col_name,
        Column.STATUS: config.status_col_name,
        Column.DESCRIPTION: config.description_col_name,
    }[column]


@dataclass
class Row:
    """Plain text of one task, before any styling"""
    uid: int
    task: Task
    cells: Dict[Column, str]


@dataclass
class DisplayOptions:
    """Column widths and the columns to show for a set of rows"""
    widths: Dict[Column, int] = field(default_factory=dict)
    columns: List[Column] = field(default_factory=list)

    @classmethod
    def from_rows(cls, config: Config, rows: Iterable[Row]) -> "DisplayOptions":
        widths = {column: len(column_label(config, column)) for column in Column}
        used = {column: False for column in OPTIONAL_COLUMNS}

        for row in rows:
            for column, text in row.cells.items():
                widths[column] = max(widths[column], len(text))
            for column in OPTIONAL_COLUMNS:
                used[column] = used[column] or bool(row.cells[column])

        columns = [c for c in Column if c not in used or used[c]]
        return cls(widths=widths, columns=columns)

    def shows(self, column: Column) -> bool:
        return column in self.columns


def build_row(config: Config, uid: int, task: Task, now: datetime) -> Row:
    spent = task.elapsed_spent_time(now)
    cells = {
        Column.UID: str(uid),
        Column.AGE: friendly_duration(task.age(now)),
        Column.SPENT: friendly_duration(spent) if spent else "",
        Column.PRIORITY: PRIORITY_LABELS[task.priority] if task.priority else "",
        Column.PROJECT: task.project or "",
        Column.STATUS: config.status_alias(task.status),
        Column.DESCRIPTION: task.name,
    }
    return Row(uid=uid, task=task, cells=cells)


def build_rows(
    config: Config,
    tasks: Iterable[Tuple[int, Task]],
    now: Optional[datetime] = None,
) -> List[Row]:
    now = now or utcnow()
    return [build_row(config, uid, task, now) for uid, task in tasks]


def sort_by_status(tasks: Iterable[Tuple[int, Task]]) -> List[Tuple[int, Task]]:
    """Stable sort on status precedence; ties keep their order"""
    return sorted(tasks, key=lambda pair: pair[1].status.rank)


# ========================================
# DECORATION
# ========================================

def _cell_style(row: Row, column: Column, parity: bool) -> str:
    task = row.task

    if column == Column.STATUS:
        return STATUS_STYLES[task.status]

    if column == Column.DESCRIPTION:
        if task.status == Status.TODO:
            return "bright_white on black" if parity else "bright_white on bright_black"
        if task.status == Status.ONGOING:
            return "black on bright_green"
        if task.status == Status.DONE:
            return "dim bright_black on black"
        return "dim strike bright_black on black"

    if column == Column.SPENT:
        return "blue" if task.status == Status.ONGOING else "dim bright_black"

    if column == Column.PRIORITY and task.priority:
        return PRIORITY_STYLES[task.priority]

    if column == Column.PROJECT:
        return "italic"

    return ""


def header_text(config: Config, opts: DisplayOptions) -> Text:
    line = Text()
    for column in opts.columns:
        line.append(SEP)
        line.append(column_label(config, column).ljust(opts.widths[column]), style="underline")
    return line


def row_text(row: Row, opts: DisplayOptions, parity: bool) -> Text:
    line = Text()
    for column in opts.columns:
        line.append(SEP)
        line.append(row.cells[column].ljust(opts.widths[column]), style=_cell_style(row, column, parity))
    return line


def content_text(row: Row, opts: DisplayOptions) -> Optional[Text]:
    """Detail line with dates and dependencies, None if there is nothing to show"""
    task = row.task
    details = []
    if task.scheduled:
        details.append(f"start {task.scheduled.isoformat()}")
    if task.due:
        details.append(f"due {task.due.isoformat()}")
    if task.depends_on:
        details.append("depends on " + ", ".join(str(uid) for uid in sorted(task.depends_on)))
    if not details:
        return None

    indent = len(SEP) + opts.widths[Column.UID] + len(SEP)
    return Text(" " * indent + "↳ " + "; ".join(details), style="dim")


def render_tasks(
    console: Console,
    config: Config,
    tasks: Iterable[Tuple[int, Task]],
    now: Optional[datetime] = None,
    show_content: bool = False,
) -> DisplayOptions:
    """Print a header and one aligned line per task"""
    rows = build_rows(config, tasks, now)
    opts = DisplayOptions.from_rows(config, rows)

    console.print(header_text(config, opts), soft_wrap=True)

    parity = True
    for row in rows:
        console.print(row_text(row, opts, parity), soft_wrap=True)
        if show_content:
            detail = content_text(row, opts)
            if detail is not None:
                console.print(detail, soft_wrap=True)
        parity = not parity

    return opts
