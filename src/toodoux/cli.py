#!/usr/bin/env python3
"""
toodoux - CLI Interface
=======================
Command-line tool for managing personal tasks.

Usage:
    toodoux add fix login bug +backend !high
    toodoux add --done write release notes
    toodoux 3 start
    toodoux 3 edit +frontend dep:1
    toodoux 3 done
    toodoux list --all --content
    toodoux 3 remove
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from rich.console import Console

from . import metadata
from .config import Config
from .errors import ToodouxError, ValidationError
from .manager import TaskManager
from .render import render_tasks, sort_by_status
from .schema import Status, Task

logger = logging.getLogger("toodoux")

STATUS_COMMANDS = {
    "todo": (Status.TODO, "missing or unknown task"),
    "start": (Status.ONGOING, "missing or unknown task to start"),
    "done": (Status.DONE, "missing or unknown task to finish"),
    "cancel": (Status.CANCELLED, "missing or unknown task to cancel"),
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="toodoux",
        description="A modern task / todo / note management tool.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  toodoux add fix bug +backend !high   Add a task in project backend, high priority
  toodoux 3 start                      Start working on task 3
  toodoux 3 edit dep:1 due:2026-11-02  Make task 3 depend on task 1, due in November
  toodoux 3 done                       Mark task 3 as done
  toodoux ls -a                        List every task

Inline tags: !<low|med|high|crit>  +<project>  due:<date>  start:<date>  dep:<uid>
A leading number selects the task to operate on.
        """
    )
    parser.add_argument("-c", "--config", type=Path, help="Non-default config root")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # ADD command
    add_parser = subparsers.add_parser("add", aliases=["a"], help="Add a task")
    state = add_parser.add_mutually_exclusive_group()
    state.add_argument("--start", action="store_true", help="Mark the task as ongoing")
    state.add_argument("--done", action="store_true", help="Mark the task as done")
    add_parser.add_argument("content", nargs="*", help="Name and inline tags of the task")

    # EDIT command
    edit_parser = subparsers.add_parser("edit", aliases=["e", "ed"], help="Edit a task")
    edit_parser.add_argument("content", nargs="*", help="New name and/or inline tags")

    # STATUS commands
    subparsers.add_parser("todo", help="Mark a task as todo")
    subparsers.add_parser("start", help="Mark a task as started")
    subparsers.add_parser("done", help="Mark a task as done")
    subparsers.add_parser("cancel", help="Mark a task as cancelled")

    # REMOVE command
    remove_parser = subparsers.add_parser("remove", aliases=["r", "rm"], help="Remove a task")
    remove_parser.add_argument("-a", "--all", action="store_true", help="Remove all the tasks")

    # LIST command
    list_parser = subparsers.add_parser("list", aliases=["l", "ls"], help="List tasks")
    list_parser.add_argument("-t", "--todo", action="store_true", help="Show todo tasks")
    list_parser.add_argument("-s", "--start", action="store_true", help="Show started tasks")
    list_parser.add_argument("-d", "--done", action="store_true", help="Show done tasks")
    list_parser.add_argument("-c", "--cancelled", action="store_true", help="Show cancelled tasks")
    list_parser.add_argument("-a", "--all", action="store_true", help="Show every task")
    list_parser.add_argument("--content", action="store_true", help="Show dates and dependencies")

    return parser


ALIASES = {"a": "add", "e": "edit", "ed": "edit", "r": "remove", "rm": "remove", "l": "list", "ls": "list"}


def split_task_uid(argv: Sequence[str]) -> Tuple[Optional[int], List[str]]:
    """Pull the optional leading task UID out of the arguments"""
    argv = list(argv)
    skip = False
    for i, arg in enumerate(argv):
        if skip:
            skip = False
        elif arg in ("-c", "--config"):
            skip = True
        elif arg.isdecimal():
            return int(arg), argv[:i] + argv[i + 1:]
        elif not arg.startswith("-"):
            break
    return None, argv


# ========================================
# CORE COMMANDS
# ========================================

def list_tasks(
    console: Console,
    config: Config,
    todo: bool = False,
    start: bool = False,
    done: bool = False,
    cancelled: bool = False,
    show_all: bool = False,
    content: bool = False,
) -> None:
    """List tasks; without any filter only todo and ongoing tasks are shown"""
    if show_all:
        todo = start = done = cancelled = True
    elif not (todo or start or done or cancelled):
        todo = start = True

    shown = {
        Status.TODO: todo,
        Status.ONGOING: start,
        Status.DONE: done,
        Status.CANCELLED: cancelled,
    }

    task_mgr = TaskManager.new_from_config(config)
    tasks = sort_by_status((uid, task) for uid, task in task_mgr.tasks() if shown[task.status])
    render_tasks(console, config, tasks, show_content=content)


def add_task(
    console: Console,
    config: Config,
    content: Sequence[str],
    start: bool = False,
    done: bool = False,
) -> int:
    """Create, register and save a task, then show it. Returns its UID."""
    bundle, name = metadata.from_words(content)
    if not name:
        raise ValidationError("a task needs a name")

    task_mgr = TaskManager.new_from_config(config)
    metadata.validate(bundle, known_uids=task_mgr.uids())

    task = Task.new(name)
    task.apply_metadata(bundle)

    if start:
        task.change_status(Status.ONGOING)
    elif done:
        task.change_status(Status.DONE)

    uid = task_mgr.register_task(task)
    task_mgr.save(config)

    render_tasks(console, config, [(uid, task)])
    return uid


def edit_task(task_mgr: TaskManager, uid: int, content: Sequence[str]) -> Optional[Task]:
    """Apply inline tags and, if any words remain, rename the task"""
    task = task_mgr.get_mut(uid)
    if task is None:
        return None

    bundle, name = metadata.from_words(content)
    metadata.validate(bundle, task_uid=uid, known_uids=task_mgr.uids())

    task.apply_metadata(bundle)
    if name:
        task.change_name(name)
    return task


# ========================================
# DISPATCH
# ========================================

def run_command(console: Console, config: Config, args: argparse.Namespace, task_uid: Optional[int]) -> int:
    command = ALIASES.get(args.command, args.command)
    logger.debug(f"command={command} task={task_uid}")

    if command is None:
        list_tasks(console, config)
        return 0

    if command == "list":
        list_tasks(
            console, config,
            todo=args.todo, start=args.start, done=args.done,
            cancelled=args.cancelled, show_all=args.all, content=args.content,
        )
        return 0

    if command == "add":
        if task_uid is not None:
            console.print(
                "cannot add a task to another one; maybe you were looking for dependencies instead?",
                style="red",
            )
            return 1
        add_task(console, config, args.content, start=args.start, done=args.done)
        return 0

    task_mgr = TaskManager.new_from_config(config)

    if command == "remove" and args.all:
        if task_uid is not None:
            console.print("cannot remove all tasks and a single one at once; drop the UID or --all", style="red")
            return 1
        task_mgr.clear()
        task_mgr.save(config)
        return 0

    task = task_mgr.get_mut(task_uid) if task_uid is not None else None

    if command == "edit":
        if task is None:
            console.print("missing or unknown task to edit", style="red")
            return 1
        edit_task(task_mgr, task_uid, args.content)

    elif command in STATUS_COMMANDS:
        status, missing = STATUS_COMMANDS[command]
        if task is None:
            console.print(missing, style="red")
            return 1
        task.change_status(status)

    elif command == "remove":
        if task is None:
            console.print("missing or unknown task to remove", style="red")
            return 1
        task_mgr.remove_task(task_uid)

    task_mgr.save(config)
    return 0


def main(argv: Optional[Sequence[str]] = None, console: Optional[Console] = None) -> int:
    task_uid, argv = split_task_uid(sys.argv[1:] if argv is None else argv)
    parser = build_parser()
    args, extra = parser.parse_known_args(argv)
    if extra:
        # words given after a flag, as in `add write --done spec`
        takes_words = ALIASES.get(args.command, args.command) in ("add", "edit")
        if not takes_words or any(word.startswith("-") for word in extra):
            parser.error(f"unrecognized arguments: {' '.join(extra)}")
        args.content = [*args.content, *extra]
    if console is None:
        console = Console(highlight=False)

    try:
        config = Config.load(args.config)
        logging.basicConfig(level=logging.DEBUG if args.verbose else config.log_level.upper())
        return run_command(console, config, args, task_uid)
    except ToodouxError as e:
        console.print(f"❌ {e}", style="red", markup=False)
        return 1


if __name__ == "__main__":
    sys.exit(main())
