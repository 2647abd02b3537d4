from datetime import date, timedelta

import pytest

from toodoux.config import Config
from toodoux.errors import LoadError, SaveError
from toodoux.manager import JsonTaskStore, TaskManager
from toodoux.metadata import from_words
from toodoux.schema import Priority, Status, Task


def test_register_allocates_increasing_uids():
    mgr = TaskManager()
    uids = [mgr.register_task(Task.new(f"t{i}")) for i in range(5)]
    assert uids == [1, 2, 3, 4, 5]
    assert len(mgr) == 5


def test_uids_are_never_reused():
    mgr = TaskManager()
    for name in "abc":
        mgr.register_task(Task.new(name))

    assert mgr.remove_task(3).name == "c"
    assert mgr.remove_task(3) is None
    assert mgr.register_task(Task.new("d")) == 4

    mgr.remove_task(2)
    assert mgr.register_task(Task.new("e")) == 5


def test_clear_keeps_the_counter():
    mgr = TaskManager()
    mgr.register_task(Task.new("a"))
    mgr.register_task(Task.new("b"))

    assert mgr.clear() == 2
    assert list(mgr.tasks()) == []
    assert mgr.register_task(Task.new("c")) == 3


def test_get_mut_returns_the_stored_task():
    mgr = TaskManager()
    uid = mgr.register_task(Task.new("a"))

    mgr.get_mut(uid).change_status(Status.DONE)

    assert mgr.get_mut(uid).status == Status.DONE
    assert mgr.get_mut(42) is None


def test_tasks_iterate_in_registration_order():
    mgr = TaskManager()
    for name in ["b", "a", "c"]:
        mgr.register_task(Task.new(name))
    assert [(uid, task.name) for uid, task in mgr.tasks()] == [(1, "b"), (2, "a"), (3, "c")]


def test_missing_store_is_empty(config):
    mgr = TaskManager.new_from_config(config)
    assert list(mgr.tasks()) == []


def test_save_and_load_round_trip(config, now):
    mgr = TaskManager.new_from_config(config)

    bundle, name = from_words(["ship", "it", "!crit", "+release", "due:2026-11-02", "start:2026-10-20"])
    first = Task.new(name)
    first.apply_metadata(bundle)
    first.change_status(Status.ONGOING, now=now)
    first.change_status(Status.DONE, now=now + timedelta(minutes=30))
    mgr.register_task(first)

    second = Task.new("follow up", dependencies=[1])
    second.change_status(Status.ONGOING, now=now)
    mgr.register_task(second)
    mgr.save(config)

    loaded = TaskManager.new_from_config(config)
    assert dict(loaded.tasks()) == {1: first, 2: second}

    task = loaded.get_mut(1)
    assert task.priority == Priority.CRITICAL
    assert task.project == "release"
    assert task.due == date(2026, 11, 2)
    assert task.scheduled == date(2026, 10, 20)
    assert task.spent_time == timedelta(minutes=30)
    assert task.created_at == first.created_at
    assert loaded.get_mut(2).depends_on == {1}
    assert loaded.get_mut(2).ongoing_since == now


def test_counter_survives_save_and_load(config):
    mgr = TaskManager.new_from_config(config)
    mgr.register_task(Task.new("a"))
    mgr.register_task(Task.new("b"))
    mgr.remove_task(2)
    mgr.save(config)

    loaded = TaskManager.new_from_config(config)
    assert loaded.register_task(Task.new("c")) == 3


def test_corrupt_store_fails_to_load(config):
    config.tasks_path().write_text("{not json")
    with pytest.raises(LoadError):
        TaskManager.new_from_config(config)


def test_malformed_registry_fails_to_load(config):
    config.tasks_path().write_text('{"tasks": {"1": {"status": "todo"}}}')
    with pytest.raises(LoadError):
        TaskManager.new_from_config(config)


def test_unwritable_store_fails_to_save(tmp_path):
    (tmp_path / "blocker").write_text("")
    config = Config(root=tmp_path, tasks_file="blocker/tasks.json")

    mgr = TaskManager()
    mgr.register_task(Task.new("a"))
    with pytest.raises(SaveError):
        mgr.save(config)


def test_store_writes_json(tmp_path):
    store = JsonTaskStore(tmp_path / "nested" / "tasks.json")
    mgr = TaskManager(store.load())
    mgr.register_task(Task.new("a"))
    store.save(mgr.registry)

    assert store.path.exists()
    assert '"next_uid": 2' in store.path.read_text()


def test_undecodable_store_fails_to_load(config):
    config.tasks_path().write_bytes(b'{"tasks": {}, "next_uid": 1, "x": "\xff\xfe"}')
    with pytest.raises(LoadError):
        TaskManager.new_from_config(config)
