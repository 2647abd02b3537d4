from pathlib import Path

import pytest
import yaml

from toodoux.config import CONFIG_FILE, Config, default_root
from toodoux.errors import ConfigError
from toodoux.schema import Status


def test_missing_config_writes_defaults(tmp_path):
    config = Config.load(tmp_path)

    assert config.root == tmp_path.resolve()
    assert config.description_col_name == "Description"
    assert config.tasks_path() == tmp_path.resolve() / "tasks.json"

    written = yaml.safe_load((tmp_path / CONFIG_FILE).read_text())
    assert written["wip_alias"] == "WIP"
    assert "root" not in written


def test_config_overrides(tmp_path):
    (tmp_path / CONFIG_FILE).write_text(
        "description_col_name: What\n"
        "todo_alias: TO DO\n"
        "log_level: debug\n"
    )
    config = Config.load(tmp_path)

    assert config.description_col_name == "What"
    assert config.status_alias(Status.TODO) == "TO DO"
    assert config.status_alias(Status.CANCELLED) == "CANCELLED"
    assert config.log_level == "DEBUG"


def test_absolute_tasks_file(tmp_path):
    target = tmp_path / "elsewhere" / "tasks.json"
    config = Config(root=tmp_path / "root", tasks_file=str(target))
    assert config.tasks_path() == target


@pytest.mark.parametrize("content", [
    "uid_col_name: [unclosed\n",
    "- just\n- a list\n",
    "log_level: LOUD\n",
    "uid_col_name: {a: 1}\n",
])
def test_bad_config(tmp_path, content):
    (tmp_path / CONFIG_FILE).write_text(content)
    with pytest.raises(ConfigError):
        Config.load(tmp_path)


def test_root_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("TOODOUX_CONFIG_DIR", str(tmp_path))
    assert default_root() == tmp_path.resolve()

    monkeypatch.delenv("TOODOUX_CONFIG_DIR")
    assert default_root() == (Path.home() / ".config" / "toodoux").resolve()


def test_undecodable_config(tmp_path):
    (tmp_path / CONFIG_FILE).write_bytes(b"todo_alias: \xff\xfe\n")
    with pytest.raises(ConfigError):
        Config.load(tmp_path)
