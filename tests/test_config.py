from __future__ import annotations

from pathlib import Path

import yaml

from codex_skill_manager.config import (
    DATA_DIR_ENV,
    ManagerConfig,
    default_data_dir,
    load_config,
    save_config,
)
from codex_skill_manager.models import CustomSkillPath


def test_default_data_dir(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.delenv(DATA_DIR_ENV, raising=False)
    assert default_data_dir(tmp_path) == tmp_path / ".config" / "codex-skill-manager"

    monkeypatch.setenv(DATA_DIR_ENV, str(tmp_path / "elsewhere"))
    assert default_data_dir(tmp_path) == tmp_path / "elsewhere"


def test_missing_config_gives_defaults(tmp_path: Path) -> None:
    config = load_config(data_dir=tmp_path / "data", home=tmp_path)
    assert config.custom_paths == []
    assert config.state_dir == tmp_path / "data" / "skill-state"


def test_save_and_load_custom_paths(tmp_path: Path) -> None:
    data_dir = tmp_path / "data"
    custom = CustomSkillPath(path=tmp_path / "project", display_name="Project")
    config = ManagerConfig(home=tmp_path, data_dir=data_dir, custom_paths=[custom])
    config.command_timeout = 30

    path = save_config(config)
    assert path == data_dir / "config.yaml"
    assert "custom_paths" in yaml.safe_load(path.read_text())

    loaded = load_config(data_dir=data_dir, home=tmp_path)
    assert len(loaded.custom_paths) == 1
    restored = loaded.custom_paths[0]
    assert restored.id == custom.id
    assert restored.storage_key == custom.storage_key
    assert restored.path == custom.path
    assert restored.display_name == "Project"
    assert restored.added_at == custom.added_at
    assert loaded.command_timeout == 30


def test_custom_path_lookup(tmp_path: Path) -> None:
    custom = CustomSkillPath(path=tmp_path / "project")
    config = ManagerConfig(home=tmp_path, data_dir=tmp_path, custom_paths=[custom])

    assert config.custom_path(custom.storage_key) is custom
    assert config.custom_path(str(custom.id)) is custom
    assert config.custom_path(str(tmp_path / "project")) is custom
    assert config.custom_path("custom-00000000") is None


def test_invalid_yaml_is_ignored(tmp_path: Path) -> None:
    (tmp_path / "config.yaml").write_text("custom_paths: [unclosed\n")
    config = load_config(data_dir=tmp_path, home=tmp_path)
    assert config.custom_paths == []


def test_bad_entries_are_skipped(tmp_path: Path) -> None:
    (tmp_path / "config.yaml").write_text(
        yaml.safe_dump(
            {
                "custom_paths": [
                    {"display_name": "no path"},
                    "just a string",
                    {"path": str(tmp_path / "ok"), "id": "not-a-uuid"},
                    {"path": str(tmp_path / "good")},
                ],
                "command_timeout": -5,
            }
        )
    )

    config = load_config(data_dir=tmp_path, home=tmp_path)

    assert [c.path for c in config.custom_paths] == [tmp_path / "good"]
    assert config.custom_paths[0].display_name == "good"
    assert config.command_timeout == 120


def test_non_mapping_config_is_ignored(tmp_path: Path) -> None:
    (tmp_path / "config.yaml").write_text("- a\n- b\n")
    assert load_config(data_dir=tmp_path, home=tmp_path).custom_paths == []
