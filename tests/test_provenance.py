from __future__ import annotations

import json
import time
from pathlib import Path
from typing import Optional

from codex_skill_manager.models import CustomSkillPath, Skill
from codex_skill_manager.platforms import SkillPlatform
from codex_skill_manager.provenance import (
    is_owned,
    origin_path,
    read_origin,
    write_origin,
)

from conftest import write_skill


def _skill(folder: Path, source_key: str, custom: Optional[CustomSkillPath] = None) -> Skill:
    return Skill(
        id=f"{source_key}-{folder.name}",
        name=folder.name,
        display_name=folder.name,
        description="",
        source_key=source_key,
        folder_path=folder,
        manifest_path=folder / "SKILL.md",
        platform=SkillPlatform.CLAUDE,
        custom_path=custom,
    )


def test_write_origin_format(tmp_path: Path) -> None:
    before = int(time.time())
    path = write_origin(tmp_path, "pdf-tools", "1.2.3")

    assert path == tmp_path / ".clawdhub" / "origin.json"
    data = json.loads(path.read_text())
    assert data["slug"] == "pdf-tools"
    assert data["version"] == "1.2.3"
    assert data["source"] == "clawdhub"
    assert isinstance(data["installedAt"], int)
    assert data["installedAt"] >= before


def test_missing_version_is_recorded_as_latest(tmp_path: Path) -> None:
    write_origin(tmp_path, "pdf-tools", None)
    assert json.loads(origin_path(tmp_path).read_text())["version"] == "latest"


def test_read_origin(tmp_path: Path) -> None:
    assert read_origin(tmp_path) is None

    write_origin(tmp_path, "pdf-tools", "2.0.0")
    origin = read_origin(tmp_path)
    assert origin.slug == "pdf-tools"
    assert origin.version == "2.0.0"

    origin_path(tmp_path).write_text(json.dumps({"version": "1.0.0"}))
    assert read_origin(tmp_path) is None


def test_platform_skill_owned_iff_no_origin(tmp_path: Path) -> None:
    folder = write_skill(tmp_path, "mine")
    skill = _skill(folder, "claude")
    assert is_owned(skill) is True

    write_origin(folder, "mine", "1.0.0")
    assert is_owned(skill) is False


def test_custom_path_skill_always_owned(tmp_path: Path) -> None:
    custom = CustomSkillPath(path=tmp_path)
    folder = write_skill(tmp_path, "proj-skill")
    skill = _skill(folder, custom.source_key_for(SkillPlatform.CLAUDE), custom)

    assert is_owned(skill) is True
    write_origin(folder, "proj-skill", "1.0.0")
    assert is_owned(skill) is True
