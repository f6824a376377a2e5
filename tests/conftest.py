"""Shared pytest fixtures for skill-manager tests."""

import zipfile
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest

from codex_skill_manager.config import ManagerConfig
from codex_skill_manager.errors import CommandError
from codex_skill_manager.platforms import SkillPlatform
from codex_skill_manager.runner import ClawdhubCli
from codex_skill_manager.store import SkillStore


def write_skill(
    root: Path,
    name: str,
    *,
    title: Optional[str] = None,
    description: Optional[str] = None,
    files: Optional[Dict[str, str]] = None,
) -> Path:
    """Create `root/name/SKILL.md` (plus extra files) and return the skill dir."""
    skill_dir = root / name
    skill_dir.mkdir(parents=True, exist_ok=True)

    frontmatter = []
    if title is not None:
        frontmatter.append(f"name: {title}")
    if description is not None:
        frontmatter.append(f"description: {description}")
    header = "---\n" + "\n".join(frontmatter) + "\n---\n\n" if frontmatter else ""
    (skill_dir / "SKILL.md").write_text(f"{header}# {name}\n\nBody text.\n")

    for relative, content in (files or {}).items():
        path = skill_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)

    return skill_dir


def make_zip(path: Path, entries: Dict[str, str]) -> Path:
    """Build a zip archive from `{archive name: text content}`."""
    with zipfile.ZipFile(path, "w") as zf:
        for name, content in entries.items():
            zf.writestr(name, content)
    return path


class FakeRunner:
    """Records invocations and replays canned output instead of spawning."""

    def __init__(self, output: str = "", error: Optional[CommandError] = None):
        self.output = output
        self.error = error
        self.calls: List[Tuple[str, List[str]]] = []

    def run(self, executable, arguments, env=None):
        self.calls.append((executable, list(arguments)))
        if self.error:
            raise self.error
        return self.output


class FakeCli(ClawdhubCli):
    """Clawdhub CLI with a fixed bunx path."""

    def __init__(self, runner: FakeRunner, home: Path, bunx: Optional[str] = "/fake/bunx"):
        super().__init__(runner, home=home)
        self.bunx = bunx

    def resolve_bunx(self):
        return self.bunx


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """An empty synthetic home directory."""
    home = tmp_path / "home"
    home.mkdir()
    return home


@pytest.fixture
def config(tmp_path: Path, home: Path) -> ManagerConfig:
    return ManagerConfig(home=home, data_dir=tmp_path / "data")


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner(output="published\n")


@pytest.fixture
def store(config: ManagerConfig, fake_runner: FakeRunner) -> SkillStore:
    return SkillStore(config, cli=FakeCli(fake_runner, config.home))


@pytest.fixture
def codex_root(home: Path) -> Path:
    return SkillPlatform.CODEX.root(home)


@pytest.fixture
def claude_root(home: Path) -> Path:
    return SkillPlatform.CLAUDE.root(home)
