"""Known platform skill roots (Codex, Claude Code, OpenCode, Copilot)."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional


class SkillPlatform(Enum):
    """A tool integration with a fixed skills directory under a base path."""

    CODEX = "codex"
    CLAUDE = "claude"
    OPENCODE = "opencode"
    COPILOT = "copilot"

    @property
    def storage_key(self) -> str:
        return self.value

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def relative_path(self) -> str:
        return _RELATIVE_PATHS[self]

    def root(self, home: Path) -> Path:
        """Default skills root for this platform under the user's home."""
        return self.skills_dir_in(home)

    def skills_dir_in(self, base: Path) -> Path:
        """Platform-shaped skills directory inside an arbitrary base directory."""
        return Path(base) / self.relative_path

    @classmethod
    def from_storage_key(cls, key: str) -> Optional["SkillPlatform"]:
        for platform in cls:
            if platform.storage_key == key:
                return platform
        return None


_LABELS = {
    SkillPlatform.CODEX: "Codex",
    SkillPlatform.CLAUDE: "Claude Code",
    SkillPlatform.OPENCODE: "OpenCode",
    SkillPlatform.COPILOT: "GitHub Copilot",
}

_RELATIVE_PATHS = {
    SkillPlatform.CODEX: ".codex/skills/public",
    SkillPlatform.CLAUDE: ".claude/skills",
    SkillPlatform.OPENCODE: ".config/opencode/skill",
    SkillPlatform.COPILOT: ".copilot/skills",
}
