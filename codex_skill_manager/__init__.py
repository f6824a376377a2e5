"""Codex Skill Manager.

Discover, group, install and publish agent skills across Codex, Claude Code,
OpenCode, Copilot and user-registered directories.
"""

__version__ = "1.0.0"

from .config import ManagerConfig, load_config, save_config
from .errors import (
    AmbiguousSkillArchiveError,
    CommandError,
    InstallError,
    PublishError,
    ScanError,
    SkillManagerError,
)
from .hashing import compute_skill_hash
from .models import (
    CustomSkillPath,
    LocalSkillGroup,
    PublishBump,
    PublishState,
    ScanResult,
    Skill,
    SkillReference,
    SkillStats,
)
from .multi_scanner import MultiSkillScanner
from .platforms import SkillPlatform
from .publisher import bump_version, publish_version
from .store import SkillStore

__all__ = [
    "SkillStore",
    "MultiSkillScanner",
    "ManagerConfig",
    "load_config",
    "save_config",
    "SkillPlatform",
    "Skill",
    "SkillReference",
    "SkillStats",
    "CustomSkillPath",
    "LocalSkillGroup",
    "PublishBump",
    "PublishState",
    "ScanResult",
    "compute_skill_hash",
    "bump_version",
    "publish_version",
    "SkillManagerError",
    "ScanError",
    "AmbiguousSkillArchiveError",
    "InstallError",
    "CommandError",
    "PublishError",
]
