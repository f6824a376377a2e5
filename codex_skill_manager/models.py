"""Data models for discovered skills and their sources
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from .platforms import SkillPlatform

CUSTOM_KEY_PREFIX = "custom-"
CUSTOM_ROOT_TAG = "root"
NO_DESCRIPTION = "No description available."


@dataclass(frozen=True)
class SkillReference:
    """A markdown document under a skill's `references/` directory"""

    id: str  # absolute path
    name: str
    path: Path


@dataclass(frozen=True)
class SkillStats:
    """Entry counts of a skill's auxiliary subdirectories"""

    references: int = 0
    assets: int = 0
    scripts: int = 0
    templates: int = 0


@dataclass(frozen=True)
class CustomSkillPath:
    """A user-registered directory scanned alongside the platform roots"""

    path: Path
    display_name: str = ""
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    added_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        if not self.display_name:
            object.__setattr__(self, "display_name", Path(self.path).name)

    @property
    def storage_key(self) -> str:
        return CUSTOM_KEY_PREFIX + self.id.hex[:8].lower()

    def source_key_for(self, platform: Optional[SkillPlatform]) -> str:
        """Source key for skills found inside this path.

        Every key is the storage key plus one tag: `root` for skills directly
        under the path, otherwise the platform key. Tags are distinct and
        contain no `-`, so `<key>-<name>` ids from different subdirectories
        never collide.
        """
        if platform is None:
            return f"{self.storage_key}-{CUSTOM_ROOT_TAG}"
        return f"{self.storage_key}-{platform.storage_key}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": str(self.id),
            "path": str(self.path),
            "display_name": self.display_name,
            "added_at": self.added_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CustomSkillPath":
        added_at = data.get("added_at")
        if isinstance(added_at, str):
            added_at = datetime.fromisoformat(added_at)
        elif not isinstance(added_at, datetime):
            added_at = datetime.now()
        raw_id = data.get("id")
        return cls(
            path=Path(data["path"]).expanduser(),
            display_name=data.get("display_name") or "",
            id=uuid.UUID(str(raw_id)) if raw_id else uuid.uuid4(),
            added_at=added_at,
        )


@dataclass(frozen=True)
class Skill:
    """A skill directory discovered by a scan.

    Skills are rebuilt on every scan; nothing mutates them in place.
    """

    id: str
    name: str  # directory basename, the cross-source identity key
    display_name: str
    description: str
    source_key: str
    folder_path: Path
    manifest_path: Path
    references: Tuple[SkillReference, ...] = ()
    stats: SkillStats = field(default_factory=SkillStats)
    platform: Optional[SkillPlatform] = None
    custom_path: Optional[CustomSkillPath] = None

    @property
    def is_from_custom_path(self) -> bool:
        return is_custom_key(self.source_key)

    @property
    def is_from_user_directory(self) -> bool:
        return not self.is_from_custom_path and self.platform is not None


def is_custom_key(source_key: str) -> bool:
    return source_key.startswith(CUSTOM_KEY_PREFIX)


def make_skill_id(source_key: str, name: str) -> str:
    return f"{source_key}-{name}"


@dataclass(frozen=True)
class PublishState:
    """Last successful publish of a skill"""

    last_published_hash: str
    last_published_at: datetime


@dataclass(frozen=True)
class LocalSkillGroup:
    """All loaded copies of one skill name, presented as a single entry"""

    id: str
    skill: Skill
    installed_platforms: FrozenSet[SkillPlatform]
    delete_ids: List[str]


@dataclass(frozen=True)
class ClawdhubOrigin:
    """Provenance recorded when a skill is installed from the registry"""

    slug: str
    version: Optional[str] = None


@dataclass(frozen=True)
class CliStatus:
    """Availability and login state of the clawdhub CLI"""

    is_installed: bool
    is_logged_in: bool
    username: Optional[str] = None
    error_message: Optional[str] = None


class PublishBump(Enum):
    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class ListState(Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


@dataclass
class ScanResult:
    """Result of scanning every configured root"""

    skills: List[Skill] = field(default_factory=list)
    scan_time: Optional[datetime] = None
    errors: List[str] = field(default_factory=list)

    @property
    def total_count(self) -> int:
        return len(self.skills)

    def count_by_source(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for skill in self.skills:
            counts[skill.source_key] = counts.get(skill.source_key, 0) + 1
        return counts
