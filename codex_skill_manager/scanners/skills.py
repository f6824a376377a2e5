"""Skill scanner - turns a skills root into `Skill` records."""

import logging
from pathlib import Path
from typing import List, Optional

from ..errors import ScanError
from ..models import (
    NO_DESCRIPTION,
    CustomSkillPath,
    Skill,
    SkillReference,
    SkillStats,
    make_skill_id,
)
from ..platforms import SkillPlatform
from .metadata import format_title, parse_metadata

logger = logging.getLogger(__name__)

MANIFEST_NAME = "SKILL.md"


class SkillScanner:
    """Scan a skills directory for skill metadata."""

    def __init__(
        self,
        skills_dir: Path,
        source_key: str,
        platform: Optional[SkillPlatform] = None,
        custom_path: Optional[CustomSkillPath] = None,
    ):
        self.skills_dir = Path(skills_dir)
        self.source_key = source_key
        self.platform = platform
        self.custom_path = custom_path

    def scan(self) -> List[Skill]:
        """Scan every immediate child of the skills directory.

        A missing root yields no skills. Only a failure to list an existing
        root raises `ScanError`; per-skill read problems fall back to defaults.
        """
        # Directory symlinks have to be dereferenced before listing.
        directory = self.skills_dir.resolve()
        if not directory.exists():
            return []

        try:
            children = sorted(directory.iterdir(), key=lambda p: p.name)
        except OSError as e:
            raise ScanError(self.skills_dir, e.strerror or str(e)) from e

        skills = []
        for skill_path in children:
            if skill_path.name.startswith("."):
                continue
            if not _is_dir(skill_path):
                continue

            skill = self._scan_skill(skill_path)
            if skill:
                skills.append(skill)

        return skills

    def _scan_skill(self, skill_path: Path) -> Optional[Skill]:
        """Scan a single skill directory."""
        manifest = skill_path / MANIFEST_NAME

        # Must have SKILL.md to be a valid skill
        if not _is_file(manifest):
            return None

        try:
            markdown = manifest.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Couldn't read %s: %s", manifest, e)
            markdown = ""

        metadata = parse_metadata(markdown)
        name = skill_path.name
        references = reference_files(skill_path / "references")

        return Skill(
            id=make_skill_id(self.source_key, name),
            name=name,
            display_name=format_title(metadata.name or name),
            description=metadata.description or NO_DESCRIPTION,
            source_key=self.source_key,
            folder_path=skill_path,
            manifest_path=manifest,
            references=tuple(references),
            stats=SkillStats(
                references=len(references),
                assets=count_entries(skill_path / "assets"),
                scripts=count_entries(skill_path / "scripts"),
                templates=count_entries(skill_path / "templates"),
            ),
            platform=self.platform,
            custom_path=self.custom_path,
        )


def count_entries(directory: Path) -> int:
    """Count non-hidden entries of a directory; unreadable or missing is 0."""
    try:
        return sum(1 for item in directory.iterdir() if not item.name.startswith("."))
    except OSError:
        return 0


def reference_files(directory: Path) -> List[SkillReference]:
    """Markdown files directly under `references/`, sorted by title."""
    try:
        items = list(directory.iterdir())
    except OSError:
        return []

    references = []
    for item in items:
        if item.name.startswith(".") or item.suffix.lower() != ".md":
            continue
        if not _is_file(item):
            continue
        path = item.absolute()
        references.append(
            SkillReference(id=str(path), name=format_title(item.stem), path=path)
        )

    references.sort(key=lambda ref: ref.name.casefold())
    return references


def _is_dir(path: Path) -> bool:
    try:
        return path.is_dir()
    except OSError:
        return False


def _is_file(path: Path) -> bool:
    try:
        return path.is_file()
    except OSError:
        return False
