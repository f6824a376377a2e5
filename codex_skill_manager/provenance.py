"""`.clawdhub/origin.json` - marks a skill as installed from the registry."""

import json
import time
from pathlib import Path
from typing import Optional

from .jsonfile import write_json_atomic
from .models import ClawdhubOrigin, Skill

ORIGIN_DIR = ".clawdhub"
ORIGIN_FILE = "origin.json"
ORIGIN_SOURCE = "clawdhub"
LATEST_VERSION = "latest"


def origin_path(skill_root: Path) -> Path:
    return Path(skill_root) / ORIGIN_DIR / ORIGIN_FILE


def write_origin(skill_root: Path, slug: str, version: Optional[str]) -> Path:
    """Record where an installed skill came from."""
    path = origin_path(skill_root)
    write_json_atomic(
        path,
        {
            "slug": slug,
            "version": version or LATEST_VERSION,
            "source": ORIGIN_SOURCE,
            "installedAt": int(time.time()),
        },
    )
    return path


def read_origin(skill_root: Path) -> Optional[ClawdhubOrigin]:
    """Parse the provenance file; anything without a string slug is ignored."""
    try:
        data = json.loads(origin_path(skill_root).read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None

    if not isinstance(data, dict) or not isinstance(data.get("slug"), str):
        return None
    version = data.get("version")
    return ClawdhubOrigin(
        slug=data["slug"],
        version=version if isinstance(version, str) else None,
    )


def has_origin(skill_root: Path) -> bool:
    return origin_path(skill_root).exists()


def is_owned(skill: Skill) -> bool:
    """Whether the skill was authored locally and may be published.

    Custom-path skills always count as owned; provenance is only tracked in
    the platform roots.
    """
    if skill.is_from_custom_path:
        return True
    return not has_origin(skill.folder_path)
