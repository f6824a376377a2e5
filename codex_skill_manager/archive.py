"""Zip extraction and skill-root detection for downloaded archives."""

import shutil
import zipfile
from pathlib import Path

from .errors import AmbiguousSkillArchiveError, ArchiveError
from .scanners.skills import MANIFEST_NAME


def extract_archive(archive: Path, destination: Path) -> None:
    """Extract a zip archive, rejecting entries that escape `destination`."""
    destination.mkdir(parents=True, exist_ok=True)
    base = destination.resolve()

    try:
        with zipfile.ZipFile(archive, "r") as zf:
            for info in zf.infolist():
                name = info.filename
                if not name:
                    continue
                if name.startswith("/") or name.startswith("\\"):
                    raise ArchiveError(f"Archive contains an absolute path entry: {name!r}")
                target = (destination / name).resolve()
                if target != base and base not in target.parents:
                    raise ArchiveError(f"Archive contains an invalid path entry: {name!r}")

                if info.is_dir():
                    target.mkdir(parents=True, exist_ok=True)
                    continue

                target.parent.mkdir(parents=True, exist_ok=True)
                with zf.open(info, "r") as src, target.open("wb") as out:
                    shutil.copyfileobj(src, out)
    except zipfile.BadZipFile as e:
        raise ArchiveError(f"Couldn't extract {archive}: {e}") from e
    except OSError as e:
        raise ArchiveError(f"Couldn't extract {archive}: {e}") from e


def find_skill_root(root: Path) -> Path:
    """Locate the skill inside an extracted archive.

    The extraction root itself if it holds `SKILL.md`, otherwise the single
    non-hidden subdirectory that does. Zero or several candidates raise
    `AmbiguousSkillArchiveError`.
    """
    if (root / MANIFEST_NAME).is_file():
        return root

    try:
        children = sorted(root.iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise ArchiveError(f"Couldn't read extracted archive: {e}") from e

    candidates = [
        child
        for child in children
        if not child.name.startswith(".")
        and child.is_dir()
        and (child / MANIFEST_NAME).is_file()
    ]

    if len(candidates) != 1:
        raise AmbiguousSkillArchiveError(len(candidates))
    return candidates[0]
