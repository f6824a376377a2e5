"""Install a downloaded skill archive into one or more skills roots."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from .archive import extract_archive, find_skill_root
from .errors import InstallError
from .models import make_skill_id
from .provenance import write_origin

logger = logging.getLogger(__name__)

Extractor = Callable[[Path, Path], None]


@dataclass(frozen=True)
class InstallDestination:
    """A skills root to install into, and the source key skills there get."""

    root: Path
    storage_key: str


class SkillInstaller:
    """Copies one extracted skill into each destination root.

    Destinations are written independently and in order. The first failure
    stops the install; roots written before it keep the new copy and later
    roots are left untouched.
    """

    def __init__(self, extractor: Extractor = extract_archive):
        self.extractor = extractor

    def install(
        self,
        archive: Path,
        slug: str,
        version: Optional[str],
        destinations: Sequence[InstallDestination],
        *,
        remove_archive: bool = False,
    ) -> str:
        """Install `archive` as `<root>/<slug>` in every destination.

        Returns the skill id the first destination's copy will have.
        """
        validate_slug(slug)
        if not destinations:
            raise InstallError("Choose at least one destination to install into.")

        try:
            with tempfile.TemporaryDirectory(prefix="skill-install-") as tmp:
                extracted = Path(tmp)
                self.extractor(Path(archive), extracted)
                skill_root = find_skill_root(extracted)
                self._copy_to_destinations(skill_root, slug, version, destinations)
        finally:
            if remove_archive:
                Path(archive).unlink(missing_ok=True)

        return make_skill_id(destinations[0].storage_key, slug)

    def _copy_to_destinations(
        self,
        skill_root: Path,
        slug: str,
        version: Optional[str],
        destinations: Sequence[InstallDestination],
    ) -> None:
        completed: List[Path] = []
        for destination in destinations:
            final_path = destination.root / slug
            try:
                destination.root.mkdir(parents=True, exist_ok=True)
                remove_existing(final_path)
                shutil.copytree(skill_root, final_path, symlinks=True)
                write_origin(final_path, slug, version)
            except OSError as e:
                logger.error("Install of %s into %s failed: %s", slug, destination.root, e)
                raise InstallError(
                    f"Couldn't install {slug} into {destination.root}: {e}",
                    completed=completed,
                    failed=destination.root,
                ) from e
            logger.info("Installed %s into %s", slug, final_path)
            completed.append(destination.root)


def validate_slug(slug: str) -> None:
    """Reject slugs that aren't a single directory name inside a skills root."""
    separators = {"/", "\\", os.sep} | ({os.altsep} if os.altsep else set())
    if not slug or slug in (".", "..") or any(sep in slug for sep in separators):
        raise InstallError(f"Invalid skill slug: {slug!r}")


def remove_existing(path: Path) -> None:
    """Remove a file, symlink or directory tree if present."""
    if path.is_symlink() or path.is_file():
        path.unlink()
    elif path.is_dir():
        shutil.rmtree(path)
