"""Exception types raised by the skill manager."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional


class SkillManagerError(RuntimeError):
    """Base class for skill manager failures."""


class ScanError(SkillManagerError):
    """Raised when an existing skills root can't be enumerated."""

    def __init__(self, root: Path, reason: str):
        super().__init__(f"Couldn't read skills directory {root}: {reason}")
        self.root = root


class ArchiveError(SkillManagerError):
    """Raised when a skill archive can't be extracted."""


class AmbiguousSkillArchiveError(ArchiveError):
    """Raised when an archive doesn't contain exactly one skill root."""

    def __init__(self, candidates: int):
        if candidates == 0:
            detail = "no SKILL.md found"
        else:
            detail = f"{candidates} directories contain SKILL.md"
        super().__init__(f"Couldn't locate the skill root in archive ({detail}).")
        self.candidates = candidates


class InstallError(SkillManagerError):
    """Raised when an install fails.

    Destinations listed in `completed` were written before the failure and
    are left in place; destinations after `failed` were never attempted.
    """

    def __init__(
        self,
        message: str,
        *,
        completed: Optional[List[Path]] = None,
        failed: Optional[Path] = None,
    ):
        super().__init__(message)
        self.completed = list(completed or [])
        self.failed = failed


class CommandError(SkillManagerError):
    """Raised when an external command exits non-zero or can't be started."""

    def __init__(self, message: str, *, returncode: Optional[int] = None, output: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.output = output


class PublishError(SkillManagerError):
    """Raised when publishing can't be attempted."""
