"""Publish a local skill to the registry and remember what was published."""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from .errors import PublishError
from .hashing import compute_skill_hash
from .models import PublishBump, PublishState, Skill
from .provenance import is_owned
from .publish_state import PublishStateStore
from .runner import ClawdhubCli

logger = logging.getLogger(__name__)

INITIAL_VERSION = "1.0.0"


def bump_version(current: str, bump: PublishBump) -> Optional[str]:
    """Next semantic version, or None unless `current` is exactly `X.Y.Z`."""
    parts = current.split(".")
    if len(parts) != 3 or not all(p.isascii() and p.isdigit() for p in parts):
        return None
    major, minor, patch = (int(p) for p in parts)

    if bump is PublishBump.MAJOR:
        major, minor, patch = major + 1, 0, 0
    elif bump is PublishBump.MINOR:
        minor, patch = minor + 1, 0
    else:
        patch += 1

    return f"{major}.{minor}.{patch}"


def publish_version(latest: Optional[str], bump: PublishBump) -> str:
    """Version to publish next; `1.0.0` when there's no usable prior version."""
    if not latest:
        return INITIAL_VERSION
    return bump_version(latest, bump) or INITIAL_VERSION


class SkillPublisher:
    """Runs `clawdhub publish` and records the published content hash."""

    def __init__(
        self,
        cli: ClawdhubCli,
        state_store: PublishStateStore,
        hasher: Callable[..., str] = compute_skill_hash,
    ):
        self.cli = cli
        self.state_store = state_store
        self.hasher = hasher

    def needs_publish(self, skill: Skill) -> bool:
        """Whether the skill's content differs from its last published hash."""
        current = self.hasher(skill.folder_path)
        if not current:
            return True
        return self.state_store.needs_publish(skill.name, current)

    def publish(
        self,
        skill: Skill,
        bump: PublishBump,
        changelog: str = "",
        tags: Sequence[str] = (),
        published_version: Optional[str] = None,
    ) -> PublishState:
        """Publish and persist the new hash.

        Command failures propagate unchanged and leave the stored state as
        it was.
        """
        if not is_owned(skill):
            raise PublishError(
                f"{skill.name} was installed from the registry and can't be published."
            )

        version = publish_version(published_version, bump)
        logger.info("Publishing %s %s from %s", skill.name, version, skill.folder_path)
        self.cli.publish(skill.folder_path, version, changelog, tags)

        content_hash = self.hasher(skill.folder_path)
        return self.state_store.save(skill.name, content_hash)
