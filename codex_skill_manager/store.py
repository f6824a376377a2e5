"""SkillStore - owns the loaded skill list and drives every mutation.

Mutations (install, delete, publish, custom path changes) touch the
filesystem first and then reload everything; skill records are never
patched in place.
"""

from __future__ import annotations

import logging
import shutil
import threading
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Set

from .config import ManagerConfig, save_config
from .errors import InstallError, ScanError
from .grouping import (
    DEFAULT_PREFERENCE,
    custom_path_groups,
    group_local_skills,
    platform_groups,
)
from .hashing import compute_skill_hash
from .installer import InstallDestination, SkillInstaller, validate_slug
from .models import (
    CliStatus,
    CustomSkillPath,
    ListState,
    LocalSkillGroup,
    PublishBump,
    PublishState,
    ScanResult,
    Skill,
)
from .multi_scanner import MultiSkillScanner
from .platforms import SkillPlatform
from .provenance import is_owned, read_origin
from .publish_state import PublishStateStore
from .publisher import SkillPublisher, bump_version
from .registry import RegistryClient
from .runner import ClawdhubCli, CommandRunner
from .scanners.metadata import strip_frontmatter

logger = logging.getLogger(__name__)


class SkillStore:
    """Single owner of the loaded skills.

    `load_skills` is serialised: concurrent callers wait for each other and
    the list is swapped in one assignment, so readers never see a partial
    reload.
    """

    def __init__(
        self,
        config: ManagerConfig,
        *,
        cli: Optional[ClawdhubCli] = None,
        installer: Optional[SkillInstaller] = None,
        state_store: Optional[PublishStateStore] = None,
        scanner: Optional[MultiSkillScanner] = None,
    ):
        self.config = config
        self.cli = cli or ClawdhubCli(CommandRunner(config.command_timeout), home=config.home)
        self.installer = installer or SkillInstaller()
        self.state_store = state_store or PublishStateStore(config.state_dir)
        self.scanner = scanner or MultiSkillScanner(config)
        self.publisher = SkillPublisher(self.cli, self.state_store)

        self.skills: List[Skill] = []
        self.list_state = ListState.IDLE
        self.list_error: Optional[str] = None
        self.last_scan: Optional[ScanResult] = None
        self._reload_lock = threading.Lock()

    # ── Loading ─────────────────────────────────────────────

    def load_skills(self, parallel: bool = True) -> ListState:
        """Rescan every root and replace the skill list.

        If a root can't be read the previous list is kept and the state
        becomes FAILED with a readable message.
        """
        with self._reload_lock:
            self.list_state = ListState.LOADING
            try:
                result = self.scanner.scan_all(parallel=parallel)
            except ScanError as e:
                logger.error("Reload failed: %s", e)
                self.list_error = str(e)
                self.list_state = ListState.FAILED
                return self.list_state

            for error in result.errors:
                logger.warning(error)
            self.skills = result.skills
            self.last_scan = result
            self.list_error = None
            self.list_state = ListState.LOADED
            return self.list_state

    def skill_by_id(self, skill_id: str) -> Optional[Skill]:
        return next((s for s in self.skills if s.id == skill_id), None)

    def skills_named(self, name: str) -> List[Skill]:
        return [s for s in self.skills if s.name == name]

    def read_markdown(self, skill: Skill) -> str:
        """Manifest body with front matter removed."""
        return strip_frontmatter(skill.manifest_path.read_text(encoding="utf-8"))

    def read_reference(self, path: Path) -> str:
        return strip_frontmatter(Path(path).read_text(encoding="utf-8"))

    # ── Identity and grouping ───────────────────────────────

    def is_owned(self, skill: Skill) -> bool:
        return is_owned(skill)

    def origin_slug(self, skill: Skill) -> Optional[str]:
        origin = read_origin(skill.folder_path)
        return origin.slug if origin else None

    def is_installed(self, slug: str, platform: Optional[SkillPlatform] = None) -> bool:
        return any(
            s.name == slug and (platform is None or s.platform == platform)
            for s in self.skills
        )

    def installed_platforms(self, slug: str) -> Set[SkillPlatform]:
        return {s.platform for s in self.skills if s.name == slug and s.platform is not None}

    def grouped_local_skills(
        self,
        visible: Optional[Iterable[Skill]] = None,
        preference: Sequence[SkillPlatform] = DEFAULT_PREFERENCE,
    ) -> List[LocalSkillGroup]:
        """Group visible skills while reporting platforms from the full list."""
        visible = self.skills if visible is None else list(visible)
        return group_local_skills(visible, self.skills, preference)

    def platform_groups(self) -> List[LocalSkillGroup]:
        return platform_groups(self.skills)

    def custom_path_groups(self, custom_path: CustomSkillPath) -> List[LocalSkillGroup]:
        return custom_path_groups(self.skills, custom_path)

    # ── Mutations ───────────────────────────────────────────

    def delete_skills(self, ids: Iterable[str]) -> List[str]:
        """Remove the folders of the given skills, then reload.

        Returns the ids that couldn't be removed.
        """
        failed: List[str] = []
        for skill_id in ids:
            skill = self.skill_by_id(skill_id)
            if not skill:
                continue
            try:
                shutil.rmtree(skill.folder_path)
            except OSError as e:
                logger.error("Couldn't delete %s: %s", skill.folder_path, e)
                failed.append(skill_id)
        self.load_skills()
        return failed

    def destinations_for(self, platforms: Iterable[SkillPlatform]) -> List[InstallDestination]:
        return [
            InstallDestination(root=p.root(self.config.home), storage_key=p.storage_key)
            for p in platforms
        ]

    def install_archive(
        self,
        archive: Path,
        slug: str,
        version: Optional[str],
        platforms: Sequence[SkillPlatform],
        *,
        remove_archive: bool = False,
    ) -> str:
        """Install a local archive into the platform roots, then reload.

        The list is reloaded even when the install fails part-way so the
        destinations that were written show up.
        """
        destinations = self.destinations_for(platforms)
        try:
            return self.installer.install(
                archive, slug, version, destinations, remove_archive=remove_archive
            )
        finally:
            self.load_skills()

    def install_remote_skill(
        self,
        slug: str,
        client: RegistryClient,
        platforms: Sequence[SkillPlatform],
        version: Optional[str] = None,
    ) -> str:
        """Download from the registry and install into each platform root."""
        validate_slug(slug)
        if not platforms:
            raise InstallError("Choose at least one platform to install into.")
        version = version or client.fetch_latest_version(slug)
        archive = client.download(slug, version)
        return self.install_archive(archive, slug, version, platforms, remove_archive=True)

    # ── Publishing ──────────────────────────────────────────

    def skill_hash(self, skill: Skill) -> str:
        return compute_skill_hash(skill.folder_path)

    def skill_needs_publish(self, skill: Skill) -> bool:
        return self.publisher.needs_publish(skill)

    def publish_state(self, skill: Skill) -> Optional[PublishState]:
        return self.state_store.load(skill.name)

    def publish_skill(
        self,
        skill: Skill,
        bump: PublishBump,
        changelog: str = "",
        tags: Sequence[str] = (),
        published_version: Optional[str] = None,
    ) -> PublishState:
        """Publish, then reload so the list reflects the published content."""
        state = self.publisher.publish(skill, bump, changelog, tags, published_version)
        self.load_skills()
        return state

    def next_version(self, current: str, bump: PublishBump) -> Optional[str]:
        return bump_version(current, bump)

    def fetch_clawdhub_status(self) -> CliStatus:
        return self.cli.whoami()

    # ── Custom paths ────────────────────────────────────────

    def add_custom_path(self, path: Path, display_name: Optional[str] = None) -> CustomSkillPath:
        path = Path(path).expanduser().absolute()
        existing = self.config.custom_path(str(path))
        if existing:
            return existing
        custom = CustomSkillPath(path=path, display_name=display_name or "")
        self.config.custom_paths.append(custom)
        save_config(self.config)
        self.load_skills()
        return custom

    def remove_custom_path(self, key: str) -> Optional[CustomSkillPath]:
        custom = self.config.custom_path(key)
        if not custom:
            return None
        self.config.custom_paths = [c for c in self.config.custom_paths if c.id != custom.id]
        save_config(self.config)
        self.load_skills()
        return custom
