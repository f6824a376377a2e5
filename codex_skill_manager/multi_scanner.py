"""Multi-root scanner - merges platform roots and custom paths."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Set

from .config import ManagerConfig
from .models import CustomSkillPath, ScanResult, Skill
from .platforms import SkillPlatform
from .scanners.skills import SkillScanner


@dataclass(frozen=True)
class ScanRoot:
    """One directory to scan and the identity its skills receive."""

    path: Path
    source_key: str
    platform: Optional[SkillPlatform] = None
    custom_path: Optional[CustomSkillPath] = None

    def scanner(self) -> SkillScanner:
        return SkillScanner(
            self.path,
            self.source_key,
            platform=self.platform,
            custom_path=self.custom_path,
        )


def platform_roots(home: Path) -> List[ScanRoot]:
    return [
        ScanRoot(platform.root(home), platform.storage_key, platform)
        for platform in SkillPlatform
    ]


def custom_path_roots(custom_path: CustomSkillPath) -> List[ScanRoot]:
    """The custom directory itself plus every platform-shaped subdirectory."""
    roots = [ScanRoot(custom_path.path, custom_path.source_key_for(None), None, custom_path)]
    for platform in SkillPlatform:
        roots.append(
            ScanRoot(
                platform.skills_dir_in(custom_path.path),
                custom_path.source_key_for(platform),
                platform,
                custom_path,
            )
        )
    return roots


class MultiSkillScanner:
    """Scan every configured root and merge results into a single ScanResult."""

    def __init__(self, config: ManagerConfig, max_workers: int = 4):
        self.config = config
        self.max_workers = max_workers

    def roots(self) -> List[ScanRoot]:
        roots = platform_roots(self.config.home)
        for custom_path in self.config.custom_paths:
            roots.extend(custom_path_roots(custom_path))
        return roots

    def scan_all(self, parallel: bool = True) -> ScanResult:
        """Scan all roots.

        Raises the first `ScanError` (in root order) if any existing root
        couldn't be listed; nothing is returned in that case.
        """
        roots = self.roots()

        if parallel and len(roots) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                futures = [executor.submit(root.scanner().scan) for root in roots]
                per_root = [future.result() for future in futures]
        else:
            per_root = [root.scanner().scan() for root in roots]

        skills: List[Skill] = []
        errors: List[str] = []
        seen: Set[str] = set()
        for root, found in zip(roots, per_root):
            for skill in found:
                if skill.id in seen:
                    errors.append(f"[{root.source_key}] duplicate skill id {skill.id} at {skill.folder_path}")
                    continue
                seen.add(skill.id)
                skills.append(skill)

        skills.sort(key=lambda s: s.display_name.casefold())
        return ScanResult(skills=skills, scan_time=datetime.now(), errors=errors)
