"""Configuration: home directory, data directory and registered custom paths.

Persisted as `config.yaml` in the data directory:

    custom_paths:
      - id: 3f2c9a1e-...
        path: /Users/me/projects/agent
        display_name: agent
        added_at: '2026-01-02T10:00:00'
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .models import CustomSkillPath
from .runner import DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

DATA_DIR_ENV = "SKILL_MANAGER_HOME"
CONFIG_FILENAME = "config.yaml"
STATE_DIRNAME = "skill-state"


def default_data_dir(home: Optional[Path] = None) -> Path:
    override = os.environ.get(DATA_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return (home or Path.home()) / ".config" / "codex-skill-manager"


@dataclass
class ManagerConfig:
    """Explicit filesystem roots for scanning and persisted state."""

    home: Path = field(default_factory=Path.home)
    data_dir: Optional[Path] = None
    custom_paths: List[CustomSkillPath] = field(default_factory=list)
    command_timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self):
        self.home = Path(self.home)
        if self.data_dir is None:
            self.data_dir = default_data_dir(self.home)
        self.data_dir = Path(self.data_dir)

    @property
    def config_file(self) -> Path:
        return self.data_dir / CONFIG_FILENAME

    @property
    def state_dir(self) -> Path:
        return self.data_dir / STATE_DIRNAME

    def custom_path(self, key: str) -> Optional[CustomSkillPath]:
        """Find a custom path by storage key, full id or directory."""
        for custom in self.custom_paths:
            if key in (custom.storage_key, str(custom.id), str(custom.path)):
                return custom
        return None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "custom_paths": [c.to_dict() for c in self.custom_paths],
        }
        if self.command_timeout != DEFAULT_TIMEOUT:
            data["command_timeout"] = self.command_timeout
        return data


def load_config(data_dir: Optional[Path] = None, home: Optional[Path] = None) -> ManagerConfig:
    """Load `config.yaml`; a missing or invalid file yields defaults."""
    config = ManagerConfig(home=home or Path.home(), data_dir=data_dir)
    path = config.config_file
    if not path.exists():
        return config

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Ignoring unreadable config %s: %s", path, e)
        return config

    if not isinstance(raw, dict):
        logger.warning("Ignoring config %s: expected a mapping", path)
        return config

    for entry in raw.get("custom_paths") or []:
        if not isinstance(entry, dict) or not entry.get("path"):
            continue
        try:
            config.custom_paths.append(CustomSkillPath.from_dict(entry))
        except (TypeError, ValueError) as e:
            logger.warning("Skipping invalid custom path entry %r: %s", entry, e)

    timeout = raw.get("command_timeout")
    if isinstance(timeout, (int, float)) and timeout > 0:
        config.command_timeout = float(timeout)

    return config


def save_config(config: ManagerConfig) -> Path:
    path = config.config_file
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(yaml.safe_dump(config.to_dict(), sort_keys=False), encoding="utf-8")
    tmp.replace(path)
    return path
