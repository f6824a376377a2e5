"""Per-skill record of the content hash that was last published."""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from .jsonfile import write_json_atomic
from .models import PublishState

logger = logging.getLogger(__name__)


class PublishStateStore:
    """One `<skill name>.json` file per published skill.

    A missing or unreadable record means "never published".
    """

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def path_for(self, name: str) -> Path:
        return self.directory / f"{name}.json"

    def load(self, name: str) -> Optional[PublishState]:
        path = self.path_for(name)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable publish state %s: %s", path, e)
            return None

        if not isinstance(data, dict):
            return None
        last_hash = data.get("lastPublishedHash")
        raw_date = data.get("lastPublishedAt")
        if not isinstance(last_hash, str) or not isinstance(raw_date, str):
            return None
        try:
            published_at = datetime.fromisoformat(raw_date)
        except ValueError:
            return None

        return PublishState(last_published_hash=last_hash, last_published_at=published_at)

    def save(self, name: str, content_hash: str, published_at: Optional[datetime] = None) -> PublishState:
        state = PublishState(
            last_published_hash=content_hash,
            last_published_at=published_at or datetime.now(timezone.utc),
        )
        write_json_atomic(
            self.path_for(name),
            {
                "lastPublishedHash": state.last_published_hash,
                "lastPublishedAt": state.last_published_at.isoformat(),
            },
        )
        return state

    def needs_publish(self, name: str, current_hash: str) -> bool:
        state = self.load(name)
        return state is None or state.last_published_hash != current_hash
