"""The two registry operations the installer needs."""

from pathlib import Path
from typing import Optional, Protocol


class RegistryClient(Protocol):
    """Remote skill registry (clawdhub).

    `download` returns a local path to the skill's zip archive; the caller
    owns the file and may delete it.
    """

    def download(self, slug: str, version: Optional[str]) -> Path: ...

    def fetch_latest_version(self, slug: str) -> Optional[str]: ...
