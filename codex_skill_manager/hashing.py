"""Content hash of a skill directory, used to detect unpublished changes."""

import hashlib
import logging
import os
from pathlib import Path
from typing import List, Tuple

logger = logging.getLogger(__name__)

EXCLUDED_SEGMENTS = {".git", ".clawdhub"}
EXCLUDED_NAMES = {".DS_Store", "Thumbs.db", "desktop.ini"}


def compute_skill_hash(root: Path, *, include_binary: bool = False) -> str:
    """SHA-256 over a skill's files, as lowercase hex.

    Files are fed in ascending relative-path order as
    `path NUL bytes NUL`. Hidden entries, `.git`/`.clawdhub` trees and OS
    metadata files are ignored, as are modification times. By default files
    that aren't valid UTF-8 are skipped, so a change confined to a binary
    asset doesn't alter the digest; `include_binary=True` hashes them too.

    Returns an empty string if the tree can't be enumerated.
    """
    root = Path(root)
    try:
        files = _collect_files(root)
    except OSError as e:
        logger.warning("Couldn't hash %s: %s", root, e)
        return ""

    hasher = hashlib.sha256()
    for relative, path in files:
        try:
            data = path.read_bytes()
        except OSError as e:
            logger.debug("Skipping unreadable file %s: %s", path, e)
            continue
        if not include_binary and not _is_text(data):
            continue
        hasher.update(relative.encode("utf-8"))
        hasher.update(b"\0")
        hasher.update(data)
        hasher.update(b"\0")

    return hasher.hexdigest()


def _collect_files(root: Path) -> List[Tuple[str, Path]]:
    if not root.is_dir():
        raise FileNotFoundError(f"Not a directory: {root}")

    def _raise(error: OSError) -> None:
        raise error

    files: List[Tuple[str, Path]] = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
        dirnames[:] = [d for d in dirnames if not _is_excluded(d)]
        for filename in filenames:
            if _is_excluded(filename) or filename in EXCLUDED_NAMES:
                continue
            path = Path(dirpath) / filename
            if path.is_symlink() or not path.is_file():
                continue
            relative = "/" + path.relative_to(root).as_posix()
            files.append((relative, path))

    files.sort(key=lambda item: item[0])
    return files


def _is_excluded(name: str) -> bool:
    return name.startswith(".") or name in EXCLUDED_SEGMENTS


def _is_text(data: bytes) -> bool:
    try:
        data.decode("utf-8")
    except UnicodeDecodeError:
        return False
    return True
