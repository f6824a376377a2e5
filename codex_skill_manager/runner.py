"""External command boundary: subprocess runner and the clawdhub CLI."""

from __future__ import annotations

import logging
import os
import re
import shutil
import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .errors import CommandError
from .models import CliStatus

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 120.0
CLAWDHUB_PACKAGE = "clawdhub@latest"
STANDARD_PATHS = ["/opt/homebrew/bin", "/usr/local/bin", "/usr/bin", "/bin"]
BUN_MISSING = "Bun is not installed."

_ANSI_RE = re.compile(r"\x1b\[[0-9;]*[mK]")


class CommandRunner:
    """Run an executable and return its combined output.

    A non-zero exit raises `CommandError` whose message is stderr (or stdout
    when stderr is empty); `output` carries stdout and stderr together.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT):
        self.timeout = timeout

    def run(
        self,
        executable: str,
        arguments: Sequence[str],
        env: Optional[Dict[str, str]] = None,
    ) -> str:
        logger.debug("Running %s %s", executable, " ".join(arguments))
        try:
            proc = subprocess.run(
                [executable, *arguments],
                capture_output=True,
                text=True,
                env=env,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError as e:
            raise CommandError(f"Executable not found: {executable}") from e
        except subprocess.TimeoutExpired as e:
            raise CommandError(
                f"{Path(executable).name} timed out after {self.timeout:g}s"
            ) from e

        stdout = proc.stdout or ""
        stderr = proc.stderr or ""
        combined = "\n".join(part for part in (stdout, stderr) if part)

        if proc.returncode != 0:
            raise CommandError(
                stderr or stdout,
                returncode=proc.returncode,
                output=combined,
            )
        return combined


def last_non_empty_line(output: str) -> str:
    """Last non-blank line of command output, ANSI colour codes removed."""
    cleaned = _ANSI_RE.sub("", output)
    for line in reversed(cleaned.splitlines()):
        if line.strip():
            return line.strip()
    return ""


def default_environment(home: Path, base: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    """Environment for bun: HOME set, standard bin dirs on PATH, BUN_INSTALL set."""
    environment = dict(os.environ if base is None else base)

    if not environment.get("HOME"):
        environment["HOME"] = str(home)

    existing = environment.get("PATH")
    if existing:
        parts = existing.split(":")
        missing = [p for p in STANDARD_PATHS if p not in parts]
        if missing:
            environment["PATH"] = ":".join(parts + missing)
    else:
        environment["PATH"] = ":".join(STANDARD_PATHS)

    if not environment.get("BUN_INSTALL"):
        environment["BUN_INSTALL"] = str(Path(home) / ".bun")

    return environment


class ClawdhubCli:
    """Invokes `bunx clawdhub@latest ...` through a `CommandRunner`."""

    def __init__(self, runner: Optional[CommandRunner] = None, home: Optional[Path] = None):
        self.runner = runner or CommandRunner()
        self.home = Path(home) if home else Path.home()

    def candidate_paths(self) -> List[Path]:
        return [
            self.home / ".bun" / "bin" / "bunx",
            Path("/opt/homebrew/bin/bunx"),
            Path("/usr/local/bin/bunx"),
            Path("/usr/bin/bunx"),
        ]

    def resolve_bunx(self) -> Optional[str]:
        for path in self.candidate_paths():
            if path.is_file() and os.access(path, os.X_OK):
                return str(path)

        found = shutil.which("bunx", path=default_environment(self.home)["PATH"])
        return found or None

    @staticmethod
    def publish_arguments(
        skill_path: Path,
        version: str,
        changelog: str = "",
        tags: Sequence[str] = (),
    ) -> List[str]:
        args = [CLAWDHUB_PACKAGE, "publish", str(skill_path), "--version", version]

        if changelog.strip():
            args.extend(["--changelog", changelog])

        cleaned_tags = [t.strip() for t in tags if t.strip()]
        if cleaned_tags:
            args.extend(["--tags", ",".join(cleaned_tags)])

        return args

    def publish(
        self,
        skill_path: Path,
        version: str,
        changelog: str = "",
        tags: Sequence[str] = (),
    ) -> str:
        bunx = self.resolve_bunx()
        if not bunx:
            raise CommandError(BUN_MISSING)
        args = self.publish_arguments(skill_path, version, changelog, tags)
        return self.runner.run(bunx, args, env=default_environment(self.home))

    def whoami(self) -> CliStatus:
        bunx = self.resolve_bunx()
        if not bunx:
            return CliStatus(
                is_installed=False,
                is_logged_in=False,
                error_message=BUN_MISSING,
            )

        try:
            output = self.runner.run(
                bunx, [CLAWDHUB_PACKAGE, "whoami"], env=default_environment(self.home)
            )
        except CommandError as e:
            logger.info("clawdhub whoami failed: %s", e)
            return CliStatus(is_installed=True, is_logged_in=False)

        username = last_non_empty_line(output)
        return CliStatus(
            is_installed=True,
            is_logged_in=bool(username),
            username=username or None,
        )
