from __future__ import annotations

import sys
from pathlib import Path

import pytest

from codex_skill_manager.errors import CommandError
from codex_skill_manager.runner import (
    STANDARD_PATHS,
    ClawdhubCli,
    CommandRunner,
    default_environment,
    last_non_empty_line,
)

from conftest import FakeCli, FakeRunner


def test_last_non_empty_line_strips_ansi() -> None:
    output = "Fetching...\n\x1b[32mjane\x1b[0m\n\n   \n"
    assert last_non_empty_line(output) == "jane"
    assert last_non_empty_line("\n \n") == ""


def test_default_environment_fills_missing_values(tmp_path: Path) -> None:
    env = default_environment(tmp_path, base={})
    assert env["HOME"] == str(tmp_path)
    assert env["PATH"] == ":".join(STANDARD_PATHS)
    assert env["BUN_INSTALL"] == str(tmp_path / ".bun")


def test_default_environment_appends_only_missing_paths(tmp_path: Path) -> None:
    base = {"HOME": "/Users/me", "PATH": "/custom/bin:/usr/bin", "BUN_INSTALL": "/opt/bun"}
    env = default_environment(tmp_path, base=base)

    assert env["HOME"] == "/Users/me"
    assert env["BUN_INSTALL"] == "/opt/bun"
    parts = env["PATH"].split(":")
    assert parts[:2] == ["/custom/bin", "/usr/bin"]
    assert parts.count("/usr/bin") == 1
    assert set(STANDARD_PATHS) <= set(parts)
    # The caller's mapping is left alone.
    assert base["PATH"] == "/custom/bin:/usr/bin"


def test_publish_arguments() -> None:
    path = Path("/skills/pdf")
    assert ClawdhubCli.publish_arguments(path, "1.0.0") == [
        "clawdhub@latest", "publish", "/skills/pdf", "--version", "1.0.0",
    ]
    assert ClawdhubCli.publish_arguments(path, "1.0.1", "  ", [" ", ""]) == [
        "clawdhub@latest", "publish", "/skills/pdf", "--version", "1.0.1",
    ]
    assert ClawdhubCli.publish_arguments(path, "2.0.0", "Notes", ["a", " b "]) == [
        "clawdhub@latest", "publish", "/skills/pdf", "--version", "2.0.0",
        "--changelog", "Notes", "--tags", "a,b",
    ]


def test_whoami_logged_in(tmp_path: Path) -> None:
    runner = FakeRunner(output="Checking token\n\x1b[1mjane\x1b[0m\n")
    status = FakeCli(runner, tmp_path).whoami()

    assert status.is_installed and status.is_logged_in
    assert status.username == "jane"
    assert runner.calls == [("/fake/bunx", ["clawdhub@latest", "whoami"])]


def test_whoami_failure_means_logged_out(tmp_path: Path) -> None:
    runner = FakeRunner(error=CommandError("Not logged in", returncode=1))
    status = FakeCli(runner, tmp_path).whoami()
    assert status.is_installed is True
    assert status.is_logged_in is False
    assert status.username is None


def test_whoami_empty_output_means_logged_out(tmp_path: Path) -> None:
    status = FakeCli(FakeRunner(output="\n"), tmp_path).whoami()
    assert status.is_installed and not status.is_logged_in


def test_whoami_without_bun(tmp_path: Path) -> None:
    runner = FakeRunner()
    status = FakeCli(runner, tmp_path, bunx=None).whoami()
    assert status.is_installed is False
    assert status.error_message == "Bun is not installed."
    assert runner.calls == []


def test_resolve_bunx_prefers_home_install(tmp_path: Path) -> None:
    bunx = tmp_path / ".bun" / "bin" / "bunx"
    bunx.parent.mkdir(parents=True)
    bunx.write_text("#!/bin/sh\n")
    bunx.chmod(0o755)

    assert ClawdhubCli(FakeRunner(), home=tmp_path).resolve_bunx() == str(bunx)


def test_command_runner_returns_combined_output() -> None:
    runner = CommandRunner(timeout=30)
    output = runner.run(
        sys.executable,
        ["-c", "import sys; print('out'); print('err', file=sys.stderr)"],
    )
    assert output == "out\n\nerr\n"


def test_command_runner_non_zero_exit_uses_stderr() -> None:
    runner = CommandRunner(timeout=30)
    with pytest.raises(CommandError) as excinfo:
        runner.run(
            sys.executable,
            ["-c", "import sys; print('partial'); sys.stderr.write('boom'); sys.exit(3)"],
        )
    assert str(excinfo.value) == "boom"
    assert excinfo.value.returncode == 3
    assert "partial" in excinfo.value.output


def test_command_runner_missing_executable() -> None:
    with pytest.raises(CommandError, match="Executable not found"):
        CommandRunner().run("/definitely/not/here", [])


def test_command_runner_timeout() -> None:
    with pytest.raises(CommandError, match="timed out"):
        CommandRunner(timeout=0.5).run(sys.executable, ["-c", "import time; time.sleep(5)"])
