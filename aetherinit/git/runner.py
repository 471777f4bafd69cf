"""Async subprocess runner shared by every git and npm invocation."""

from __future__ import annotations

import asyncio
import logging
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)


def describe_failure(exc: BaseException) -> str:
    """Short human-readable reason for a failed command."""
    if isinstance(exc, subprocess.CalledProcessError):
        detail = (exc.stderr or exc.output or "").strip()
        if detail:
            return detail.splitlines()[-1]
        return f"exit status {exc.returncode}"
    return str(exc)


class CommandRunner:
    """Run external commands without touching the process working directory.

    Every call takes an explicit ``cwd``. A non-zero exit raises
    ``subprocess.CalledProcessError`` carrying the captured output.
    """

    def __init__(self, git_executable: str = "git", env: dict[str, str] | None = None) -> None:
        self.git_executable = git_executable
        self.env = env

    async def run(
        self,
        cmd: list[str],
        cwd: Path | None = None,
        capture: bool = True,
    ) -> subprocess.CompletedProcess[str]:
        """Run a command asynchronously.

        With ``capture=False`` the child writes straight to the terminal, which
        is used for long-running commands such as clone and ``npm install``.
        """
        logger.debug(f"$ {' '.join(cmd)}" + (f"  (in {cwd})" if cwd else ""))
        pipe = asyncio.subprocess.PIPE if capture else None
        process = await asyncio.create_subprocess_exec(
            *cmd,
            cwd=cwd,
            stdout=pipe,
            stderr=pipe,
            env=self.env,
        )
        stdout, stderr = await process.communicate()
        out = stdout.decode() if stdout else ""
        err = stderr.decode() if stderr else ""

        if process.returncode != 0:
            raise subprocess.CalledProcessError(process.returncode, cmd, out, err)

        return subprocess.CompletedProcess(cmd, process.returncode, out, err)

    async def git(
        self, *args: str, cwd: Path | None = None, capture: bool = True
    ) -> subprocess.CompletedProcess[str]:
        return await self.run([self.git_executable, *args], cwd=cwd, capture=capture)
