"""Handle on a cloned working copy."""

from __future__ import annotations

import subprocess
from pathlib import Path

from aetherinit.git.runner import CommandRunner

SHORT_REVISION_LENGTH = 7


class Repository:
    """A git working copy rooted at an explicit path.

    All commands run with ``cwd=root``; nothing here depends on the process
    working directory.
    """

    def __init__(self, root: Path, runner: CommandRunner) -> None:
        self.root = root
        self.runner = runner

    def __repr__(self) -> str:
        return f"Repository({str(self.root)!r})"

    async def git(self, *args: str, capture: bool = True) -> subprocess.CompletedProcess[str]:
        return await self.runner.git(*args, cwd=self.root, capture=capture)

    async def current_branch(self) -> str | None:
        """Name of the checked-out branch, or None when HEAD is detached."""
        try:
            result = await self.git("symbolic-ref", "--short", "-q", "HEAD")
        except subprocess.CalledProcessError:
            return None
        return result.stdout.strip() or None

    async def head_revision(self) -> str:
        result = await self.git("rev-parse", "HEAD")
        return result.stdout.strip()

    async def short_revision(self) -> str:
        return (await self.head_revision())[:SHORT_REVISION_LENGTH]

    async def branch_revision(self, branch: str) -> str | None:
        """Revision a local branch points at, or None if it does not exist."""
        try:
            result = await self.git("rev-parse", "--verify", "-q", f"refs/heads/{branch}")
        except subprocess.CalledProcessError:
            return None
        return result.stdout.strip() or None

    async def remotes(self) -> dict[str, str]:
        """Configured remotes mapped to their fetch URL."""
        result = await self.git("remote", "-v")
        remotes: dict[str, str] = {}
        for line in result.stdout.splitlines():
            # "<name>\t<url> (fetch)"; the URL itself may contain spaces
            name, _, rest = line.partition("\t")
            url, _, kind = rest.rpartition(" ")
            if name and url and kind == "(fetch)":
                remotes[name] = url
        return remotes

    async def set_config(self, key: str, value: str) -> None:
        await self.git("config", key, value)
