"""Clone the template and move HEAD to the resolved target."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from aetherinit.errors import CheckoutError, CloneError
from aetherinit.git.repository import Repository
from aetherinit.git.runner import CommandRunner, describe_failure
from aetherinit.models.selector import ResolvedTarget

logger = logging.getLogger(__name__)


class RepositoryAcquirer:
    """Full-history clone followed by a direct checkout of the target."""

    def __init__(self, runner: CommandRunner, repository_url: str, stream_output: bool = True) -> None:
        self.runner = runner
        self.repository_url = repository_url
        self.stream_output = stream_output

    async def acquire(self, destination: Path, target: ResolvedTarget) -> Repository:
        await self._clone(destination)
        repo = Repository(destination, self.runner)
        if not target.is_latest:
            await self._checkout(repo, target)
        return repo

    async def _clone(self, destination: Path) -> None:
        # Full history is required so any tag or commit can be checked out
        logger.info(f"Cloning {self.repository_url}...")
        try:
            await self.runner.git(
                "clone",
                self.repository_url,
                str(destination),
                capture=not self.stream_output,
            )
        except (subprocess.CalledProcessError, OSError) as e:
            raise CloneError(self.repository_url, describe_failure(e)) from e

    async def _checkout(self, repo: Repository, target: ResolvedTarget) -> None:
        logger.info(f"Switching to {target.label} {target.value}...")
        try:
            # Trailing "--" keeps git from reading the target as a file path
            await repo.git("-c", "advice.detachedHead=false", "checkout", target.value, "--")
        except (subprocess.CalledProcessError, OSError) as e:
            raise CheckoutError(target.value, describe_failure(e)) from e
