"""Remote layout for a freshly cloned project.

The remote created by ``git clone`` points at the template. It is renamed to
``upstream`` so later update runs can fetch and merge template releases, and
the user's own repository can take ``origin``.
"""

from __future__ import annotations

import logging
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from aetherinit.git.repository import Repository
from aetherinit.git.runner import describe_failure
from aetherinit.prompt import Prompt, is_yes

logger = logging.getLogger(__name__)


class RemoteStrategy(ABC):
    """One way of turning the clone remote into the upstream remote."""

    name: str = "strategy"

    async def apply(self, repo: Repository, source: str, target: str, url: str) -> bool:
        try:
            await self.run(repo, source, target, url)
        except (subprocess.CalledProcessError, OSError) as e:
            logger.debug(f"Remote strategy '{self.name}' failed: {describe_failure(e)}")
            return False
        return True

    @abstractmethod
    async def run(self, repo: Repository, source: str, target: str, url: str) -> None:
        ...


class RenameRemoteStrategy(RemoteStrategy):
    name = "rename"

    async def run(self, repo: Repository, source: str, target: str, url: str) -> None:
        await repo.git("remote", "rename", source, target)


class ReAddRemoteStrategy(RemoteStrategy):
    """Drop the clone remote and register the template URL explicitly."""

    name = "re-add"

    async def run(self, repo: Repository, source: str, target: str, url: str) -> None:
        remotes = await repo.remotes()
        if source in remotes:
            await repo.git("remote", "remove", source)
        if target in remotes:
            await repo.git("remote", "set-url", target, url)
        else:
            await repo.git("remote", "add", target, url)


@dataclass
class RemoteSetupResult:
    upstream_configured: bool = False
    strategy: str | None = None
    origin_url: str | None = None
    push_requested: bool = False
    warnings: list[str] = field(default_factory=list)


class RemoteTopologyConfigurator:
    """Configures remotes and merge settings used by future template updates."""

    def __init__(
        self,
        template_url: str,
        clone_remote: str = "origin",
        upstream_remote: str = "upstream",
        own_remote: str = "origin",
        merge_driver: str = "ours",
        strategies: list[RemoteStrategy] | None = None,
    ) -> None:
        self.template_url = template_url
        self.clone_remote = clone_remote
        self.upstream_remote = upstream_remote
        self.own_remote = own_remote
        self.merge_driver = merge_driver
        self.strategies = (
            strategies
            if strategies is not None
            else [RenameRemoteStrategy(), ReAddRemoteStrategy()]
        )

    async def configure(self, repo: Repository, prompt: Prompt | None = None) -> RemoteSetupResult:
        """Set up upstream, merge policy and optionally the user's own origin."""
        logger.info("Setting up git repository...")
        result = RemoteSetupResult()

        await self.configure_upstream(repo, result)
        await self.configure_merge_policy(repo, result)
        if prompt is not None:
            await self.attach_own_repository(repo, prompt, result)

        return result

    async def configure_upstream(self, repo: Repository, result: RemoteSetupResult) -> None:
        for strategy in self.strategies:
            if await strategy.apply(repo, self.clone_remote, self.upstream_remote, self.template_url):
                result.upstream_configured = True
                result.strategy = strategy.name
                logger.info(f"Configured {self.upstream_remote} remote for updates")
                return

        self._warn(result, f"Could not set up {self.upstream_remote} remote")

    async def configure_merge_policy(self, repo: Repository, result: RemoteSetupResult) -> None:
        settings = [
            # No-op driver; .gitattributes maps user-owned files to it
            (f"merge.{self.merge_driver}.driver", "true"),
            ("pull.rebase", "false"),
        ]
        for key, value in settings:
            try:
                await repo.set_config(key, value)
            except (subprocess.CalledProcessError, OSError) as e:
                self._warn(result, f"Could not set {key}: {describe_failure(e)}")

    async def attach_own_repository(
        self, repo: Repository, prompt: Prompt, result: RemoteSetupResult
    ) -> None:
        answer = await prompt.ask("Connect to your own Git repository? (y/n): ")
        if not is_yes(answer):
            return

        url = await prompt.ask("Enter your repository URL (or press Enter to skip): ")
        if not url:
            return

        try:
            await repo.git("remote", "add", self.own_remote, url)
        except (subprocess.CalledProcessError, OSError) as e:
            self._warn(result, f"Could not add {self.own_remote} remote: {describe_failure(e)}")
            return

        result.origin_url = url
        logger.info(f"Added your repository as {self.own_remote}")

        push_now = await prompt.ask("Push now? (y/n): ")
        result.push_requested = is_yes(push_now)

    async def push_own_repository(self, repo: Repository, branch: str) -> bool:
        """Push the integration branch to the user's remote. Failure is a warning."""
        try:
            await repo.git("push", "-u", self.own_remote, branch, capture=False)
        except (subprocess.CalledProcessError, OSError) as e:
            logger.warning(f"Push failed: {describe_failure(e)}")
            logger.warning(f"You can push later with: git push -u {self.own_remote} {branch}")
            return False
        logger.info("Pushed to your repository")
        return True

    @staticmethod
    def _warn(result: RemoteSetupResult, message: str) -> None:
        logger.warning(message)
        result.warnings.append(message)
