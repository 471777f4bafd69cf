"""Main installer - version-targeted bootstrap of a project from the template."""

from __future__ import annotations

import logging
import re
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

from aetherinit.errors import (
    DependencyInstallError,
    DestinationExistsError,
    InvalidProjectNameError,
    TargetNotFoundError,
)
from aetherinit.git.acquire import RepositoryAcquirer
from aetherinit.git.branch import BranchNormalizer, NormalizeResult
from aetherinit.git.remotes import RemoteSetupResult, RemoteTopologyConfigurator
from aetherinit.git.repository import Repository
from aetherinit.git.runner import CommandRunner, describe_failure
from aetherinit.git.tags import RemoteTagChecker
from aetherinit.metadata import MetadataStamper
from aetherinit.models.config import BootstrapConfig
from aetherinit.models.metadata import InstallMetadata
from aetherinit.models.selector import ResolvedTarget, Selector
from aetherinit.prompt import Prompt
from aetherinit.scaffold import ProjectScaffolder

logger = logging.getLogger(__name__)

PROJECT_NAME_PATTERN = re.compile(r"^[a-z0-9-_]+$", re.IGNORECASE)


def validate_project_name(name: str) -> bool:
    """Letters, digits, hyphens and underscores only."""
    return bool(name) and PROJECT_NAME_PATTERN.match(name) is not None


@dataclass
class InstallReport:
    """Summary of one installation run."""

    project_name: str
    project_dir: Path
    target: ResolvedTarget
    branch: NormalizeResult | None = None
    remotes: RemoteSetupResult | None = None
    metadata: InstallMetadata | None = None
    committed: bool = False
    pushed: bool = False
    warnings: list[str] = field(default_factory=list)

    @property
    def degraded(self) -> bool:
        return bool(self.warnings)


class ProjectInstaller:
    """Runs the bootstrap pipeline.

    Resolve -> check remote tag -> clone/checkout -> normalize branch ->
    configure remotes -> stamp metadata -> scaffold -> install dependencies ->
    commit -> optional push.

    Everything up to and including the checkout raises ``BootstrapError``.
    Later stages log a warning and the run continues.
    """

    def __init__(
        self,
        config: BootstrapConfig | None = None,
        runner: CommandRunner | None = None,
        prompt: Prompt | None = None,
        stream_output: bool = True,
    ) -> None:
        self.config = config or BootstrapConfig()
        self.runner = runner or CommandRunner()
        self.prompt = prompt
        self.stream_output = stream_output

        self.tag_checker = RemoteTagChecker(
            self.runner, self.config.template_repository, limit=self.config.suggestion_limit
        )
        self.acquirer = RepositoryAcquirer(
            self.runner, self.config.template_repository, stream_output=stream_output
        )
        self.normalizer = BranchNormalizer(self.config.integration_branch)
        self.remote_configurator = RemoteTopologyConfigurator(
            template_url=self.config.template_repository,
            clone_remote=self.config.clone_remote,
            upstream_remote=self.config.upstream_remote,
            own_remote=self.config.own_remote,
            merge_driver=self.config.merge_driver,
        )
        self.stamper = MetadataStamper(
            manifest_file=self.config.manifest_file,
            metadata_key=self.config.metadata_key,
            installed_from=self.config.installed_from,
        )

    async def install(
        self,
        project_name: str,
        selector: Selector | None = None,
        parent_dir: Path | None = None,
    ) -> InstallReport:
        """Create ``project_name`` under ``parent_dir`` (default: cwd)."""
        selector = selector or Selector()

        if not validate_project_name(project_name):
            raise InvalidProjectNameError(project_name)

        project_dir = (parent_dir or Path.cwd()).resolve() / project_name
        if project_dir.exists():
            raise DestinationExistsError(project_dir)

        target = selector.resolve()
        report = InstallReport(project_name=project_name, project_dir=project_dir, target=target)

        logger.info(f"Creating a new Aether CMS project in {project_name}...")
        if not target.is_latest:
            logger.info(f"Target: {target.label} = {target.value}")

        await self.verify_target(target)

        repo = await self.acquirer.acquire(project_dir, target)

        report.branch = await self.normalizer.normalize(repo)
        if not report.branch.succeeded:
            report.warnings.append(f"Not on {self.config.integration_branch} branch")

        report.remotes = await self._configure_remotes(repo, report)

        report.metadata = await self.stamper.stamp(repo, selector)
        if report.metadata is None:
            report.warnings.append("Install metadata missing")

        self._scaffold(project_dir, project_name, report)

        if self.config.install_dependencies:
            await self.install_dependencies(project_dir)

        report.committed = await self.commit(repo, report)

        if report.remotes is not None and report.remotes.push_requested:
            report.pushed = await self.remote_configurator.push_own_repository(
                repo, self.config.integration_branch
            )
            if not report.pushed:
                report.warnings.append("Push to your repository failed")

        return report

    async def verify_target(self, target: ResolvedTarget) -> None:
        """Fail before touching the filesystem if a named target is unknown."""
        result = await self.tag_checker.check(target)
        if not result.exists:
            raise TargetNotFoundError(target.value, result.suggestions, result.omitted)

    async def _configure_remotes(
        self, repo: Repository, report: InstallReport
    ) -> RemoteSetupResult | None:
        try:
            result = await self.remote_configurator.configure(repo, self.prompt)
        except (subprocess.CalledProcessError, OSError) as e:
            message = f"Git setup failed: {describe_failure(e)}"
            logger.warning(message)
            report.warnings.append(message)
            return None
        report.warnings.extend(result.warnings)
        return result

    def _scaffold(self, project_dir: Path, project_name: str, report: InstallReport) -> None:
        scaffolder = ProjectScaffolder(
            project_dir,
            project_name,
            manifest_file=self.config.manifest_file,
            merge_driver=self.config.merge_driver,
        )
        try:
            scaffolder.create_all()
        except (OSError, ValueError) as e:
            message = f"Could not create project files: {e}"
            logger.warning(message)
            report.warnings.append(message)

    async def install_dependencies(self, project_dir: Path) -> None:
        logger.info("Installing dependencies (this might take a few minutes)...")
        try:
            await self.runner.run(["npm", "install"], cwd=project_dir, capture=not self.stream_output)
        except (subprocess.CalledProcessError, OSError) as e:
            raise DependencyInstallError(describe_failure(e)) from e

    async def commit(self, repo: Repository, report: InstallReport) -> bool:
        """Single commit capturing the bootstrapped tree. Failure is a warning."""
        try:
            await repo.git("add", ".")
            await repo.git("commit", "-m", self.config.commit_message)
        except (subprocess.CalledProcessError, OSError) as e:
            message = f"Could not create initialization commit: {describe_failure(e)}"
            logger.warning(message)
            report.warnings.append(message)
            return False
        logger.info("Git configured for seamless updates")
        return True
