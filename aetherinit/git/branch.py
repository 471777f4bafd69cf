"""Put the working copy on the integration branch after acquisition.

Checking out a tag or commit leaves HEAD detached, and the template's default
branch is not guaranteed to be ``main``. The normalizer walks an ordered ladder
of strategies until one of them leaves ``main`` checked out at the acquired
revision. Older git releases lack ``git switch``, hence the fallbacks.
"""

from __future__ import annotations

import logging
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum

from aetherinit.git.repository import Repository
from aetherinit.git.runner import describe_failure

logger = logging.getLogger(__name__)

DEFAULT_BRANCH = "main"


class BranchState(str, Enum):
    """Where HEAD was found before normalizing."""

    DETACHED = "detached"
    ON_OTHER = "on_other"
    DONE = "done"


class BranchStrategy(ABC):
    """One way of getting onto the integration branch.

    ``apply`` reports success as a bool; git failures never propagate.
    """

    name: str = "strategy"

    async def apply(self, repo: Repository, branch: str) -> bool:
        try:
            await self.run(repo, branch)
        except (subprocess.CalledProcessError, OSError) as e:
            logger.debug(f"Branch strategy '{self.name}' failed: {describe_failure(e)}")
            return False
        return True

    @abstractmethod
    async def run(self, repo: Repository, branch: str) -> None:
        """Perform the git commands; raise on failure."""
        ...


class SwitchCreateStrategy(BranchStrategy):
    name = "switch-create"

    async def run(self, repo: Repository, branch: str) -> None:
        await repo.git("switch", "-c", branch)


class CheckoutCreateStrategy(BranchStrategy):
    name = "checkout-create"

    async def run(self, repo: Repository, branch: str) -> None:
        await repo.git("checkout", "-b", branch)


class ManualBranchStrategy(BranchStrategy):
    """Create the branch at HEAD's revision id, then switch to it.

    Uses ``branch -f`` so a ``main`` inherited from the clone is moved to the
    acquired revision instead of blocking the switch.
    """

    name = "manual"

    async def run(self, repo: Repository, branch: str) -> None:
        revision = await repo.head_revision()
        await repo.git("branch", "-f", branch, revision)
        await repo.git("checkout", branch)


class ForceMoveStrategy(BranchStrategy):
    """Repoint an existing branch at the current revision and check it out."""

    name = "force-move"

    async def run(self, repo: Repository, branch: str) -> None:
        revision = await repo.head_revision()
        await repo.git("branch", "-f", branch, revision)
        await repo.git("checkout", branch)


DETACHED_LADDER: tuple[type[BranchStrategy], ...] = (
    SwitchCreateStrategy,
    CheckoutCreateStrategy,
    ManualBranchStrategy,
)
ON_OTHER_LADDER: tuple[type[BranchStrategy], ...] = (
    CheckoutCreateStrategy,
    ForceMoveStrategy,
)


@dataclass
class NormalizeResult:
    """What the normalizer found and did."""

    initial_state: BranchState
    initial_branch: str | None = None
    strategy: str | None = None
    attempted: list[str] = field(default_factory=list)
    succeeded: bool = True


class BranchNormalizer:
    """DETECT -> DETACHED | ON_OTHER | DONE."""

    def __init__(
        self,
        branch: str = DEFAULT_BRANCH,
        detached_ladder: list[BranchStrategy] | None = None,
        on_other_ladder: list[BranchStrategy] | None = None,
    ) -> None:
        self.branch = branch
        self.detached_ladder = (
            detached_ladder
            if detached_ladder is not None
            else [cls() for cls in DETACHED_LADDER]
        )
        self.on_other_ladder = (
            on_other_ladder
            if on_other_ladder is not None
            else [cls() for cls in ON_OTHER_LADDER]
        )

    async def detect(self, repo: Repository) -> tuple[BranchState, str | None]:
        current = await repo.current_branch()
        if current is None:
            return BranchState.DETACHED, None
        if current != self.branch:
            return BranchState.ON_OTHER, current
        return BranchState.DONE, current

    async def normalize(self, repo: Repository) -> NormalizeResult:
        state, current = await self.detect(repo)
        result = NormalizeResult(initial_state=state, initial_branch=current)

        if state == BranchState.DONE:
            return result

        if state == BranchState.DETACHED:
            logger.info(f"Creating {self.branch} branch from detached HEAD...")
            ladder = self.detached_ladder
        else:
            logger.info(f"Creating {self.branch} branch from {current}...")
            ladder = self.on_other_ladder

        for strategy in ladder:
            result.attempted.append(strategy.name)
            if await strategy.apply(repo, self.branch):
                result.strategy = strategy.name
                logger.info(f"Branch {self.branch} ready ({strategy.name})")
                return result

        result.succeeded = False
        logger.warning(
            f"Could not create {self.branch} branch "
            f"(tried: {', '.join(result.attempted)}). Continuing with current git state."
        )
        return result
