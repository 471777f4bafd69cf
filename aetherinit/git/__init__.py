"""Git operations for acquiring and normalizing the template repository."""

from aetherinit.git.acquire import RepositoryAcquirer
from aetherinit.git.branch import BranchNormalizer, BranchState, NormalizeResult
from aetherinit.git.remotes import RemoteSetupResult, RemoteTopologyConfigurator
from aetherinit.git.repository import Repository
from aetherinit.git.runner import CommandRunner
from aetherinit.git.tags import RemoteTagChecker, TagCheckResult

__all__ = [
    "BranchNormalizer",
    "BranchState",
    "CommandRunner",
    "NormalizeResult",
    "RemoteSetupResult",
    "RemoteTagChecker",
    "RemoteTopologyConfigurator",
    "Repository",
    "RepositoryAcquirer",
    "TagCheckResult",
]
