"""aetherinit - Bootstrap Aether CMS projects from the template repository."""

from aetherinit.installer import InstallReport, ProjectInstaller
from aetherinit.models.config import BootstrapConfig
from aetherinit.models.metadata import InstallMetadata
from aetherinit.models.selector import ResolvedTarget, Selector, TargetKind

__version__ = "0.1.0"
__all__ = [
    "BootstrapConfig",
    "InstallMetadata",
    "InstallReport",
    "ProjectInstaller",
    "ResolvedTarget",
    "Selector",
    "TargetKind",
]
