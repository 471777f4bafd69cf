"""Data models for aetherinit."""

from aetherinit.models.config import BootstrapConfig
from aetherinit.models.manifest import Manifest
from aetherinit.models.metadata import InstallMetadata
from aetherinit.models.selector import LATEST, ResolvedTarget, Selector, TargetKind, resolve_target

__all__ = [
    # Selectors
    "LATEST",
    "Selector",
    "ResolvedTarget",
    "TargetKind",
    "resolve_target",
    # Config
    "BootstrapConfig",
    # Manifest
    "Manifest",
    "InstallMetadata",
]
