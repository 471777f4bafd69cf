"""Record install provenance for the template update scripts."""

from __future__ import annotations

import logging
import subprocess

from aetherinit.git.repository import Repository
from aetherinit.git.runner import describe_failure
from aetherinit.models.manifest import Manifest
from aetherinit.models.metadata import InstallMetadata
from aetherinit.models.selector import Selector

logger = logging.getLogger(__name__)

UNKNOWN_VERSION = "unknown"


def compute_installed_version(selector: Selector, short_revision: str | None) -> str:
    """Hash, else tag, else a non-latest version, else the acquired revision."""
    target = selector.resolve()
    if target.is_latest:
        return short_revision or UNKNOWN_VERSION
    return target.value


class MetadataStamper:
    """Writes ``InstallMetadata`` into the project manifest.

    Best effort: any failure is logged and ``stamp`` returns None.
    """

    def __init__(
        self,
        manifest_file: str = "package.json",
        metadata_key: str = "aetherCMS",
        installed_from: str = "create-aether-cms",
    ) -> None:
        self.manifest_file = manifest_file
        self.metadata_key = metadata_key
        self.installed_from = installed_from

    async def stamp(self, repo: Repository, selector: Selector) -> InstallMetadata | None:
        try:
            manifest = Manifest.load(repo.root / self.manifest_file)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not record install metadata: {e}")
            return None

        short_revision = None
        if selector.resolve().is_latest:
            try:
                short_revision = await repo.short_revision()
            except (subprocess.CalledProcessError, OSError) as e:
                logger.warning(f"Could not determine installed version: {describe_failure(e)}")

        try:
            metadata = InstallMetadata(
                template_name=manifest.get("name"),
                template_version=manifest.get("version"),
                template_repository=manifest.get("repository"),
                installed_version=compute_installed_version(selector, short_revision),
                installed_from=self.installed_from,
                install_options=selector,
            )
            manifest.data[self.metadata_key] = metadata.to_manifest()
            manifest.save()
        except (OSError, TypeError, ValueError) as e:
            logger.warning(f"Could not write install metadata: {e}")
            return None

        logger.info(f"Recorded install metadata (installed: {metadata.installed_version})")
        return metadata
