"""Install provenance stored in the project manifest."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from aetherinit.models.selector import Selector


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class InstallMetadata(BaseModel):
    """Which template revision was installed, when, and how.

    Serialized with camelCase keys because the update scripts shipped with the
    template read it from package.json.
    """

    model_config = ConfigDict(populate_by_name=True)

    template_name: str | None = Field(default=None, alias="templateName")
    template_version: str | None = Field(default=None, alias="templateVersion")
    template_repository: Any = Field(default=None, alias="templateRepository")
    installed_version: str = Field(..., alias="installedVersion")
    installed_at: str = Field(default_factory=_utc_now, alias="installedAt")
    installed_from: str = Field(default="create-aether-cms", alias="installedFrom")
    install_options: Selector = Field(default_factory=Selector, alias="installOptions")

    def to_manifest(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)
