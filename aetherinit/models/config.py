"""Bootstrap configuration."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field

DEFAULT_TEMPLATE_REPOSITORY = "https://github.com/LebCit/aether-cms.git"


class BootstrapConfig(BaseModel):
    """Settings for creating a project from the template repository."""

    template_repository: str = Field(
        default=DEFAULT_TEMPLATE_REPOSITORY, description="Clone URL of the template"
    )
    clone_remote: str = Field(default="origin", description="Remote name git clone creates")
    upstream_remote: str = Field(
        default="upstream", description="Remote used to pull template updates"
    )
    own_remote: str = Field(default="origin", description="Remote for the user's repository")
    integration_branch: str = Field(default="main")
    manifest_file: str = Field(default="package.json")
    metadata_key: str = Field(
        default="aetherCMS", description="Manifest key holding install metadata"
    )
    installed_from: str = Field(default="create-aether-cms")
    merge_driver: str = Field(
        default="ours", description="Merge driver registered as a no-op"
    )
    commit_message: str = Field(default="Initialize Aether CMS project")
    install_dependencies: bool = Field(default=True)
    suggestion_limit: int = Field(
        default=10, description="Tags listed when a target is not found"
    )

    model_config = {"extra": "forbid"}

    @classmethod
    def from_yaml(cls, path: Path) -> "BootstrapConfig":
        """Load configuration overrides from a YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls.model_validate(data)
