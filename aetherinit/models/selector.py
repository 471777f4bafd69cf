"""Version selector and the resolved install target."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

LATEST = "latest"


class TargetKind(str, Enum):
    """Which selector field produced the install target."""

    HASH = "hash"
    TAG = "tag"
    VERSION = "version"
    LATEST = "latest"


class ResolvedTarget(BaseModel):
    """The single revision an installation is pinned to."""

    model_config = ConfigDict(frozen=True)

    kind: TargetKind
    value: str

    @property
    def is_latest(self) -> bool:
        return self.kind == TargetKind.LATEST

    @property
    def needs_remote_check(self) -> bool:
        """Named targets are validated against the remote tag list.

        Hashes are only checked by the checkout itself.
        """
        return self.kind in (TargetKind.TAG, TargetKind.VERSION) and self.value != LATEST

    @property
    def label(self) -> str:
        if self.kind == TargetKind.HASH:
            return "commit"
        return self.kind.value


class Selector(BaseModel):
    """Version-targeting options given by the caller.

    Priority when several are set: hash > tag > version > latest.
    """

    model_config = ConfigDict(frozen=True)

    version: str = Field(default=LATEST, description="Release version, or 'latest'")
    tag: str | None = Field(default=None, description="Git tag")
    hash: str | None = Field(default=None, description="Commit hash")

    def resolve(self) -> ResolvedTarget:
        return resolve_target(self)


def resolve_target(selector: Selector) -> ResolvedTarget:
    """Pick the highest-priority non-empty selector field."""
    if selector.hash:
        return ResolvedTarget(kind=TargetKind.HASH, value=selector.hash)
    if selector.tag:
        return ResolvedTarget(kind=TargetKind.TAG, value=selector.tag)
    if selector.version and selector.version != LATEST:
        return ResolvedTarget(kind=TargetKind.VERSION, value=selector.version)
    return ResolvedTarget(kind=TargetKind.LATEST, value=LATEST)
