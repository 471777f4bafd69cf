"""Remote tag lookup used to validate named targets before cloning."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field

from aetherinit.git.runner import CommandRunner, describe_failure
from aetherinit.models.selector import ResolvedTarget

logger = logging.getLogger(__name__)

TAG_REF_PREFIX = "refs/tags/"
DEREF_SUFFIX = "^{}"


@dataclass
class TagCheckResult:
    """Outcome of a remote existence check.

    ``verified`` is False when the check was skipped or the remote could not
    be queried; in both cases ``exists`` is True so installation proceeds.
    """

    exists: bool
    verified: bool = True
    suggestions: list[str] = field(default_factory=list)
    omitted: int = 0


def parse_tag_refs(output: str) -> list[str]:
    """Extract tag names from ``git ls-remote --tags`` output.

    Dereferenced entries of annotated tags (``name^{}``) are dropped.
    """
    tags: list[str] = []
    for line in output.splitlines():
        parts = line.split()
        if len(parts) < 2 or not parts[1].startswith(TAG_REF_PREFIX):
            continue
        name = parts[1][len(TAG_REF_PREFIX):]
        if not name or name.endswith(DEREF_SUFFIX):
            continue
        tags.append(name)
    return tags


def rank_suggestions(tags: list[str], limit: int = 10) -> tuple[list[str], int]:
    """Newest-looking tags first: lexicographic descending, capped at ``limit``.

    Returns the shown tags and how many were left out.
    """
    ordered = sorted(set(tags), reverse=True)
    return ordered[:limit], max(0, len(ordered) - limit)


class RemoteTagChecker:
    """Confirms a named tag exists on the template remote."""

    def __init__(self, runner: CommandRunner, repository_url: str, limit: int = 10) -> None:
        self.runner = runner
        self.repository_url = repository_url
        self.limit = limit

    async def list_tags(self) -> list[str]:
        result = await self.runner.git("ls-remote", "--tags", self.repository_url)
        return parse_tag_refs(result.stdout)

    async def check(self, target: ResolvedTarget) -> TagCheckResult:
        if not target.needs_remote_check:
            return TagCheckResult(exists=True, verified=False)

        try:
            tags = await self.list_tags()
        except (subprocess.CalledProcessError, OSError) as e:
            logger.warning(f"Could not validate target '{target.value}': {describe_failure(e)}")
            return TagCheckResult(exists=True, verified=False)

        if target.value in tags:
            return TagCheckResult(exists=True)

        suggestions, omitted = rank_suggestions(tags, self.limit)
        return TagCheckResult(exists=False, suggestions=suggestions, omitted=omitted)
