"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import json
import subprocess
import tempfile
from pathlib import Path
from typing import Generator

import pytest

from aetherinit.git.runner import CommandRunner

TEMPLATE_URL = "https://example.com/aether-cms.git"
HEAD_SHA = "a1b2c3d4e5f60718293a4b5c6d7e8f9012345678"
TAG_SHA = "0f9e8d7c6b5a49382716f5e4d3c2b1a098765432"
OTHER_SHA = "1234567890abcdef1234567890abcdef12345678"

TEMPLATE_MANIFEST = {
    "name": "aether-cms",
    "version": "1.4.0",
    "repository": {"type": "git", "url": "https://github.com/LebCit/aether-cms.git"},
    "scripts": {"start": "node index.js"},
}


class FakeGit(CommandRunner):
    """In-memory stand-in for the git and npm executables.

    Models just enough repository state (branches, HEAD, remotes, config) to
    drive the installer. Add an argument prefix to ``fail`` to make matching
    commands exit non-zero, e.g. ``fake.fail.add(("switch",))``.
    """

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[tuple[str, ...]] = []
        self.fail: set[tuple[str, ...]] = set()
        self.remote_tags: list[str] = ["v1.0.0", "v1.2.0", "stable"]
        self.annotated_tags: set[str] = set()
        self.revisions: dict[str, str] = {
            "v1.0.0": OTHER_SHA,
            "v1.2.0": TAG_SHA,
            "stable": TAG_SHA,
            "abc1234": OTHER_SHA,
        }
        self.default_branch = "main"
        self.extra_branches: dict[str, str] = {}
        self.template_manifest: dict | None = dict(TEMPLATE_MANIFEST)

        self.branch: str | None = None
        self.head = HEAD_SHA
        self.branches: dict[str, str] = {}
        self.remotes: dict[str, str] = {}
        self.config: dict[str, str] = {}
        self.commits: list[str] = []
        self.pushes: list[tuple[str, ...]] = []
        self.npm_runs = 0

    def git_calls(self, *prefix: str) -> list[tuple[str, ...]]:
        return [c for c in self.calls if c[: len(prefix)] == prefix]

    async def run(
        self,
        cmd: list[str],
        cwd: Path | None = None,
        capture: bool = True,
    ) -> subprocess.CompletedProcess[str]:
        if cmd[0] == "npm":
            self._maybe_fail(tuple(cmd), cmd)
            self.npm_runs += 1
            return self._ok(cmd)

        args = list(cmd[1:])
        while args[:1] == ["-c"]:
            args = args[2:]
        key = tuple(args)
        self.calls.append(key)
        self._maybe_fail(key, cmd)

        handler = getattr(self, "_git_" + args[0].replace("-", "_"), None)
        if handler is None:
            return self._error(cmd, f"unsupported git command: {args[0]}")
        return handler(cmd, args[1:], cwd)

    # helpers

    def _maybe_fail(self, key: tuple[str, ...], cmd: list[str]) -> None:
        for prefix in self.fail:
            if key[: len(prefix)] == prefix:
                self._error(cmd, "fatal: simulated failure")

    @staticmethod
    def _ok(cmd: list[str], stdout: str = "") -> subprocess.CompletedProcess[str]:
        return subprocess.CompletedProcess(cmd, 0, stdout, "")

    @staticmethod
    def _error(cmd: list[str], stderr: str, code: int = 128):
        raise subprocess.CalledProcessError(code, cmd, "", stderr)

    def _create_branch(self, cmd: list[str], name: str) -> None:
        if name in self.branches:
            self._error(cmd, f"fatal: a branch named '{name}' already exists")
        self.branches[name] = self.head
        self.branch = name

    # commands

    def _git_ls_remote(self, cmd, args, cwd):
        lines = []
        for name in self.remote_tags:
            sha = self.revisions.get(name, OTHER_SHA)
            lines.append(f"{sha}\trefs/tags/{name}")
            if name in self.annotated_tags:
                lines.append(f"{sha}\trefs/tags/{name}^{{}}")
        return self._ok(cmd, "\n".join(lines) + "\n")

    def _git_clone(self, cmd, args, cwd):
        url, dest = args[0], Path(args[1])
        dest.mkdir(parents=True)
        if self.template_manifest is not None:
            (dest / "package.json").write_text(json.dumps(self.template_manifest, indent=2))
        self.branches = {self.default_branch: HEAD_SHA, **self.extra_branches}
        self.branch = self.default_branch
        self.head = HEAD_SHA
        self.remotes = {"origin": url}
        return self._ok(cmd)

    def _git_checkout(self, cmd, args, cwd):
        if args[0] == "-b":
            self._create_branch(cmd, args[1])
        elif args[0] in self.branches:
            self.branch = args[0]
            self.head = self.branches[args[0]]
        elif args[0] in self.revisions:
            self.branch = None
            self.head = self.revisions[args[0]]
        else:
            self._error(cmd, f"error: pathspec '{args[0]}' did not match any file(s) known to git")
        return self._ok(cmd)

    def _git_switch(self, cmd, args, cwd):
        if args[0] != "-c":
            return self._git_checkout(cmd, args, cwd)
        self._create_branch(cmd, args[1])
        return self._ok(cmd)

    def _git_symbolic_ref(self, cmd, args, cwd):
        if self.branch is None:
            self._error(cmd, "", code=1)
        return self._ok(cmd, self.branch + "\n")

    def _git_rev_parse(self, cmd, args, cwd):
        if args == ["HEAD"]:
            return self._ok(cmd, self.head + "\n")
        ref = args[-1]
        name = ref.removeprefix("refs/heads/")
        if name not in self.branches:
            self._error(cmd, "", code=1)
        return self._ok(cmd, self.branches[name] + "\n")

    def _git_branch(self, cmd, args, cwd):
        force = args[0] == "-f"
        if force:
            args = args[1:]
        name, revision = args[0], args[1]
        if force and name == self.branch:
            self._error(cmd, f"fatal: cannot force update the current branch '{name}'")
        if not force and name in self.branches:
            self._error(cmd, f"fatal: a branch named '{name}' already exists")
        self.branches[name] = revision
        return self._ok(cmd)

    def _git_remote(self, cmd, args, cwd):
        action = args[0]
        if action == "-v":
            lines = []
            for name, url in self.remotes.items():
                lines.append(f"{name}\t{url} (fetch)")
                lines.append(f"{name}\t{url} (push)")
            return self._ok(cmd, "\n".join(lines))
        if action == "rename":
            old, new = args[1], args[2]
            if old not in self.remotes or new in self.remotes:
                self._error(cmd, f"error: could not rename remote '{old}'", code=2)
            self.remotes[new] = self.remotes.pop(old)
        elif action == "remove":
            if args[1] not in self.remotes:
                self._error(cmd, f"error: No such remote: '{args[1]}'", code=2)
            del self.remotes[args[1]]
        elif action == "add":
            if args[1] in self.remotes:
                self._error(cmd, f"error: remote {args[1]} already exists.", code=3)
            self.remotes[args[1]] = args[2]
        elif action == "set-url":
            self.remotes[args[1]] = args[2]
        return self._ok(cmd)

    def _git_config(self, cmd, args, cwd):
        self.config[args[0]] = args[1]
        return self._ok(cmd)

    def _git_add(self, cmd, args, cwd):
        return self._ok(cmd)

    def _git_commit(self, cmd, args, cwd):
        self.commits.append(args[-1])
        return self._ok(cmd)

    def _git_push(self, cmd, args, cwd):
        self.pushes.append(tuple(args))
        return self._ok(cmd)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def fake_git() -> FakeGit:
    return FakeGit()


@pytest.fixture
def cloned_fake_git(fake_git: FakeGit, temp_dir: Path) -> FakeGit:
    """Fake git whose state is a fresh clone in ``temp_dir / 'site'``."""
    fake_git._git_clone(["git", "clone"], [TEMPLATE_URL, str(temp_dir / "site")], None)
    fake_git.calls.clear()
    return fake_git


# Real git fixtures

def run_git(*args: str, cwd: Path) -> str:
    result = subprocess.run(
        ["git", *args], cwd=cwd, capture_output=True, text=True, check=True
    )
    return result.stdout.strip()


@pytest.fixture
def git_env(monkeypatch: pytest.MonkeyPatch, temp_dir: Path) -> None:
    """Isolate real git from the user's configuration."""
    global_config = temp_dir / "gitconfig"
    global_config.write_text("")
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(global_config))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test Author")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "author@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test Author")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "author@example.com")


@pytest.fixture
def template_repo(git_env: None, temp_dir: Path) -> dict:
    """A local template repository with two commits, tags and a ``trunk`` branch.

    Returns a dict with ``path``, ``first`` and ``second`` revisions.
    """
    repo = temp_dir / "template"
    repo.mkdir()
    run_git("init", "-q", cwd=repo)
    run_git("symbolic-ref", "HEAD", "refs/heads/main", cwd=repo)

    manifest = dict(TEMPLATE_MANIFEST)
    (repo / "package.json").write_text(json.dumps(manifest, indent=2))
    (repo / "index.js").write_text("console.log('v1')\n")
    run_git("add", ".", cwd=repo)
    run_git("commit", "-q", "-m", "First release", cwd=repo)
    first = run_git("rev-parse", "HEAD", cwd=repo)
    run_git("tag", "v1.0.0", cwd=repo)
    run_git("tag", "-a", "stable", "-m", "Stable release", cwd=repo)

    (repo / "index.js").write_text("console.log('v2')\n")
    run_git("commit", "-q", "-am", "Second release", cwd=repo)
    second = run_git("rev-parse", "HEAD", cwd=repo)
    run_git("tag", "v1.2.0", cwd=repo)
    run_git("branch", "trunk", first, cwd=repo)

    return {"path": repo, "first": first, "second": second}
