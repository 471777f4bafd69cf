"""Fatal installation errors.

Anything raised from here aborts the installation. Recoverable problems are
logged as warnings instead and never reach these classes.
"""

from __future__ import annotations


class BootstrapError(Exception):
    """Base class for errors that abort an installation."""


class InvalidProjectNameError(BootstrapError):
    def __init__(self, name: str) -> None:
        super().__init__(
            f"Invalid project name '{name}'. "
            "Use only letters, numbers, hyphens, and underscores."
        )
        self.name = name


class DestinationExistsError(BootstrapError):
    def __init__(self, path: object) -> None:
        super().__init__(f"The directory {path} already exists.")
        self.path = path


class TargetNotFoundError(BootstrapError):
    """A named tag or version is not published on the remote."""

    def __init__(
        self, target: str, suggestions: list[str] | None = None, omitted: int = 0
    ) -> None:
        super().__init__(f"Version/tag '{target}' not found")
        self.target = target
        self.suggestions = suggestions or []
        self.omitted = omitted


class CloneError(BootstrapError):
    def __init__(self, url: str, detail: str = "") -> None:
        msg = f"Failed to clone {url}"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)
        self.url = url


class CheckoutError(BootstrapError):
    """The resolved target could not be checked out after a full clone."""

    def __init__(self, target: str, detail: str = "") -> None:
        msg = f"Could not check out '{target}' in the cloned repository"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)
        self.target = target


class DependencyInstallError(BootstrapError):
    def __init__(self, detail: str = "") -> None:
        msg = "Failed to install dependencies"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)
