"""Error taxonomy for template sourcing, configuration and rendering."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable


class PetridishError(Exception):
    """Base class for every error petridish reports to the user."""


class TemplateSourceError(PetridishError):
    """Raised when the template directory or its config file cannot be found."""


class TemplateConfigError(PetridishError):
    """Raised when the template config file cannot be parsed or validated."""


class ContextError(PetridishError):
    """Raised when the rendering context cannot be built."""


class RenderError(PetridishError):
    """Base class for failures inside the render engine."""


class EntryDirNotFoundError(RenderError):
    """Raised when the entry directory is missing under the template root."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Entry directory not found: {path}")


class TemplatingError(RenderError):
    """Raised when a path or file content fails to render."""

    def __init__(self, path: str, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Failed to render '{path}': {detail}")


class DestinationConflictError(RenderError):
    """Raised when planned paths collide with what is already on disk."""

    def __init__(self, paths: Iterable[Path], reason: str | None = None) -> None:
        self.paths = sorted(set(paths))
        self.reason = reason
        listed = ", ".join(str(p) for p in self.paths[:5])
        more = len(self.paths) - 5
        suffix = f" (and {more} more)" if more > 0 else ""
        if reason:
            message = f"Cannot write over {listed}{suffix}: {reason}."
        else:
            message = (
                f"Destination already exists: {listed}{suffix}. "
                "Use --force to overwrite or --skip to keep existing files."
            )
        super().__init__(message)

    @property
    def path(self) -> Path:
        return self.paths[0]


class RenderIOError(RenderError):
    """Raised when staging or committing rendered files hits an OS error."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(detail)
