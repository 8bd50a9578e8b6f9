"""Domain models for render planning and results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Iterator, Mapping, Union

from pydantic import BaseModel, Field

from .errors import TemplatingError

ContextValue = Union[str, int, float, bool, list[str], list[int], list[float]]
Context = Mapping[str, ContextValue]


class ConflictPolicy(str, Enum):
    """What to do when a planned destination path already exists."""

    FAIL = "fail"
    OVERWRITE = "overwrite"
    SKIP = "skip"


@dataclass(frozen=True)
class FileEntry:
    """A regular file to materialize.

    ``content`` is ``str`` for rendered or verbatim text and ``bytes`` for
    files detected as binary.
    """

    relative_path: PurePosixPath
    content: str | bytes
    mode: int
    source: Path


@dataclass(frozen=True)
class SymlinkEntry:
    """A symlink recreated with its target string copied verbatim."""

    relative_path: PurePosixPath
    target: str
    source: Path


PlanEntry = Union[FileEntry, SymlinkEntry]


class RenderPlan:
    """Ordered mapping of rendered relative path to plan entry.

    Paths are relative to the destination root; the first segment is the
    rendered entry directory name.
    """

    def __init__(self, entry_name: str) -> None:
        self.entry_name = entry_name
        self._entries: dict[PurePosixPath, PlanEntry] = {}

    def add(self, entry: PlanEntry) -> None:
        existing = self._entries.get(entry.relative_path)
        if existing is not None:
            raise TemplatingError(
                str(entry.relative_path),
                f"rendered path collides with {existing.source} and {entry.source}",
            )
        self._entries[entry.relative_path] = entry

    def without(self, paths: set[PurePosixPath]) -> RenderPlan:
        """Return a copy of the plan with ``paths`` removed."""
        filtered = RenderPlan(self.entry_name)
        for path, entry in self._entries.items():
            if path not in paths:
                filtered._entries[path] = entry
        return filtered

    def destinations(self, dest_root: Path) -> Iterator[tuple[PlanEntry, Path]]:
        for path, entry in self._entries.items():
            yield entry, dest_root.joinpath(*path.parts)

    @property
    def paths(self) -> list[PurePosixPath]:
        return list(self._entries)

    def __iter__(self) -> Iterator[PlanEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)


class RenderResult(BaseModel):
    """Summary of a successful render."""

    project_root: Path = Field(..., description="Rendered entry directory on disk")
    written: list[str] = Field(
        default_factory=list, description="Relative paths written"
    )
    skipped: list[str] = Field(
        default_factory=list, description="Relative paths left untouched"
    )
