"""Build a render plan from a template tree without touching the destination."""

from __future__ import annotations

import logging
import os
from fnmatch import fnmatchcase
from pathlib import Path, PurePosixPath
from typing import Iterator, Sequence

from ..core.errors import RenderIOError, TemplatingError
from ..core.models import Context, FileEntry, RenderPlan, SymlinkEntry
from .io import read_source
from .substitution import Substitution

logger = logging.getLogger(__name__)


def _raise_walk_error(exc: OSError) -> None:
    raise exc


def iter_template_entries(entry_root: Path) -> Iterator[Path]:
    """Yield every regular file and symlink under ``entry_root``.

    Directories are not yielded; symlinks to directories are yielded as
    entries and never descended. Order is sorted per directory level.
    """
    for dirpath, dirnames, filenames in os.walk(entry_root, onerror=_raise_walk_error):
        current = Path(dirpath)
        linked_dirs = [d for d in dirnames if (current / d).is_symlink()]
        dirnames[:] = sorted(d for d in dirnames if d not in linked_dirs)
        for name in sorted(filenames + linked_dirs):
            path = current / name
            if path.is_symlink() or path.is_file():
                yield path
            else:
                logger.debug(f"Ignoring special file {path}")


def is_excluded(patterns: Sequence[str], *candidates: str) -> bool:
    """Return True when any pattern matches any candidate path."""
    return any(
        fnmatchcase(candidate, pattern.strip("/"))
        for pattern in patterns
        for candidate in candidates
    )


def _check_relative(rendered: str, label: str, entry_name: str) -> PurePosixPath:
    parts = rendered.split("/")
    for part in parts:
        if part in ("", ".", ".."):
            raise TemplatingError(
                label, f"rendered path '{rendered}' has an empty or relative segment"
            )
    if parts[0] != entry_name:
        raise TemplatingError(
            label, f"rendered path '{rendered}' escapes entry directory '{entry_name}'"
        )
    return PurePosixPath(*parts)


class Planner:
    """Walks the entry directory and renders every path and file content.

    Nothing is written; any failure aborts before the destination is touched.
    """

    def __init__(
        self,
        template_root: Path,
        entry_dir_name: str,
        context: Context,
        substitution: Substitution,
        exclusions: Sequence[str] = (),
        detect_binary: bool = True,
    ) -> None:
        self.template_root = template_root
        self.entry_dir_name = entry_dir_name
        self.context = context
        self.substitution = substitution
        self.exclusions = list(exclusions)
        self.detect_binary = detect_binary

    def render_entry_name(self) -> str:
        name = self.substitution.render(
            self.entry_dir_name, self.context, label=self.entry_dir_name
        )
        if not name or "/" in name or "\\" in name or name in (".", ".."):
            raise TemplatingError(
                self.entry_dir_name,
                f"entry directory must render to a single path segment, got '{name}'",
            )
        return name

    def build(self) -> RenderPlan:
        """Render all paths and contents into a plan.

        Returns:
            Plan keyed by rendered path relative to the destination root
        """
        entry_name = self.render_entry_name()
        plan = RenderPlan(entry_name)
        entry_root = self.template_root / self.entry_dir_name

        try:
            sources = list(iter_template_entries(entry_root))
        except OSError as exc:
            raise RenderIOError(f"Cannot read template tree {entry_root}: {exc}") from exc

        for source in sources:
            raw_relative = source.relative_to(self.template_root).as_posix()
            rendered = self.substitution.render(
                raw_relative, self.context, label=raw_relative
            )
            relative = _check_relative(rendered, raw_relative, entry_name)
            try:
                plan.add(self._plan_entry(source, raw_relative, relative))
            except OSError as exc:
                raise RenderIOError(f"Cannot read template file {source}: {exc}") from exc
            logger.debug(f"Planned {raw_relative} -> {relative}")

        logger.info(f"Planned {len(plan)} file(s) under {entry_name}")
        return plan

    def _plan_entry(
        self, source: Path, raw_relative: str, relative: PurePosixPath
    ) -> FileEntry | SymlinkEntry:
        if source.is_symlink():
            return SymlinkEntry(
                relative_path=relative, target=os.readlink(source), source=source
            )

        content, mode = read_source(source, detect_binary=self.detect_binary)
        if isinstance(content, bytes):
            logger.debug(f"Copying binary file {raw_relative} verbatim")
            return FileEntry(relative, content, mode, source)

        inner_raw = raw_relative.split("/", 1)[1]
        inner_rendered = PurePosixPath(*relative.parts[1:]).as_posix()
        if is_excluded(self.exclusions, inner_rendered, inner_raw):
            logger.debug(f"Copying excluded file {raw_relative} verbatim")
            return FileEntry(relative, content, mode, source)

        rendered = self.substitution.render(content, self.context, label=raw_relative)
        return FileEntry(relative, rendered, mode, source)
