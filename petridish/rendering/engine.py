"""Template tree rendering engine."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from types import MappingProxyType
from typing import Sequence

from ..core.errors import EntryDirNotFoundError, RenderIOError
from ..core.models import (
    ConflictPolicy,
    Context,
    RenderPlan,
    RenderResult,
    SymlinkEntry,
)
from .conflicts import apply_policy
from .io import move_tree, replace_path, staging_area, write_file, write_symlink
from .planner import Planner
from .substitution import JinjaSubstitution, Substitution

logger = logging.getLogger(__name__)


class RenderEngine:
    """Renders ``template_root/entry_dir_name`` into ``dest_root``.

    Rendering runs in three passes over one plan: every path and file content
    is rendered in memory, the plan is checked against the destination under
    the conflict policy, and only then is the plan staged in a temporary
    directory and moved into place.
    """

    def __init__(
        self,
        template_root: str | Path,
        entry_dir_name: str,
        dest_root: str | Path,
        context: Context,
        conflict_policy: ConflictPolicy = ConflictPolicy.FAIL,
        exclusions: Sequence[str] = (),
        *,
        substitution: Substitution | None = None,
        staging_dir: Path | None = None,
        detect_binary: bool = True,
    ) -> None:
        self.template_root = Path(template_root).absolute()
        self.entry_dir_name = entry_dir_name
        self.dest_root = Path(dest_root).absolute()
        self.context: Context = MappingProxyType(dict(context))
        self.conflict_policy = ConflictPolicy(conflict_policy)
        self.exclusions = list(exclusions)
        self.substitution = substitution or JinjaSubstitution()
        self.staging_dir = staging_dir
        self.detect_binary = detect_binary

        entry_root = self.template_root / entry_dir_name
        if not entry_root.is_dir():
            raise EntryDirNotFoundError(entry_root)

    def plan(self) -> RenderPlan:
        """Render every path and content without writing anything."""
        return Planner(
            self.template_root,
            self.entry_dir_name,
            self.context,
            self.substitution,
            exclusions=self.exclusions,
            detect_binary=self.detect_binary,
        ).build()

    def render(self) -> RenderResult:
        """Render the template into the destination.

        Returns:
            Summary of written and skipped paths

        Raises:
            TemplatingError: A path or content failed to render
            DestinationConflictError: Planned paths exist under the fail policy
            RenderIOError: Staging or commit failed
        """
        logger.info(
            f"Rendering {self.template_root / self.entry_dir_name} → {self.dest_root}"
        )
        plan = self.plan()
        to_commit, skipped = apply_policy(plan, self.dest_root, self.conflict_policy)
        self._commit(to_commit)

        project_root = self.dest_root / plan.entry_name
        logger.info(f"Successfully rendered {len(to_commit)} file(s) into {project_root}")
        return RenderResult(
            project_root=project_root,
            written=[str(p) for p in to_commit.paths],
            skipped=[str(p) for p in skipped],
        )

    def _commit(self, plan: RenderPlan) -> None:
        try:
            with staging_area(self.staging_dir) as staging:
                for entry, staged in plan.destinations(staging):
                    if isinstance(entry, SymlinkEntry):
                        write_symlink(staged, entry.target)
                    else:
                        write_file(staged, entry.content, entry.mode)

                self.dest_root.mkdir(parents=True, exist_ok=True)
                if not len(plan):
                    return

                project_root = self.dest_root / plan.entry_name
                if not os.path.lexists(project_root):
                    move_tree(staging / plan.entry_name, project_root)
                    return

                # Entry directory already present: replace file by file.
                for entry, dest in plan.destinations(self.dest_root):
                    replace_path(staging.joinpath(*entry.relative_path.parts), dest)
        except OSError as exc:
            raise RenderIOError(f"Failed to write rendered files: {exc}") from exc
