"""Conflict policy enforcement over a complete render plan."""

from __future__ import annotations

import logging
import os
from pathlib import Path, PurePosixPath

from ..core.errors import DestinationConflictError
from ..core.models import ConflictPolicy, RenderPlan

logger = logging.getLogger(__name__)


def find_collisions(plan: RenderPlan, dest_root: Path) -> dict[PurePosixPath, Path]:
    """Return planned paths that already exist under ``dest_root``.

    Dangling symlinks count as existing.
    """
    return {
        entry.relative_path: dest
        for entry, dest in plan.destinations(dest_root)
        if os.path.lexists(dest)
    }


def _is_real_dir(path: Path) -> bool:
    return path.is_dir() and not path.is_symlink()


def find_blocked(plan: RenderPlan, dest_root: Path) -> dict[PurePosixPath, Path]:
    """Return planned paths that cannot be written even by overwriting.

    A path is blocked when a directory sits at the path itself, or when one
    of its parents below ``dest_root`` exists but is not a real directory
    (a file or a symlink).
    """
    checked: dict[Path, bool] = {}

    def parent_ok(path: Path) -> bool:
        if path not in checked:
            checked[path] = not os.path.lexists(path) or _is_real_dir(path)
        return checked[path]

    blocked: dict[PurePosixPath, Path] = {}
    for entry, dest in plan.destinations(dest_root):
        parents = [
            dest_root.joinpath(*entry.relative_path.parts[:depth])
            for depth in range(1, len(entry.relative_path.parts))
        ]
        bad_parent = next((p for p in parents if not parent_ok(p)), None)
        if bad_parent is not None:
            blocked[entry.relative_path] = bad_parent
        elif _is_real_dir(dest):
            blocked[entry.relative_path] = dest
    return blocked


def apply_policy(
    plan: RenderPlan, dest_root: Path, policy: ConflictPolicy
) -> tuple[RenderPlan, list[PurePosixPath]]:
    """Check the whole plan against the destination before anything is written.

    Args:
        plan: Fully rendered plan
        dest_root: Destination root directory
        policy: Conflict policy

    Returns:
        Tuple of (plan to commit, relative paths skipped)
    """
    collisions = find_collisions(plan, dest_root)
    blocked = find_blocked(plan, dest_root)
    if not collisions and not blocked:
        return plan, []

    if policy is ConflictPolicy.FAIL:
        raise DestinationConflictError({**collisions, **blocked}.values())

    if policy is ConflictPolicy.SKIP:
        skipped = sorted(set(collisions) | set(blocked))
        for path in skipped:
            logger.warning(f"Skipping existing {path}")
        return plan.without(set(skipped)), skipped

    if blocked:
        raise DestinationConflictError(
            blocked.values(),
            reason="a directory is in the way or a parent is not a directory",
        )

    logger.info(f"Overwriting {len(collisions)} existing file(s)")
    return plan, []
