"""CLI argument parsers and validators."""

from __future__ import annotations

import typer

from ..context.builder import parse_override
from ..core.errors import ContextError
from ..core.models import ConflictPolicy


def parse_var(value: str) -> str:
    """Validate a ``KEY=VALUE`` option, returning it unchanged."""
    try:
        parse_override(value)
    except ContextError as e:
        raise typer.BadParameter(str(e)) from e
    return value


def parse_conflict_policy(force: bool, skip: bool) -> ConflictPolicy:
    """Map the --force/--skip flags to a conflict policy."""
    if force and skip:
        raise typer.BadParameter("--force and --skip cannot be used together")
    if force:
        return ConflictPolicy.OVERWRITE
    if skip:
        return ConflictPolicy.SKIP
    return ConflictPolicy.FAIL
