"""Context construction from project name, config defaults and overrides."""

from __future__ import annotations

import logging
import re
from types import MappingProxyType
from typing import Any, Iterable

from ..config.template import TemplateConfig
from ..core.errors import ContextError, TemplatingError
from ..core.models import Context, ContextValue
from ..rendering.substitution import render_string

logger = logging.getLogger(__name__)

_INT_PATTERN = re.compile(r"^-?\d+$")
_FLOAT_PATTERN = re.compile(r"^-?\d+(?:\.\d+)?$")
_KEY_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def coerce_value(value: str) -> bool | int | float | str:
    """Coerce a string value to its appropriate type.

    Args:
        value: String value to coerce

    Returns:
        Coerced value (bool, int, float, or str)
    """
    value_lower = value.lower()

    if value_lower in ("true", "false"):
        return value_lower == "true"

    if _INT_PATTERN.match(value):
        try:
            return int(value)
        except (ValueError, OverflowError):
            return value

    if _FLOAT_PATTERN.match(value):
        try:
            return float(value)
        except (ValueError, OverflowError):
            return value

    return value


def coerce_override(value: str) -> ContextValue:
    """Coerce a CLI value, treating ``[a,b]`` as a list."""
    stripped = value.strip()
    if stripped.startswith("[") and stripped.endswith("]"):
        items = [item.strip() for item in stripped[1:-1].split(",") if item.strip()]
        coerced = [coerce_value(item) for item in items]
        if all(isinstance(item, str) for item in coerced):
            return coerced
        if all(isinstance(item, (int, float)) and not isinstance(item, bool) for item in coerced):
            return coerced
        # Mixed lists are kept as strings.
        return items
    return coerce_value(value)


def parse_override(value: str) -> tuple[str, ContextValue]:
    """Parse a ``KEY=VALUE`` override."""
    if "=" not in value:
        raise ContextError(f"Must be KEY=VALUE, got: {value!r}")
    key, raw = value.split("=", 1)
    key = key.strip()
    if not _KEY_PATTERN.match(key):
        raise ContextError(f"Invalid variable name: {key!r}")
    return key, coerce_override(raw)


def build_context(
    config: TemplateConfig,
    project_name: str,
    overrides: Iterable[str] = (),
) -> Context:
    """Build the read-only rendering context.

    Args:
        config: Template configuration
        project_name: Value for the project variable
        overrides: ``KEY=VALUE`` strings, taking precedence over defaults

    Returns:
        Immutable mapping of variable name to value
    """
    logger.debug("Building rendering context")

    context: dict[str, Any] = {config.petridish.project_var_name: project_name}
    # Overrides go in first so defaults that reference them see the override.
    context.update(parse_override(item) for item in overrides)

    for prompt in config.prompts:
        if prompt.default is None or prompt.name in context:
            continue
        default = prompt.default
        if isinstance(default, str):
            try:
                default = render_string(default, context, label=f"default of {prompt.name}")
            except TemplatingError as exc:
                raise ContextError(str(exc)) from exc
        context[prompt.name] = default

    logger.debug(f"Context keys: {sorted(context)}")
    return MappingProxyType(context)
