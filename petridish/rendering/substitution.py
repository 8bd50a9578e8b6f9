"""Jinja2 string substitution used for template paths and contents."""

from __future__ import annotations

import logging
from typing import Protocol

from jinja2 import Environment, StrictUndefined, TemplateError

from ..core.errors import TemplatingError
from ..core.models import Context

logger = logging.getLogger(__name__)


class Substitution(Protocol):
    """Renders a string against a context, raising ``TemplatingError`` on failure."""

    def render(self, text: str, context: Context, *, label: str) -> str: ...


def build_environment() -> Environment:
    """Create the Jinja2 environment shared by path and content rendering.

    Returns:
        Environment that fails on undefined names
    """
    return Environment(
        undefined=StrictUndefined,
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


class JinjaSubstitution:
    """Default substitution backed by Jinja2."""

    def __init__(self, env: Environment | None = None) -> None:
        self.env = env or build_environment()

    def render(self, text: str, context: Context, *, label: str) -> str:
        """Render ``text`` against ``context``.

        Args:
            text: Template string
            context: Variables available to expressions
            label: Path reported if rendering fails

        Returns:
            Rendered string
        """
        if "{" not in text:
            return text
        try:
            return self.env.from_string(text).render(dict(context))
        except TemplateError as exc:
            logger.debug(f"Jinja error while rendering {label}: {exc!r}")
            raise TemplatingError(label, exc.message or type(exc).__name__) from exc
        except (TypeError, ValueError, ArithmeticError) as exc:
            # Expression evaluated but failed, e.g. a filter given the wrong type.
            raise TemplatingError(label, f"{type(exc).__name__}: {exc}") from exc


def render_string(text: str, context: Context, label: str = "<string>") -> str:
    """Render a single string with a fresh default substitution."""
    return JinjaSubstitution().render(text, context, label=label)
