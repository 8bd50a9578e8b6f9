"""Local template directories."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from .config.template import CONFIG_NAMES
from .core.errors import TemplateSourceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TemplateSource:
    root: Path
    config_path: Path

    @classmethod
    def from_path(cls, template: str | Path) -> TemplateSource:
        """Resolve a template directory on local disk and locate its config."""
        root = Path(template).expanduser().absolute()
        if not root.is_dir():
            raise TemplateSourceError(f"Template dir '{template}' does not exist")

        for name in CONFIG_NAMES:
            candidate = root / name
            if candidate.is_file():
                logger.debug(f"Using template config {candidate}")
                return cls(root=root, config_path=candidate)

        raise TemplateSourceError(f"Config '{root / CONFIG_NAMES[0]}' does not exist")
