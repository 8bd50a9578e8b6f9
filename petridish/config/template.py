"""Template repository configuration (``petridish.yaml`` / ``petridish.toml``)."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..core.errors import TemplateConfigError
from ..core.models import ContextValue

logger = logging.getLogger(__name__)

CONFIG_NAMES = ("petridish.yaml", "petridish.yml", "petridish.toml")


class PetridishSection(BaseModel):
    """The ``petridish:`` section of a template config."""

    model_config = ConfigDict(extra="forbid")

    project_prompt: str = Field(default="project name?", description="Prompt for the project name")
    project_var_name: str = Field(
        default="project_name", description="Context key holding the project name"
    )
    short_description: str | None = Field(
        default=None, description="One-line summary shown before rendering"
    )
    long_description: str | None = Field(
        default=None, description="Longer description logged in verbose mode"
    )
    entry_dir: str | None = Field(
        default=None, description="Entry directory name (defaults to the project variable)"
    )
    exclude: list[str] = Field(
        default_factory=list,
        description="Paths under the entry directory copied without content rendering",
    )


class PromptDefault(BaseModel):
    """A prompt declaration; only its name and default feed the context."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=1)
    default: ContextValue | None = None


class TemplateConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    petridish: PetridishSection = Field(default_factory=PetridishSection)
    prompts: list[PromptDefault] = Field(default_factory=list)

    @property
    def entry_dir(self) -> str:
        if self.petridish.entry_dir:
            return self.petridish.entry_dir
        return f"{{{{ {self.petridish.project_var_name} }}}}"


def _parse(path: Path) -> dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if path.suffix == ".toml":
        return tomllib.loads(text)
    return yaml.safe_load(text) or {}


def load_template_config(path: Path) -> TemplateConfig:
    """Load and validate a template config file.

    Args:
        path: Path to ``petridish.yaml``, ``petridish.yml`` or ``petridish.toml``

    Returns:
        Validated template configuration
    """
    logger.debug(f"Loading template config: {path}")
    try:
        data = _parse(path)
    except OSError as exc:
        raise TemplateConfigError(f"Cannot read {path}: {exc}") from exc
    except (yaml.YAMLError, tomllib.TOMLDecodeError) as exc:
        raise TemplateConfigError(f"Invalid syntax in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise TemplateConfigError(f"{path} must contain a mapping at the top level")

    try:
        return TemplateConfig.model_validate(data)
    except ValidationError as exc:
        raise TemplateConfigError(f"Invalid template config {path}:\n{exc}") from exc
