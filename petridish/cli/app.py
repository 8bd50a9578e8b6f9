"""Main CLI application."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from typing_extensions import Annotated

from ..config.settings import get_settings
from ..config.template import load_template_config
from ..context.builder import build_context
from ..core.errors import PetridishError
from ..rendering import RenderEngine
from ..source import TemplateSource
from .parsers import parse_conflict_policy, parse_var

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="petridish",
    help="Generate a new project from a petridish template directory.",
)


@app.command()
def render(
    template: Annotated[
        str,
        typer.Argument(help="Path to the petridish template directory.", metavar="TEMPLATE"),
    ],
    output_dir: Annotated[
        str,
        typer.Option(
            "--output-dir",
            "-o",
            help="Where to output the generated project (default: cwd).",
            metavar="DIR",
        ),
    ] = "",
    project_name: Annotated[
        str,
        typer.Option(
            "--project-name",
            "-n",
            help="Project name; prompted for when omitted.",
            metavar="NAME",
        ),
    ] = "",
    variables: Annotated[
        list[str],
        typer.Option(
            "--var",
            help="Set a template variable (format: KEY=VALUE, [a,b] for lists). Repeatable.",
            metavar="KEY=VALUE",
        ),
    ] = [],
    exclude: Annotated[
        list[str],
        typer.Option(
            "--exclude",
            help="Copy matching files under the entry directory without rendering. Repeatable.",
            metavar="PATTERN",
        ),
    ] = [],
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite files that already exist."),
    ] = False,
    skip: Annotated[
        bool,
        typer.Option("--skip", "-s", help="Keep files that already exist."),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose logging.",
        ),
    ] = False,
) -> None:
    """Render a template directory into a new project."""
    # Configure logging
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )

    logger.debug("Starting petridish")

    policy = parse_conflict_policy(force, skip)
    overrides = [parse_var(v) for v in variables]
    settings = get_settings()

    if output_dir:
        dest_root = Path(output_dir)
    else:
        dest_root = settings.default_output_dir or Path.cwd()

    try:
        source = TemplateSource.from_path(template)
        config = load_template_config(source.config_path)
        if config.petridish.short_description:
            typer.echo(config.petridish.short_description)
        if config.petridish.long_description:
            logger.debug(config.petridish.long_description)

        name = project_name or typer.prompt(config.petridish.project_prompt)
        context = build_context(config, name, overrides)

        engine = RenderEngine(
            source.root,
            config.entry_dir,
            dest_root,
            context,
            policy,
            [*config.petridish.exclude, *exclude],
            staging_dir=settings.staging_dir,
            detect_binary=settings.detect_binary,
        )
        result = engine.render()
    except PetridishError as exc:
        logger.debug("Render failed", exc_info=True)
        typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    for skipped in result.skipped:
        typer.echo(f"Skipped existing {skipped}")
    typer.echo(f"Generated {result.project_root}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
