from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import click

from . import __version__
from .bom import generate_report
from .config import OUTPUT_FORMATS, BomConfig, ColorChoice, EnumerationMode, default_cargo, default_color, default_output_format
from .errors import BomError
from .log import configure_logging
from .reporting import write_report

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(__version__, "-V", "--version", prog_name="cargo-bom")
def main() -> None:
    """Produce a Bill of Materials from a Cargo project's dependencies."""


@main.command()
@click.option(
    "--manifest-path",
    type=click.Path(dir_okay=False, path_type=str),
    default="Cargo.toml",
    show_default=True,
    help="Path to the Cargo.toml of the workspace to report on.",
)
@click.option(
    "--all",
    "all_dependencies",
    is_flag=True,
    help="Report the full transitive dependency tree instead of direct dependencies only.",
)
@click.option("-v", "--verbose", count=True, help="Use verbose output (-vv for debug output).")
@click.option("-q", "--quiet", is_flag=True, help="Only print errors on stderr.")
@click.option(
    "--color",
    type=click.Choice([choice.value for choice in ColorChoice], case_sensitive=False),
    default=default_color,
    help="Coloring: auto, always, never (defaults to CARGO_TERM_COLOR or auto).",
)
@click.option("--frozen", is_flag=True, help="Require Cargo.lock and cache are up to date.")
@click.option("--locked", is_flag=True, help="Require Cargo.lock is up to date.")
@click.option("--offline", is_flag=True, help="Run without accessing the network.")
@click.option(
    "--format",
    "fmt",
    type=click.Choice(list(OUTPUT_FORMATS), case_sensitive=False),
    default=default_output_format,
    help="Output format for the report (defaults to CARGO_BOM_FORMAT or text).",
)
@click.option(
    "--output",
    type=click.Path(dir_okay=False, writable=True, path_type=str),
    help="Write the report to a file instead of stdout.",
)
@click.pass_context
def bom(
    ctx: click.Context,
    manifest_path: str,
    all_dependencies: bool,
    verbose: int,
    quiet: bool,
    color: str,
    frozen: bool,
    locked: bool,
    offline: bool,
    fmt: str,
    output: Optional[str],
) -> None:
    """Print dependency names, versions and licenses, then their license texts."""

    config = BomConfig(
        manifest_path=Path(manifest_path),
        mode=EnumerationMode.ALL if all_dependencies else EnumerationMode.TOP_LEVEL,
        verbose=verbose,
        quiet=quiet,
        color=ColorChoice(color.lower()),
        frozen=frozen,
        locked=locked,
        offline=offline,
        output_format=fmt.lower(),
        output=Path(output) if output else None,
        cargo=default_cargo(),
    )
    ctx.color = config.color.as_click_color()
    configure_logging(config.verbose, config.quiet, ctx.color)

    try:
        report = generate_report(config)
        rendered = write_report(report, config.output_format, config.output)
    except BomError as exc:
        click.echo(f"error: {exc}", err=True)
        raise SystemExit(1)

    if config.output:
        logger.info("wrote %s report to %s", config.output_format, config.output)
    else:
        click.echo(rendered, nl=False)


if __name__ == "__main__":
    main()
