"""Main CLI application for the margin simulator."""

from typing import Optional

import click
import rich_click as rich_click

from ..logging import configure_logging
from .utils import resolve_format, resolve_log_level

# Configure rich-click
rich_click.rich_click.USE_RICH_MARKUP = True
rich_click.rich_click.USE_MARKDOWN = True
rich_click.rich_click.SHOW_ARGUMENTS = True
rich_click.rich_click.GROUP_ARGUMENTS_OPTIONS = True


@click.group(invoke_without_command=True)
@click.option(
    "--format",
    type=click.Choice(["table", "json", "yaml"], case_sensitive=False),
    help="Output format. Defaults to 'table' for TTY, 'json' for non-TTY.",
)
@click.option("--verbose", "-v", count=True, help="Increase verbosity (can be used multiple times).")
@click.option("--quiet", "-q", count=True, help="Decrease verbosity (can be used multiple times).")
@click.option("--debug", is_flag=True, help="Enable debug-level logging.")
@click.option("--no-color", is_flag=True, help="Disable color output.")
@click.option("--version", is_flag=True, is_eager=True, help="Print version information.")
@click.pass_context
def app(
    ctx: click.Context,
    format: Optional[str] = None,
    verbose: int = 0,
    quiet: int = 0,
    debug: bool = False,
    no_color: bool = False,
    version: bool = False,
) -> None:
    """Margin simulator - how many items can a client afford?

    Solves for the largest shipment that fits a client's budget when unit
    price, margin and transport cost depend on the quantity, and reports the
    resulting margin, shipping cost and cost per item.

    Examples:
      # Quote a bundled scenario
      msim quote tiered-volume

      # Quote across budgets and chart the per-item cost
      msim sweep budget-sweep --chart sweep.png

      # Show where scenarios are read from
      msim scenarios paths
    """
    if version:
        try:
            from .. import __version__

            library_version = __version__
        except ImportError:
            library_version = "unknown"

        click.echo(f"msim version: {library_version}")
        return

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        return

    log_level = resolve_log_level(verbose, quiet, debug)
    configure_logging(log_level)

    ctx.ensure_object(dict)
    ctx.obj.update(
        {
            "format": resolve_format(format),
            "format_explicit": format is not None,
            "verbose": verbose,
            "quiet": quiet,
            "debug": debug,
            "no_color": no_color,
            "log_level": log_level,
        }
    )


# Import and register subcommands after the group is defined
from .commands import quote, scenarios, sweep  # noqa: E402

app.add_command(quote.quote)
app.add_command(sweep.sweep)
app.add_command(scenarios.scenarios)


if __name__ == "__main__":
    app()
