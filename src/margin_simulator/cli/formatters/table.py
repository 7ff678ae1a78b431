"""Rich table formatter for CLI output."""

import sys
from typing import Dict, List, Optional, Sequence, TextIO, Tuple

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ...quote import Quote


def create_console(output: Optional[TextIO] = None, no_color: bool = False) -> Console:
    """Create a Rich console instance.

    Args:
        output: Output stream (defaults to stdout)
        no_color: Disable color output

    Returns:
        Console instance
    """
    if output is None:
        output = sys.stdout

    return Console(file=output, no_color=no_color)


def _money(value: float) -> str:
    return f"${value:,.2f}"


def format_quote_table(quote: Quote, console: Optional[Console] = None, scenario: Optional[str] = None) -> None:
    """Format a quote as a Rich table.

    Args:
        quote: Quote to display
        console: Rich console (will create if None)
        scenario: Scenario name for the title
    """
    if console is None:
        console = create_console()

    title = f"Quote: {scenario}" if scenario else "Quote"
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value", justify="right", no_wrap=True)

    table.add_row("Client budget", _money(quote.budget))
    table.add_row("Transport paid by", str(quote.payer))
    table.add_row("Items shippable", Text(f"{quote.item_count:,}", style="bold green"))
    table.add_row("Sell price per item (pricing currency)", f"{quote.sell_price_per_unit:,.4f}")
    table.add_row("Margin rate", f"{quote.margin_rate:.2%}")
    table.add_row("Margin", _money(quote.margin_in_client_currency))
    table.add_row("Total shipping cost", _money(quote.shipping_cost_in_client_currency))
    table.add_row("Total cost per item (all included)", _money(quote.total_cost_per_unit_in_client_currency))

    console.print(table)


def format_sweep_table(
    series: Sequence[Tuple[float, Quote]], console: Optional[Console] = None, scenario: Optional[str] = None
) -> None:
    """Format a budget sweep as a Rich table.

    Args:
        series: ``(budget, Quote)`` pairs
        console: Rich console (will create if None)
        scenario: Scenario name for the title
    """
    if console is None:
        console = create_console()

    title = f"Budget Sweep: {scenario}" if scenario else "Budget Sweep"
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Budget", style="cyan", justify="right", no_wrap=True)
    table.add_column("Items", justify="right")
    table.add_column("Price per\nItem", justify="right")
    table.add_column("Margin", justify="right")
    table.add_column("Margin\nRate", justify="right")
    table.add_column("Shipping", justify="right")

    for budget, quote in series:
        table.add_row(
            _money(budget),
            f"{quote.item_count:,}",
            _money(quote.total_cost_per_unit_in_client_currency),
            _money(quote.margin_in_client_currency),
            f"{quote.margin_rate:.2%}",
            _money(quote.shipping_cost_in_client_currency),
        )

    console.print(table)


def format_scenarios_table(
    scenarios: List[Tuple[str, str]], path: Optional[str], console: Optional[Console] = None
) -> None:
    """Format scenario names as a Rich table.

    Args:
        scenarios: ``(name, description)`` pairs
        path: Scenario file the names came from
        console: Rich console (will create if None)
    """
    if console is None:
        console = create_console()

    console.print(f"[bold]Scenario file:[/bold] {path or 'N/A'}")
    if not scenarios:
        console.print("[dim]No scenarios found[/dim]")
        return

    table = Table(title="Scenarios", show_header=True, header_style="bold magenta")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Description")

    for name, description in sorted(scenarios):
        table.add_row(name, description or "N/A")

    console.print(table)


def format_paths_table(
    paths: Dict[str, Optional[str]],
    env_vars: Dict[str, Optional[str]],
    console: Optional[Console] = None,
) -> None:
    """Format scenario path resolution as Rich tables.

    Args:
        paths: Candidate and effective scenario paths
        env_vars: Simulator environment variables
        console: Rich console (will create if None)
    """
    if console is None:
        console = create_console()

    table = Table(title="Scenario Paths", show_header=True, header_style="bold magenta")
    table.add_column("Source", style="cyan")
    table.add_column("Path", style="dim")
    table.add_column("Active", justify="center")

    effective = paths.get("effective")
    for source in ("env", "user", "bundled"):
        path = paths.get(source)
        active = path is not None and path == effective
        table.add_row(
            source,
            path or "[dim]<not set>[/dim]",
            Text("✓" if active else "", style="green"),
        )
    console.print(table)

    env_table = Table(title="Environment Variables", show_header=True, header_style="bold magenta")
    env_table.add_column("Variable", style="cyan")
    env_table.add_column("Value", style="yellow")
    env_table.add_column("Set", justify="center")

    for key, value in sorted(env_vars.items()):
        is_set = value is not None
        env_table.add_row(
            key,
            value if is_set else "[dim]<not set>[/dim]",
            Text("✓" if is_set else "✗", style="green" if is_set else "red"),
        )
    console.print(env_table)
