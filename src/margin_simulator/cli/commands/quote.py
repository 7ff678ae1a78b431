"""Quote command for the msim CLI."""

from typing import Optional

import click

from ...solver import PayerPolicy, SearchStrategy
from ..formatters import create_console, format_json, format_quote_json, format_quote_table, format_yaml
from ..utils import build_simulator, exit_code_for, handle_error, shipment_options


@click.command()
@click.argument("scenario")
@click.option("--budget", type=float, help="Client budget in client currency. Overrides the scenario.")
@shipment_options
@click.pass_context
def quote(
    ctx: click.Context,
    scenario: str,
    budget: Optional[float] = None,
    payer: Optional[PayerPolicy] = None,
    strategy: SearchStrategy = SearchStrategy.REFINEMENT,
    exchange_rate: Optional[float] = None,
    scenarios_path: Optional[str] = None,
) -> None:
    """Compute how many items a client can afford for SCENARIO.

    Examples:
      msim quote tiered-volume

      msim quote container-and-truck --budget 75000 --payer purchaser
    """
    try:
        loaded, simulator = build_simulator(
            scenario,
            scenarios_path=scenarios_path,
            budget=budget,
            payer=payer,
            exchange_rate=exchange_rate,
            strategy=strategy,
        )
        result = simulator.quote()

        format_type = ctx.obj["format"]
        if format_type == "json":
            format_json(format_quote_json(result, loaded.name))
        elif format_type == "yaml":
            format_yaml(format_quote_json(result, loaded.name))
        else:
            console = create_console(no_color=ctx.obj["no_color"])
            format_quote_table(result, console, scenario=loaded.name)

    except Exception as e:
        handle_error(e, exit_code_for(e))
