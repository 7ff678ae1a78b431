"""Budget sweep command for the msim CLI."""

from typing import Optional

import click

from ...simulator import budget_range
from ...solver import PayerPolicy, SearchStrategy
from ..formatters import create_console, format_json, format_sweep_json, format_sweep_table, format_yaml
from ..utils import ExitCode, build_simulator, exit_code_for, handle_error, shipment_options


@click.command()
@click.argument("scenario")
@click.option("--start", type=float, help="First budget. Defaults to the scenario's sweep.")
@click.option("--stop", type=float, help="Last budget (inclusive). Defaults to the scenario's sweep.")
@click.option("--step", type=float, help="Budget increment. Defaults to the scenario's sweep.")
@click.option("--chart", type=click.Path(dir_okay=False), help="Write a PNG line chart to this path.")
@shipment_options
@click.pass_context
def sweep(
    ctx: click.Context,
    scenario: str,
    start: Optional[float] = None,
    stop: Optional[float] = None,
    step: Optional[float] = None,
    chart: Optional[str] = None,
    payer: Optional[PayerPolicy] = None,
    strategy: SearchStrategy = SearchStrategy.REFINEMENT,
    exchange_rate: Optional[float] = None,
    scenarios_path: Optional[str] = None,
) -> None:
    """Quote SCENARIO across a range of client budgets.

    Examples:
      msim sweep budget-sweep

      msim sweep tiered-volume --start 30000 --stop 120000 --step 10000 --chart sweep.png
    """
    try:
        loaded, simulator = build_simulator(
            scenario,
            scenarios_path=scenarios_path,
            payer=payer,
            exchange_rate=exchange_rate,
            strategy=strategy,
        )

        defaults = loaded.sweep or (None, None, None)
        bounds = [value if value is not None else default for value, default in zip((start, stop, step), defaults)]
        if any(value is None for value in bounds):
            handle_error(
                click.UsageError(f"Scenario '{loaded.name}' has no sweep; pass --start, --stop and --step."),
                ExitCode.INVALID_USAGE,
            )
        series = simulator.sweep(budget_range(*bounds))

        format_type = ctx.obj["format"]
        if format_type == "json":
            format_json(format_sweep_json(series, loaded.name))
        elif format_type == "yaml":
            format_yaml(format_sweep_json(series, loaded.name))
        else:
            console = create_console(no_color=ctx.obj["no_color"])
            format_sweep_table(series, console, scenario=loaded.name)

        if chart:
            from ...charting import render_budget_chart

            path = render_budget_chart(series, chart, title=f"Price per Item vs Client Budget ({loaded.name})")
            click.echo(f"Chart saved as {path}", err=True)

    except Exception as e:
        handle_error(e, exit_code_for(e))
