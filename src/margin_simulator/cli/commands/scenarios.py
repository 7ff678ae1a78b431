"""Scenario book commands for the msim CLI."""

from typing import Optional

import click

from ...config_paths import copy_default_to_user_config, describe_scenario_paths, get_user_config_dir
from ...scenarios import ScenarioBook
from ..formatters import (
    create_console,
    format_json,
    format_paths_json,
    format_paths_table,
    format_scenarios_json,
    format_scenarios_table,
    format_yaml,
)
from ..utils import exit_code_for, get_simulator_env_vars, handle_error, scenarios_file_option


@click.group()
def scenarios() -> None:
    """Inspect and seed the scenario book."""
    pass


@scenarios.command()
@scenarios_file_option
@click.pass_context
def list(ctx: click.Context, scenarios_path: Optional[str] = None) -> None:
    """List the scenarios in the scenario book."""
    try:
        book = ScenarioBook.load(scenarios_path)
        entries = [(name, book.describe(name)) for name in book.names()]

        format_type = ctx.obj["format"]
        if format_type == "json":
            format_json(format_scenarios_json(entries, book.path))
        elif format_type == "yaml":
            format_yaml(format_scenarios_json(entries, book.path))
        else:
            console = create_console(no_color=ctx.obj["no_color"])
            format_scenarios_table(entries, book.path, console)

    except Exception as e:
        handle_error(e, exit_code_for(e))


@scenarios.command()
@click.pass_context
def paths(ctx: click.Context) -> None:
    """Show where scenario files are looked up and which one is in effect."""
    try:
        resolved = describe_scenario_paths()
        env_vars = get_simulator_env_vars()

        format_type = ctx.obj["format"]
        if format_type == "json":
            format_json(format_paths_json(resolved, env_vars))
        elif format_type == "yaml":
            format_yaml(format_paths_json(resolved, env_vars))
        else:
            console = create_console(no_color=ctx.obj["no_color"])
            format_paths_table(resolved, env_vars, console)

    except Exception as e:
        handle_error(e, exit_code_for(e))


@scenarios.command()
def init() -> None:
    """Copy the bundled scenarios into the user config directory for editing."""
    try:
        if copy_default_to_user_config():
            click.echo(f"Scenarios copied to {get_user_config_dir()}")
        else:
            click.echo(f"Scenarios already present in {get_user_config_dir()}; nothing copied.")
    except Exception as e:
        handle_error(e, exit_code_for(e))
