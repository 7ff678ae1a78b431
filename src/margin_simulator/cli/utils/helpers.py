"""Helper functions for CLI operations."""

import dataclasses
import os
import sys
from typing import Dict, List, Optional, Tuple

import click

from ...config_paths import ENV_SCENARIOS
from ...errors import (
    ComputationError,
    ConfigFileNotFoundError,
    InvalidConfigFormatError,
    InvalidInputError,
    ScenarioNotFoundError,
)
from ...scenarios import Scenario, ScenarioBook
from ...simulator import ENV_EXCHANGE_RATE, ENV_MAX_ITERATIONS, MarginSimulator, SimulatorConfig
from ...solver import PayerPolicy, SearchStrategy


class ExitCode:
    """Standard exit codes for the CLI."""

    SUCCESS = 0
    GENERIC_ERROR = 1
    INVALID_USAGE = 2
    SCENARIO_NOT_FOUND = 3
    DATA_SOURCE_ERROR = 4
    COMPUTATION_ERROR = 5


def resolve_format(cli_format: Optional[str] = None, default_tty: str = "table", default_non_tty: str = "json") -> str:
    """Resolve output format with TTY detection.

    Args:
        cli_format: Format specified via CLI flag
        default_tty: Default format for TTY output
        default_non_tty: Default format for non-TTY output

    Returns:
        Resolved format name
    """
    if cli_format:
        return cli_format.lower()

    if sys.stdout.isatty():
        return default_tty
    else:
        return default_non_tty


def resolve_log_level(verbose: int = 0, quiet: int = 0, debug: bool = False) -> str:
    """Map verbosity flags to a logging level name."""
    if debug:
        return "DEBUG"
    if verbose > quiet:
        return "DEBUG" if verbose >= 2 else "INFO"
    if quiet > verbose:
        return "ERROR" if quiet >= 2 else "WARNING"
    return "WARNING"


def handle_error(error: Exception, exit_code: int = ExitCode.GENERIC_ERROR) -> None:
    """Handle CLI errors with consistent formatting.

    Args:
        error: Exception to handle
        exit_code: Exit code to use
    """
    click.echo(f"Error: {str(error)}", err=True)
    sys.exit(exit_code)


def exit_code_for(error: Exception) -> int:
    """Pick the exit code matching an exception type."""
    if isinstance(error, ScenarioNotFoundError):
        return ExitCode.SCENARIO_NOT_FOUND
    if isinstance(error, (ConfigFileNotFoundError, InvalidConfigFormatError)):
        return ExitCode.DATA_SOURCE_ERROR
    if isinstance(error, ComputationError):
        return ExitCode.COMPUTATION_ERROR
    if isinstance(error, (InvalidInputError, click.BadParameter)):
        return ExitCode.INVALID_USAGE
    return ExitCode.GENERIC_ERROR


def get_simulator_env_vars() -> Dict[str, Optional[str]]:
    """Get all MARGIN_SIMULATOR_* environment variables.

    Returns:
        Dictionary of simulator environment variables and their values
    """
    env_vars: Dict[str, Optional[str]] = {}
    for key, value in os.environ.items():
        if key.startswith("MARGIN_SIMULATOR_"):
            env_vars[key] = value

    # Include known variables even if not set
    known_vars: List[str] = [ENV_SCENARIOS, ENV_EXCHANGE_RATE, ENV_MAX_ITERATIONS]
    for var in known_vars:
        if var not in env_vars:
            env_vars[var] = None

    return env_vars


def build_simulator(
    scenario_name: str,
    scenarios_path: Optional[str] = None,
    budget: Optional[float] = None,
    payer: Optional[PayerPolicy] = None,
    exchange_rate: Optional[float] = None,
    strategy: SearchStrategy = SearchStrategy.REFINEMENT,
) -> Tuple[Scenario, MarginSimulator]:
    """Load a scenario and apply command-line overrides.

    Args:
        scenario_name: Scenario to load
        scenarios_path: Scenario file, or None for the resolved default
        budget: Budget override
        payer: Payer override
        exchange_rate: Exchange rate override (beats the scenario and environment)
        strategy: Search strategy

    Returns:
        The loaded scenario and a simulator for the overridden shipment
    """
    scenario = ScenarioBook.load(scenarios_path).get(scenario_name)
    shipment = scenario.shipment
    if budget is not None:
        shipment = shipment.with_budget(budget)
    if payer is not None:
        shipment = shipment.with_payer(payer)
    if exchange_rate is not None:
        shipment = dataclasses.replace(shipment, exchange_rate=exchange_rate)
    return scenario, MarginSimulator(shipment, SimulatorConfig(strategy=strategy))
