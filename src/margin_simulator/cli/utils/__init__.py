"""CLI utilities package."""

from .helpers import (
    build_simulator,
    ExitCode,
    exit_code_for,
    get_simulator_env_vars,
    handle_error,
    resolve_format,
    resolve_log_level,
)
from .options import (
    exchange_rate_option,
    payer_option,
    scenarios_file_option,
    shipment_options,
    strategy_option,
)

__all__ = [
    "ExitCode",
    "build_simulator",
    "exit_code_for",
    "resolve_format",
    "resolve_log_level",
    "handle_error",
    "get_simulator_env_vars",
    "payer_option",
    "strategy_option",
    "exchange_rate_option",
    "scenarios_file_option",
    "shipment_options",
]
