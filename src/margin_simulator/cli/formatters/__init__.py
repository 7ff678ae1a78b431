"""CLI formatters package."""

from .json import (
    format_json,
    format_paths_json,
    format_quote_json,
    format_scenarios_json,
    format_sweep_json,
    format_yaml,
)
from .table import (
    create_console,
    format_paths_table,
    format_quote_table,
    format_scenarios_table,
    format_sweep_table,
)

__all__ = [
    "format_json",
    "format_yaml",
    "format_quote_json",
    "format_sweep_json",
    "format_scenarios_json",
    "format_paths_json",
    "create_console",
    "format_quote_table",
    "format_sweep_table",
    "format_scenarios_table",
    "format_paths_table",
]
