"""JSON and YAML output formatters for CLI."""

import json
import sys
from enum import Enum as _Enum
from typing import Any, Dict, List, Optional, Sequence, TextIO, Tuple

import yaml

from ...quote import Quote


def _default_serializer(obj: Any) -> Any:
    """Serialize otherwise non-JSON-serializable objects.

    - Enum -> value (fallback to name)
    - Quote -> dict
    - Fallback -> str(obj)
    """
    if isinstance(obj, _Enum):
        return getattr(obj, "value", obj.name)
    if isinstance(obj, Quote):
        return obj.to_dict()
    return str(obj)


def format_json(data: Any, output: Optional[TextIO] = None, indent: int = 2) -> None:
    """Format data as JSON and write to output.

    Args:
        data: Data to format
        output: Output stream (defaults to stdout)
        indent: JSON indentation level
    """
    if output is None:
        output = sys.stdout

    json.dump(
        data,
        output,
        indent=indent,
        ensure_ascii=False,
        sort_keys=True,
        default=_default_serializer,
    )
    output.write("\n")


def format_yaml(data: Any, output: Optional[TextIO] = None) -> None:
    """Format data as YAML and write to output.

    Args:
        data: Plain data (dicts, lists, scalars)
        output: Output stream (defaults to stdout)
    """
    if output is None:
        output = sys.stdout
    output.write(yaml.safe_dump(data, default_flow_style=False, sort_keys=True))


def format_quote_json(quote: Quote, scenario: Optional[str] = None) -> Dict[str, Any]:
    """Format a quote for JSON output.

    Args:
        quote: Quote to format
        scenario: Scenario name the quote was computed for

    Returns:
        Formatted data structure
    """
    return {"scenario": scenario, "quote": quote.to_dict()}


def format_sweep_json(series: Sequence[Tuple[float, Quote]], scenario: Optional[str] = None) -> Dict[str, Any]:
    """Format a budget sweep for JSON output.

    Args:
        series: ``(budget, Quote)`` pairs
        scenario: Scenario name

    Returns:
        Formatted data structure
    """
    return {
        "scenario": scenario,
        "points": [quote.to_dict() for _, quote in series],
        "count": len(series),
    }


def format_scenarios_json(scenarios: List[Tuple[str, str]], path: Optional[str]) -> Dict[str, Any]:
    """Format scenario names for JSON output.

    Args:
        scenarios: ``(name, description)`` pairs
        path: Scenario file the names came from

    Returns:
        Formatted data structure
    """
    return {
        "path": path,
        "scenarios": [{"name": name, "description": description} for name, description in sorted(scenarios)],
        "count": len(scenarios),
    }


def format_paths_json(paths: Dict[str, Optional[str]], env_vars: Dict[str, Optional[str]]) -> Dict[str, Any]:
    """Format scenario path resolution for JSON output.

    Args:
        paths: Candidate and effective scenario paths
        env_vars: Simulator environment variables

    Returns:
        Formatted data structure
    """
    return {
        "scenario_paths": paths,
        "resolution_order": [
            "MARGIN_SIMULATOR_SCENARIOS_PATH environment variable",
            "User config directory",
            "Bundled package data",
        ],
        "environment_variables": {key: {"value": value, "set": value is not None} for key, value in env_vars.items()},
    }
