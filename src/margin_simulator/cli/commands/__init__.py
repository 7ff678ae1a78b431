"""CLI commands package."""

# Import all command modules to make them available
from . import quote, scenarios, sweep

__all__ = ["quote", "sweep", "scenarios"]
