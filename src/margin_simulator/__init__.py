"""Affordable-quantity simulator for shipment negotiations.

This package computes how many units a client can buy under a fixed budget
when unit price, margin and transport cost may all depend on the quantity
shipped, and reports the resulting margin, shipping cost and blended
per-unit cost.
"""

# Version of the package
try:
    from importlib.metadata import version as _version

    __version__ = _version("margin-simulator")
except ImportError:
    raise ImportError(
        "Failed to determine package version. This package requires Python 3.8+ "
        "where importlib.metadata is available, or must be installed as a package."
    )

# Import main components for easier access
from .errors import (
    ComputationError,
    ConfigFileNotFoundError,
    ConfigurationError,
    InvalidConfigFormatError,
    InvalidInputError,
    InvalidMarginError,
    MarginSimulatorError,
    NonConvergenceError,
    PricingFunctionError,
    ScenarioNotFoundError,
)
from .pricing import (
    CapacityLeg,
    Constant,
    DesiredMargin,
    FunctionOf,
    MarginFromClientPrice,
    PriceTier,
    capacity_cost,
    tiered,
)
from .quote import Quote, build_quote
from .scenarios import Scenario, ScenarioBook
from .simulator import (
    DEFAULT_EXCHANGE_RATE,
    MarginSimulator,
    ShipmentConfig,
    SimulatorConfig,
)
from .solver import PayerPolicy, SearchStrategy, solve

# Define public API
__all__ = [
    # Solver
    "solve",
    "PayerPolicy",
    "SearchStrategy",
    # Pricing
    "Constant",
    "FunctionOf",
    "PriceTier",
    "CapacityLeg",
    "tiered",
    "capacity_cost",
    "DesiredMargin",
    "MarginFromClientPrice",
    # Simulator
    "MarginSimulator",
    "ShipmentConfig",
    "SimulatorConfig",
    "DEFAULT_EXCHANGE_RATE",
    "Quote",
    "build_quote",
    "Scenario",
    "ScenarioBook",
    # Errors
    "MarginSimulatorError",
    "InvalidInputError",
    "ComputationError",
    "InvalidMarginError",
    "PricingFunctionError",
    "NonConvergenceError",
    "ConfigurationError",
    "ConfigFileNotFoundError",
    "InvalidConfigFormatError",
    "ScenarioNotFoundError",
]
