"""Error types for the margin simulator.

This module defines the error types raised while validating shipment inputs,
solving for the affordable quantity and loading scenario configuration.
"""

from typing import Any, Optional


class MarginSimulatorError(Exception):
    """Base class for all simulator errors.

    This is the parent class for all simulator-specific exceptions.
    """

    pass


class InvalidInputError(MarginSimulatorError):
    """Raised when a boundary input is out of range.

    Covers negative budgets and non-positive exchange rates. The check runs
    before any search starts.

    Examples:
        >>> try:
        ...     solve(-1, 0.88, Constant(3.5), Constant(0.2), Constant(0), PayerPolicy.CLIENT)
        ... except InvalidInputError as e:
        ...     print(f"Bad {e.param_name}: {e.value}")
    """

    def __init__(self, message: str, param_name: str, value: Any) -> None:
        """Initialize invalid input error.

        Args:
            message: Error message
            param_name: Name of the rejected input
            value: The rejected value
        """
        super().__init__(message)
        self.message = message
        self.param_name = param_name
        self.value = value


class ComputationError(MarginSimulatorError):
    """Base class for errors raised while evaluating the cost model."""

    pass


class InvalidMarginError(ComputationError):
    """Raised when a margin function returns a value outside ``[0, 1)``.

    A margin of 1 or more would make the sell price infinite or negative.

    Examples:
        >>> try:
        ...     simulator.calculate_number_of_sellable_items()
        ... except InvalidMarginError as e:
        ...     print(f"Margin {e.margin} at quantity {e.quantity}")
    """

    def __init__(self, message: str, quantity: int, margin: float) -> None:
        """Initialize invalid margin error.

        Args:
            message: Error message
            quantity: Quantity at which the margin was probed
            margin: The offending margin
        """
        super().__init__(message)
        self.message = message
        self.quantity = quantity
        self.margin = margin


class PricingFunctionError(ComputationError):
    """Raised when a price or transport function returns an unusable value.

    Unit prices must be finite and positive, transport costs finite and
    non-negative. Values are never clamped.
    """

    def __init__(
        self,
        message: str,
        quantity: int,
        function_name: str,
        value: Any,
    ) -> None:
        """Initialize pricing function error.

        Args:
            message: Error message
            quantity: Quantity at which the function was probed
            function_name: Which function misbehaved (``unit_price``, ...)
            value: The returned value
        """
        super().__init__(message)
        self.message = message
        self.quantity = quantity
        self.function_name = function_name
        self.value = value


class NonConvergenceError(ComputationError):
    """Raised when the quantity search exceeds its iteration cap.

    Examples:
        >>> try:
        ...     solve(..., max_iterations=100)
        ... except NonConvergenceError as e:
        ...     print(f"Gave up at {e.last_estimate} after {e.iterations} steps")
    """

    def __init__(self, message: str, iterations: int, last_estimate: int) -> None:
        """Initialize non-convergence error.

        Args:
            message: Error message
            iterations: Overshoot corrections (refinement) or search steps
                (bisection) performed
            last_estimate: Estimate held when the cap was hit
        """
        super().__init__(message)
        self.message = message
        self.iterations = iterations
        self.last_estimate = last_estimate


class ConfigurationError(MarginSimulatorError):
    """Base class for configuration-related errors.

    This is raised for errors related to scenario loading, parsing,
    or validation.
    """

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        """Initialize configuration error.

        Args:
            message: Error message
            path: Optional path to the configuration file that caused the error
        """
        super().__init__(message)
        self.message = message
        self.path = path


class ConfigFileNotFoundError(ConfigurationError):
    """Raised when a scenario file is not found.

    Examples:
        >>> try:
        ...     load_scenario_book("missing.yml")
        ... except ConfigFileNotFoundError as e:
        ...     print(f"Scenario file not found: {e.path}")
    """

    pass


class InvalidConfigFormatError(ConfigurationError):
    """Raised when a scenario file or scenario mapping has an invalid format.

    Examples:
        >>> try:
        ...     scenario_from_dict("broken", {"client": {}})
        ... except InvalidConfigFormatError as e:
        ...     print(f"Invalid scenario: {e}")
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        expected_type: str = "dict",
    ) -> None:
        """Initialize invalid format error.

        Args:
            message: Error message
            path: Optional path to the configuration file
            expected_type: Expected type of the offending node
        """
        super().__init__(message, path)
        self.expected_type = expected_type


class ScenarioNotFoundError(ConfigurationError):
    """Raised when a named scenario is not in the scenario book."""

    def __init__(
        self,
        message: str,
        scenario: str,
        available_scenarios: Optional[list] = None,
        path: Optional[str] = None,
    ) -> None:
        """Initialize scenario not found error.

        Args:
            message: Error message
            scenario: The requested scenario name
            available_scenarios: Names present in the book
            path: Path of the scenario file searched
        """
        super().__init__(message, path)
        self.scenario = scenario
        self.available_scenarios = sorted(available_scenarios) if available_scenarios else None

    def __str__(self) -> str:
        """Return string representation of the error.

        Returns:
            Error message
        """
        return self.message
