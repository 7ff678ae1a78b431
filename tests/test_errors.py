"""Tests for error classes."""

from margin_simulator.errors import (
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


class TestErrorClasses:
    """Tests for all error classes."""

    def test_margin_simulator_error(self) -> None:
        """Test MarginSimulatorError base class."""
        error = MarginSimulatorError("Base error message")
        assert str(error) == "Base error message"

    def test_invalid_input_error(self) -> None:
        """Test InvalidInputError."""
        error = InvalidInputError("Budget must be non-negative", param_name="budget", value=-5)
        assert error.message == "Budget must be non-negative"
        assert error.param_name == "budget"
        assert error.value == -5
        assert isinstance(error, MarginSimulatorError)

    def test_invalid_margin_error(self) -> None:
        """Test InvalidMarginError."""
        error = InvalidMarginError("Margin too high", quantity=12, margin=1.0)
        assert error.quantity == 12
        assert error.margin == 1.0
        assert str(error) == "Margin too high"
        assert isinstance(error, ComputationError)

    def test_pricing_function_error(self) -> None:
        """Test PricingFunctionError."""
        error = PricingFunctionError("Bad price", quantity=3, function_name="unit_price", value=0.0)
        assert error.quantity == 3
        assert error.function_name == "unit_price"
        assert error.value == 0.0
        assert isinstance(error, ComputationError)

    def test_non_convergence_error(self) -> None:
        """Test NonConvergenceError."""
        error = NonConvergenceError("Did not settle", iterations=100, last_estimate=42)
        assert error.iterations == 100
        assert error.last_estimate == 42
        assert isinstance(error, ComputationError)
        assert isinstance(error, MarginSimulatorError)

    def test_configuration_errors(self) -> None:
        """Test configuration error hierarchy."""
        error = ConfigFileNotFoundError("Missing", path="/tmp/scenarios.yml")
        assert error.path == "/tmp/scenarios.yml"
        assert isinstance(error, ConfigurationError)

        format_error = InvalidConfigFormatError("Bad format", path="x.yml", expected_type="number")
        assert format_error.expected_type == "number"
        assert format_error.path == "x.yml"
        assert isinstance(format_error, ConfigurationError)

    def test_scenario_not_found_error(self) -> None:
        """Test ScenarioNotFoundError."""
        error = ScenarioNotFoundError("No such scenario", scenario="nope")
        assert error.scenario == "nope"
        assert error.available_scenarios is None
        assert str(error) == "No such scenario"

        error = ScenarioNotFoundError(
            "No such scenario",
            scenario="nope",
            available_scenarios=["tiered-volume", "budget-sweep"],
        )
        assert error.available_scenarios == ["budget-sweep", "tiered-volume"]
        assert isinstance(error, ConfigurationError)
