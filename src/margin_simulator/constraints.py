"""Input constraints for the margin simulator.

This module defines the constraint types used to validate shipment inputs at
the boundary, before any quantity search starts.
"""

import math
from typing import Any, List, Optional

from .errors import InvalidInputError


class NumericConstraint:
    """Constraint for numeric inputs."""

    def __init__(
        self,
        min_value: float = 0.0,
        max_value: Optional[float] = None,
        min_exclusive: bool = False,
        max_exclusive: bool = False,
        description: str = "",
    ):
        """Initialize numeric constraint.

        Args:
            min_value: Minimum allowed value
            max_value: Maximum allowed value, or None for no upper limit
            min_exclusive: Whether ``min_value`` itself is rejected
            max_exclusive: Whether ``max_value`` itself is rejected
            description: Description of the input
        """
        self.min_value = min_value
        self.max_value = max_value
        self.min_exclusive = min_exclusive
        self.max_exclusive = max_exclusive
        self.description = description

    def _range_text(self) -> str:
        lower = "(" if self.min_exclusive else "["
        upper = ")" if self.max_exclusive or self.max_value is None else "]"
        max_desc = str(self.max_value) if self.max_value is not None else "unlimited"
        return f"{lower}{self.min_value}, {max_desc}{upper}"

    def validate(self, name: str, value: Any) -> None:
        """Validate a value against this constraint.

        Args:
            name: Input name for error messages
            value: Value to validate

        Raises:
            InvalidInputError: If validation fails
        """
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidInputError(
                f"Input '{name}' must be a number, got {type(value).__name__}.",
                param_name=name,
                value=value,
            )

        if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
            raise InvalidInputError(
                f"Input '{name}' must be finite, got {value}.\n"
                f"Description: {self.description}",
                param_name=name,
                value=value,
            )

        too_low = value <= self.min_value if self.min_exclusive else value < self.min_value
        too_high = False
        if self.max_value is not None:
            too_high = value >= self.max_value if self.max_exclusive else value > self.max_value

        if too_low or too_high:
            raise InvalidInputError(
                f"Input '{name}' must be in {self._range_text()}.\n"
                f"Description: {self.description}\n"
                f"Current value: {value}",
                param_name=name,
                value=value,
            )


class EnumConstraint:
    """Constraint for enumerated string inputs."""

    def __init__(
        self,
        allowed_values: List[str],
        description: str = "",
    ):
        """Initialize enum constraint.

        Args:
            allowed_values: List of allowed string values
            description: Description of the input
        """
        self.allowed_values = allowed_values
        self.description = description

    def validate(self, name: str, value: Any) -> None:
        """Validate a value against this constraint.

        Args:
            name: Input name for error messages
            value: Value to validate

        Raises:
            InvalidInputError: If validation fails
        """
        if not isinstance(value, str):
            raise InvalidInputError(
                f"Input '{name}' must be a string, got {type(value).__name__}.\n"
                f"Description: {self.description}",
                param_name=name,
                value=value,
            )

        if value.lower() not in self.allowed_values:
            raise InvalidInputError(
                f"Invalid value '{value}' for input '{name}'.\n"
                f"Description: {self.description}\n"
                f"Allowed values: {', '.join(map(str, sorted(self.allowed_values)))}",
                param_name=name,
                value=value,
            )


BUDGET = NumericConstraint(min_value=0.0, description="Client budget in client currency")
EXCHANGE_RATE = NumericConstraint(
    min_value=0.0,
    min_exclusive=True,
    description="Pricing-currency units per client-currency unit",
)
MARGIN = NumericConstraint(
    min_value=0.0,
    max_value=1.0,
    max_exclusive=True,
    description="Fraction of the sell price kept as profit",
)
PAYER = EnumConstraint(["client", "purchaser"], description="Party paying for transport")
STRATEGY = EnumConstraint(["refinement", "bisection"], description="Quantity search strategy")
