"""Scenario book loading.

A scenario book is a YAML file with a top-level ``scenarios`` mapping. Each
scenario describes one shipment; numbers may be given as scalars or as
quantity-dependent structures:

    purchaser:
      price_per_item:
        tiers:
          - {min_quantity: 0, price: 3.5}
          - {min_quantity: 8000, price: 3.25}
      desired_margin: 0.4
    transport:
      pays: client
      cost:
        legs:
          - {name: truck, cost: 850, capacity: 7000}

Scalars become ``Constant``, ``tiers`` become a tiered step function and
``legs`` a per-vehicle transport cost.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import yaml

from .config_paths import get_scenarios_path
from .constraints import MARGIN, PAYER
from .errors import (
    ConfigFileNotFoundError,
    InvalidConfigFormatError,
    InvalidInputError,
    ScenarioNotFoundError,
)
from .logging import LogEvent, log_debug, log_error
from .pricing import (
    CapacityLeg,
    Constant,
    DesiredMargin,
    MarginFromClientPrice,
    MarginSource,
    PriceTier,
    QuantityValue,
    capacity_cost,
    tiered,
)
from .simulator import ShipmentConfig, budget_range
from .solver import PayerPolicy


@dataclass(frozen=True)
class Scenario:
    """A named shipment with an optional budget sweep."""

    name: str
    shipment: ShipmentConfig
    description: str = ""
    sweep: Optional[Tuple[float, float, float]] = None

    def sweep_budgets(self) -> List[float]:
        if self.sweep is None:
            return []
        return budget_range(*self.sweep)


@dataclass
class ScenarioFileResult:
    """Outcome of reading a scenario file.

    Attributes:
        success: Whether the file was read and holds a ``scenarios`` mapping
        data: Raw ``scenarios`` mapping (if successful)
        error: Error message (if unsuccessful)
        exception: Exception that caused the failure, if any
        path: Scenario file that was read
    """

    success: bool
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    exception: Optional[Exception] = None
    path: Optional[str] = None

    def raise_for_error(self) -> None:
        """Raise the configuration error matching a failed read.

        Raises:
            ConfigFileNotFoundError: If the file does not exist
            InvalidConfigFormatError: If the file could not be read or parsed
        """
        if self.success:
            return
        if isinstance(self.exception, FileNotFoundError):
            raise ConfigFileNotFoundError(self.error or "Scenario file not found", path=self.path)
        raise InvalidConfigFormatError(self.error or "Invalid scenario file", path=self.path)


def _require_mapping(node: Any, where: str, path: Optional[str]) -> Dict[str, Any]:
    if not isinstance(node, dict):
        raise InvalidConfigFormatError(
            f"'{where}' must be a mapping, got {type(node).__name__}",
            path=path,
        )
    return node


def _require_number(node: Any, where: str, path: Optional[str]) -> float:
    if isinstance(node, bool) or not isinstance(node, (int, float)):
        raise InvalidConfigFormatError(
            f"'{where}' must be a number, got {type(node).__name__}",
            path=path,
            expected_type="number",
        )
    return node


def parse_quantity_value(node: Any, where: str, path: Optional[str] = None) -> QuantityValue:
    """Parse a scalar, ``tiers`` or ``legs`` node.

    Args:
        node: Parsed YAML node
        where: Dotted location used in error messages
        path: Scenario file path used in error messages

    Returns:
        Tagged quantity value

    Raises:
        InvalidConfigFormatError: If the node has an unknown shape
    """
    if not isinstance(node, dict):
        return Constant(_require_number(node, where, path))

    try:
        if set(node) == {"tiers"}:
            tiers = [
                PriceTier(
                    min_quantity=int(_require_number(t.get("min_quantity", 0), f"{where}.tiers", path)),
                    price=_require_number(t.get("price"), f"{where}.tiers.price", path),
                )
                for t in (_require_mapping(t, f"{where}.tiers[]", path) for t in node["tiers"] or [])
            ]
            return tiered(tiers)
        if set(node) == {"legs"}:
            legs = [
                CapacityLeg(
                    name=str(leg.get("name", f"leg-{i}")),
                    cost=_require_number(leg.get("cost"), f"{where}.legs.cost", path),
                    capacity=int(_require_number(leg.get("capacity"), f"{where}.legs.capacity", path)),
                )
                for i, leg in enumerate(_require_mapping(leg, f"{where}.legs[]", path) for leg in node["legs"] or [])
            ]
            return capacity_cost(legs)
    except (TypeError, ValueError) as e:
        raise InvalidConfigFormatError(f"Invalid '{where}': {e}", path=path) from e

    raise InvalidConfigFormatError(
        f"'{where}' must be a number or a mapping with exactly one of 'tiers' or 'legs', "
        f"got keys {sorted(node)}",
        path=path,
    )


def _parse_margin(
    purchaser: Dict[str, Any], client: Dict[str, Any], name: str, path: Optional[str]
) -> MarginSource:
    has_margin = purchaser.get("desired_margin") is not None
    has_price = client.get("acceptable_price") is not None
    if has_margin and has_price:
        raise InvalidConfigFormatError(
            f"Scenario '{name}' sets both purchaser.desired_margin and client.acceptable_price",
            path=path,
        )
    if has_price:
        return MarginFromClientPrice(
            parse_quantity_value(client["acceptable_price"], f"{name}.client.acceptable_price", path)
        )
    if not has_margin:
        raise InvalidConfigFormatError(
            f"Scenario '{name}' needs purchaser.desired_margin or client.acceptable_price",
            path=path,
        )

    value = parse_quantity_value(purchaser["desired_margin"], f"{name}.purchaser.desired_margin", path)
    if isinstance(value, Constant):
        try:
            MARGIN.validate("desired_margin", value.value)
        except InvalidInputError as e:
            raise InvalidConfigFormatError(f"Scenario '{name}': {e.message}", path=path) from e
    return DesiredMargin(value)


def scenario_from_dict(name: str, data: Any, path: Optional[str] = None) -> Scenario:
    """Build a scenario from its parsed YAML mapping.

    Args:
        name: Scenario name
        data: Mapping under ``scenarios.<name>``
        path: Scenario file path used in error messages

    Returns:
        Parsed scenario

    Raises:
        InvalidConfigFormatError: If the mapping is malformed
    """
    data = _require_mapping(data, name, path)
    client = _require_mapping(data.get("client"), f"{name}.client", path)
    purchaser = _require_mapping(data.get("purchaser"), f"{name}.purchaser", path)
    transport = _require_mapping(data.get("transport"), f"{name}.transport", path)

    if "price_per_item" not in purchaser:
        raise InvalidConfigFormatError(f"Scenario '{name}' is missing purchaser.price_per_item", path=path)

    pays = transport.get("pays", "client")
    try:
        PAYER.validate("transport.pays", pays)
    except InvalidInputError as e:
        raise InvalidConfigFormatError(f"Scenario '{name}': {e.message}", path=path) from e

    budget = _require_number(client.get("budget"), f"{name}.client.budget", path)
    exchange_rate = data.get("exchange_rate")
    if exchange_rate is not None:
        exchange_rate = _require_number(exchange_rate, f"{name}.exchange_rate", path)

    try:
        shipment = ShipmentConfig(
            budget=budget,
            price_per_item=parse_quantity_value(purchaser["price_per_item"], f"{name}.purchaser.price_per_item", path),
            margin=_parse_margin(purchaser, client, name, path),
            transport_cost=parse_quantity_value(transport.get("cost", 0), f"{name}.transport.cost", path),
            payer=PayerPolicy(pays.lower()),
            exchange_rate=exchange_rate,
        )
    except InvalidInputError as e:
        raise InvalidConfigFormatError(f"Scenario '{name}': {e.message}", path=path) from e

    sweep = None
    if data.get("sweep") is not None:
        node = _require_mapping(data["sweep"], f"{name}.sweep", path)
        sweep = tuple(
            _require_number(node.get(key), f"{name}.sweep.{key}", path) for key in ("start", "stop", "step")
        )

    return Scenario(
        name=name,
        shipment=shipment,
        description=str(data.get("description", "")),
        sweep=sweep,  # type: ignore[arg-type]
    )


def load_scenario_file(path: Optional[str] = None) -> ScenarioFileResult:
    """Read and parse a scenario file without raising.

    Args:
        path: Scenario file. If None, the resolved default location is used.

    Returns:
        Result holding the raw ``scenarios`` mapping on success
    """
    path = path or get_scenarios_path()
    try:
        with open(path, "r", encoding="utf-8") as f:
            content = f.read()
    except FileNotFoundError as e:
        error_msg = f"Scenario file not found: {path}"
        log_error(LogEvent.SCENARIO, error_msg, path=path)
        return ScenarioFileResult(success=False, error=error_msg, exception=e, path=path)
    except OSError as e:
        error_msg = f"Could not read scenario file {path}: {e}"
        log_error(LogEvent.SCENARIO, error_msg, path=path)
        return ScenarioFileResult(success=False, error=error_msg, exception=e, path=path)

    if not content.strip():
        error_msg = "Scenario file is empty"
        log_error(LogEvent.SCENARIO, error_msg, path=path)
        return ScenarioFileResult(success=False, error=error_msg, path=path)

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        error_msg = f"Failed to parse scenario file: {e}"
        log_error(LogEvent.SCENARIO, error_msg, path=path)
        return ScenarioFileResult(success=False, error=error_msg, exception=e, path=path)

    if not isinstance(data, dict) or not isinstance(data.get("scenarios"), dict):
        error_msg = "Scenario file must contain a 'scenarios' mapping"
        log_error(LogEvent.SCENARIO, error_msg, path=path)
        return ScenarioFileResult(success=False, error=error_msg, path=path)

    log_debug(LogEvent.SCENARIO, "Loaded scenario file", path=path, count=len(data["scenarios"]))
    return ScenarioFileResult(success=True, data=data["scenarios"], path=path)


class ScenarioBook:
    """Named scenarios loaded from one file."""

    def __init__(self, scenarios: Dict[str, Any], path: Optional[str] = None):
        """Initialize the book from a raw ``scenarios`` mapping.

        Scenarios are parsed lazily so one malformed entry does not hide the
        others.

        Args:
            scenarios: Mapping of scenario name to scenario mapping
            path: File the mapping came from
        """
        self._raw = scenarios
        self.path = path

    @classmethod
    def load(cls, path: Optional[str] = None) -> "ScenarioBook":
        """Load a scenario book.

        Args:
            path: Scenario file. If None, the resolved default location is used.

        Raises:
            ConfigFileNotFoundError: If the file does not exist
            InvalidConfigFormatError: If the file cannot be parsed
        """
        result = load_scenario_file(path)
        result.raise_for_error()
        return cls(result.data or {}, path=result.path)

    def names(self) -> List[str]:
        return sorted(self._raw)

    def describe(self, name: str) -> str:
        node = self._raw.get(name)
        if isinstance(node, dict):
            return str(node.get("description", ""))
        return ""

    def get(self, name: str) -> Scenario:
        """Parse and return a named scenario.

        Raises:
            ScenarioNotFoundError: If the name is not in the book
            InvalidConfigFormatError: If the scenario is malformed
        """
        if name not in self._raw:
            raise ScenarioNotFoundError(
                f"Scenario '{name}' not found. Available: {', '.join(self.names()) or 'none'}",
                scenario=name,
                available_scenarios=self.names(),
                path=self.path,
            )
        return scenario_from_dict(name, self._raw[name], path=self.path)
