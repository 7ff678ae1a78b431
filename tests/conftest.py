"""Shared fixtures for margin simulator tests."""

import logging
from typing import Iterator

import pytest

from margin_simulator.config_paths import ENV_SCENARIOS, SCENARIOS_FILENAME, get_package_config_dir
from margin_simulator.logging import get_logger, set_log_callback
from margin_simulator.pricing import CapacityLeg, Constant, PriceTier, capacity_cost, tiered
from margin_simulator.simulator import ENV_EXCHANGE_RATE, ENV_MAX_ITERATIONS


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep simulator environment variables and log configuration out of tests."""
    for var in (ENV_SCENARIOS, ENV_EXCHANGE_RATE, ENV_MAX_ITERATIONS):
        monkeypatch.delenv(var, raising=False)
    yield
    set_log_callback(None)
    logger = get_logger()
    for handler in [h for h in logger.handlers if getattr(h, "_margin_simulator", False)]:
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def bundled_scenarios(monkeypatch: pytest.MonkeyPatch) -> str:
    """Point scenario resolution at the bundled book."""
    path = str(get_package_config_dir() / SCENARIOS_FILENAME)
    monkeypatch.setenv(ENV_SCENARIOS, path)
    return path


@pytest.fixture
def tiered_price() -> object:
    """Unit price 3.5 below 8000 units, 3.25 up to 9999, 3.0 from 10000."""
    return tiered([PriceTier(0, 3.5), PriceTier(8000, 3.25), PriceTier(10000, 3.0)])


@pytest.fixture
def truck_and_container() -> object:
    """850 per truck plus 6000 per container, 7000 units each."""
    return capacity_cost([CapacityLeg("truck", 850, 7000), CapacityLeg("container", 6000, 7000)])


@pytest.fixture
def flat_margin() -> Constant:
    """40% margin."""
    return Constant(0.4)
