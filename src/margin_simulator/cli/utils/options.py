"""Common CLI options and decorators."""

from functools import wraps
from typing import Any, Callable, TypeVar, cast

import click

from ...solver import PayerPolicy, SearchStrategy

F = TypeVar("F", bound=Callable[..., Any])


def payer_option(func: F) -> F:
    """Add --payer option to a command."""

    @click.option(
        "--payer",
        type=click.Choice([p.value for p in PayerPolicy], case_sensitive=False),
        help="Override who pays for transport.",
    )
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        if kwargs.get("payer"):
            kwargs["payer"] = PayerPolicy(kwargs["payer"].lower())
        return func(*args, **kwargs)

    return cast(F, wrapper)


def strategy_option(func: F) -> F:
    """Add --strategy option to a command."""

    @click.option(
        "--strategy",
        type=click.Choice([s.value for s in SearchStrategy], case_sensitive=False),
        default=SearchStrategy.REFINEMENT.value,
        show_default=True,
        help="Quantity search strategy. 'bisection' assumes cost grows with quantity.",
    )
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        kwargs["strategy"] = SearchStrategy(kwargs["strategy"].lower())
        return func(*args, **kwargs)

    return cast(F, wrapper)


def exchange_rate_option(func: F) -> F:
    """Add --exchange-rate option to a command."""

    @click.option(
        "--exchange-rate",
        type=float,
        help="Pricing-currency units per client-currency unit. Overrides the scenario and environment.",
    )
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        return func(*args, **kwargs)

    return cast(F, wrapper)


def scenarios_file_option(func: F) -> F:
    """Add --scenarios option to a command."""

    @click.option(
        "--scenarios",
        "scenarios_path",
        type=click.Path(exists=True, dir_okay=False),
        help="Scenario file to read instead of the resolved default.",
    )
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        return func(*args, **kwargs)

    return cast(F, wrapper)


def shipment_options(func: F) -> F:
    """Add the options shared by quoting commands."""
    func = payer_option(func)
    func = strategy_option(func)
    func = exchange_rate_option(func)
    func = scenarios_file_option(func)
    return func
