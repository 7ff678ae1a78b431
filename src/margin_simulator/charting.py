"""Line chart of blended per-unit cost against client budget.

Requires the ``chart`` extra (matplotlib).
"""

from pathlib import Path
from typing import Sequence, Tuple, Union

from .logging import LogEvent, log_info
from .quote import Quote


def render_budget_chart(
    series: Sequence[Tuple[float, Quote]],
    path: Union[str, Path],
    title: str = "Price per Item vs Client Budget",
) -> Path:
    """Render a budget sweep as a PNG line chart.

    Args:
        series: ``(budget, Quote)`` pairs, as returned by ``MarginSimulator.sweep``
        path: Output image path
        title: Chart title

    Returns:
        Path of the written image

    Raises:
        ImportError: If matplotlib is not installed
        ValueError: If the series is empty
    """
    try:
        import matplotlib

        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
    except ImportError as e:
        raise ImportError(
            "Chart dependencies not available. Install with: pip install margin-simulator[chart]"
        ) from e

    if not series:
        raise ValueError("Cannot chart an empty series")

    budgets = [budget for budget, _ in series]
    per_unit = [quote.total_cost_per_unit_in_client_currency for _, quote in series]

    fig, ax = plt.subplots(figsize=(8, 6))
    try:
        ax.plot(budgets, per_unit, marker="o", color="tab:cyan", label="Price per Item")
        ax.set_xticks(budgets)
        ax.set_xticklabels([f"{b / 1000:g}k" for b in budgets], rotation=45)
        ax.set_xlabel("Client Budget", fontsize=12, fontweight="bold")
        ax.set_ylabel("Price per Item (client currency)", fontsize=12, fontweight="bold")
        ax.set_title(title, fontsize=14, fontweight="bold")
        ax.grid(True, alpha=0.3)
        ax.legend(loc="lower center")
        fig.tight_layout()

        output = Path(path)
        fig.savefig(output, dpi=150, facecolor="white")
    finally:
        plt.close(fig)

    log_info(LogEvent.REPORTING, f"Chart saved as {output}", path=str(output), points=len(series))
    return output
