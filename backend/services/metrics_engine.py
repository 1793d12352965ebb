"""
Portfolio Metrics Engine

Aggregate statistics over enriched holdings: total allocation, weighted
return, best/worst performer and average return.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from ..exceptions import EmptyPortfolioError
from ..models.portfolio import EnrichedHolding, PortfolioMetrics

logger = logging.getLogger(__name__)


def _to_decimal(value: float) -> Decimal:
    # repr gives the shortest decimal that round-trips, e.g. -23.4 not -23.39999...
    return Decimal(repr(float(value)))


def _quantize(value: Decimal, places: int = 1) -> float:
    # ROUND_HALF_UP rounds ties away from zero
    return float(value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP))


def round_half_away_from_zero(value: float, places: int = 1) -> float:
    """Round like a calculator: 0.25 -> 0.3, -0.25 -> -0.3."""
    return _quantize(_to_decimal(value), places)


def compute_metrics(holdings: Sequence[EnrichedHolding]) -> PortfolioMetrics:
    """
    Compute aggregate metrics for a set of holdings.

    The weighted return is the sum of each return scaled by its allocation
    fraction and is not divided by the total allocation, so a portfolio that
    allocates less than 100% reports a proportionally smaller figure.

    Sums are exact decimals and rounded once, so the result does not depend
    on holding order. Best and worst performers keep the first holding on ties.

    Raises:
        EmptyPortfolioError: If holdings is empty
    """
    if not holdings:
        raise EmptyPortfolioError()

    total_allocation = Decimal(0)
    weighted_sum = Decimal(0)
    return_sum = Decimal(0)
    best = worst = holdings[0]

    for holding in holdings:
        percentage = _to_decimal(holding.percentage)
        percent_return = _to_decimal(holding.percent_return)
        total_allocation += percentage
        weighted_sum += percent_return * percentage / 100
        return_sum += percent_return

        if holding.percent_return > best.percent_return:
            best = holding
        if holding.percent_return < worst.percent_return:
            worst = holding

    metrics = PortfolioMetrics(
        total_allocation=float(total_allocation),
        weighted_return=_quantize(weighted_sum),
        best_performer=best,
        worst_performer=worst,
        holding_count=len(holdings),
        average_return=_quantize(return_sum / len(holdings)),
    )
    logger.debug(
        "Computed metrics for %d holdings: weighted=%s total=%s",
        metrics.holding_count, metrics.weighted_return, metrics.total_allocation
    )
    return metrics
