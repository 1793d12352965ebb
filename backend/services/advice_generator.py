"""
Advice Generator

Turns holdings and metrics into the text shown to the user: past-self
reflections, anti-advice warnings, the one-line portfolio summary and the
qualitative analysis labels.

The generators are total. Malformed numeric fields render as 0 rather than
raising, and both accept pydantic models or plain dicts.
"""

import logging
from typing import Any, Iterable, List, Tuple

from ..config.portfolio_config import (
    CONCENTRATION_PCT,
    GENERAL_WARNINGS,
    HIGH_RISK_RETURN,
    MAX_TECH_HOLDINGS,
    MIN_HOLDINGS,
    MIN_TOTAL_ALLOCATION_PCT,
    MODERATE_RISK_RETURN,
    OVER_CONCENTRATION_PCT,
    REFLECTION_BANDS,
    REFLECTION_FLOOR,
    TECH_TICKERS,
    WELL_DIVERSIFIED_HOLDINGS,
)
from ..models.portfolio import PortfolioClassification, PortfolioMetrics
from ..validators import as_number

logger = logging.getLogger(__name__)


def _field(item: Any, name: str, default: Any = None) -> Any:
    if isinstance(item, dict):
        return item.get(name, default)
    return getattr(item, name, default)


def _ticker(item: Any) -> str:
    ticker = _field(item, 'ticker')
    return str(ticker).strip().upper() if ticker is not None else ''


def format_number(value: Any) -> str:
    """Render a number without a trailing '.0' for integral values."""
    number = round(as_number(value), 2)
    if number.is_integer():
        return str(int(number))
    return str(number)


def format_change(percent_return: Any) -> str:
    """'+12%' for gains, '-5%' for losses, '0%' for flat."""
    number = as_number(percent_return)
    sign = '+' if number > 0 else ''
    return f"{sign}{format_number(number)}%"


def classify_return(percent_return: Any) -> Tuple[str, str]:
    """Return (sentiment, advice) for a one-year return, first band that matches."""
    number = as_number(percent_return)
    for lower_bound, sentiment, advice in REFLECTION_BANDS:
        if number > lower_bound:
            return sentiment, advice
    return REFLECTION_FLOOR


def generate_reflections(holdings: Iterable[Any]) -> List[str]:
    """One past-self reflection per holding, in input order."""
    reflections = []
    for holding in holdings:
        percent_return = _field(holding, 'percent_return')
        sentiment, advice = classify_return(percent_return)
        reflections.append(
            f'Your past self would be {sentiment}: '
            f'"If you held {_ticker(holding)} at {format_number(_field(holding, "percentage"))}%, '
            f'you would have seen a {format_change(percent_return)} return over the past year. '
            f'Current price: ${format_number(_field(holding, "price"))}. {advice}"'
        )
    return reflections


def generate_warnings(portfolio: Iterable[Any]) -> List[str]:
    """
    Rule-based warnings over raw allocations.

    Rules are applied in a fixed order and never deduplicated, so a holding
    above 40% gets both the over-concentration and the diversification
    warning. The three general warnings are always appended.
    """
    portfolio = list(portfolio or [])
    warnings = []

    for allocation in portfolio:
        ticker = _ticker(allocation)
        percentage = as_number(_field(allocation, 'percentage'))

        if percentage > OVER_CONCENTRATION_PCT:
            warnings.append(
                f"🚨 Do NOT put more than {OVER_CONCENTRATION_PCT}% in {ticker}. "
                f"You're over-concentrating risk!"
            )
        if percentage > CONCENTRATION_PCT:
            warnings.append(
                f"⚠️ {ticker} at {format_number(percentage)}% is risky. Consider diversifying."
            )

    if len(portfolio) < MIN_HOLDINGS:
        warnings.append(
            f"❌ Don't put all eggs in {len(portfolio)} basket(s). "
            f"Diversify across at least 5-7 stocks."
        )

    tech_count = sum(1 for allocation in portfolio if _ticker(allocation) in TECH_TICKERS)
    if tech_count > MAX_TECH_HOLDINGS:
        warnings.append(
            f"🔴 Don't over-concentrate in tech. You have {tech_count} tech stocks - diversify sectors!"
        )

    total = sum(as_number(_field(allocation, 'percentage')) for allocation in portfolio)
    if total < MIN_TOTAL_ALLOCATION_PCT:
        warnings.append(
            f"📉 Don't be too conservative. {format_number(total)}% total allocation "
            f"might miss growth opportunities."
        )

    warnings.extend(GENERAL_WARNINGS)
    logger.debug("Generated %d warnings for %d holdings", len(warnings), len(portfolio))
    return warnings


def build_summary(metrics: PortfolioMetrics) -> str:
    best, worst = metrics.best_performer, metrics.worst_performer
    return (
        f"Portfolio Summary: {metrics.holding_count} stocks, "
        f"{format_number(metrics.total_allocation)}% allocated, "
        f"{format_change(metrics.weighted_return)} weighted return. "
        f"Best performer: {best.ticker} ({format_change(best.percent_return)}), "
        f"Worst: {worst.ticker} ({format_change(worst.percent_return)})."
    )


def classify_portfolio(metrics: PortfolioMetrics) -> PortfolioClassification:
    """Qualitative labels driven by weighted return and holding count."""
    weighted = metrics.weighted_return

    if weighted > HIGH_RISK_RETURN:
        risk_level, recommendation = 'High Risk, High Reward', 'Hold'
    elif weighted > MODERATE_RISK_RETURN:
        risk_level, recommendation = 'Moderate Risk', 'Consider Rebalancing'
    else:
        risk_level, recommendation = 'Conservative', 'Review Strategy'

    return PortfolioClassification(
        risk_level=risk_level,
        diversification=(
            'Well Diversified' if metrics.holding_count >= WELL_DIVERSIFIED_HOLDINGS
            else 'Needs More Diversification'
        ),
        performance='Positive' if weighted > 0 else 'Negative',
        recommendation=recommendation,
    )
