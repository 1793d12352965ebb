"""
Portfolio Configuration for Portfolio Mirror

Canonical thresholds and fixed ticker sets used by the advice rules.
Import from any module that needs these to keep a single source of truth.
"""

# Reflection bands, evaluated high to low: (lower bound exclusive, sentiment, advice)
REFLECTION_BANDS = [
    (15, 'excited', 'Excellent choice!'),
    (5, 'satisfied', 'Good pick, but could be better.'),
    (0, 'cautious', 'Decent, but consider alternatives.'),
]
REFLECTION_FLOOR = ('concerned', 'Maybe reconsider this allocation.')

# Warning thresholds (percent of portfolio)
OVER_CONCENTRATION_PCT = 40
CONCENTRATION_PCT = 30
MIN_HOLDINGS = 3
MAX_TECH_HOLDINGS = 2
MIN_TOTAL_ALLOCATION_PCT = 25

TECH_TICKERS = frozenset({
    'TCS', 'INFY', 'WIPRO', 'HCLTECH',
    'TESLA', 'AAPL', 'GOOGL', 'MSFT',
})

GENERAL_WARNINGS = (
    "💡 Don't panic sell during market dips.",
    "🚫 Don't chase hot stocks without research.",
    "⏰ Don't check your portfolio every day - it leads to emotional decisions.",
)

# Analysis classification thresholds (weighted return, percent)
HIGH_RISK_RETURN = 10
MODERATE_RISK_RETURN = 5
WELL_DIVERSIFIED_HOLDINGS = 5
