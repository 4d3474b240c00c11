"""Configuration constants for the short-put analytics engine."""

from __future__ import annotations

# ── Pricing ────────────────────────────────────────────────────────────────
# Risk-free rate
RISK_FREE_RATE: float = 0.05

# Volatility substituted when a quote carries none (or a non-positive one).
VOLATILITY_FLOOR: float = 0.01

# Calendar basis for annualization and theta.
DAYS_PER_YEAR: int = 365

# Contract size
CONTRACT_MULTIPLIER: int = 100

# Implied-vol solver bracket
IV_SOLVER_LOW: float = 1e-4
IV_SOLVER_HIGH: float = 5.0
IV_SOLVER_TOL: float = 1e-8

# ── Trade viability ────────────────────────────────────────────────────────
# Contracts whose mid premium is at or below this are excluded from metrics.
MIN_VIABLE_PREMIUM: float = 0.01

# ── Filter defaults ────────────────────────────────────────────────────────
MIN_ANNUALIZED_RETURN: float = 0.20
DELTA_RANGE: tuple[float, float] = (-0.5, -0.3)
ENABLE_DELTA_FILTER: bool = True
MIN_DAYS_TO_EXPIRATION: int = 7
MAX_DAYS_TO_EXPIRATION: int = 60
MIN_PREMIUM: float = 0.10
MAX_PREMIUM: float = 10.00

SORT_KEYS: tuple[str, ...] = (
    "annualized_return",
    "premium",
    "days_to_expiration",
    "delta",
)

# ── Comparison ─────────────────────────────────────────────────────────────
MAX_COMPARISON_CANDIDATES: int = 3

# Weights apply to percentage-scaled sub-terms; they must sum to 1.0.
SCORING_WEIGHTS: dict[str, float] = {
    "return": 0.30,
    "probability": 0.25,
    "capital_efficiency": 0.20,
    "liquidity": 0.15,
    "inverse_volatility": 0.10,
}

# Liquidity blend favors open interest over volume.
LIQUIDITY_VOLUME_WEIGHT: float = 0.3
LIQUIDITY_OPEN_INTEREST_WEIGHT: float = 0.7
LIQUIDITY_SCORE_CAP: float = 100.0

# ── Scenarios ──────────────────────────────────────────────────────────────
# (name, price change, probability); probabilities must sum to 1.0.
SCENARIO_GRID: tuple[tuple[str, float, float], ...] = (
    ("Bear Case", -0.15, 0.15),
    ("Mild Bear", -0.08, 0.20),
    ("Sideways", 0.00, 0.30),
    ("Mild Bull", 0.08, 0.20),
    ("Bull Case", 0.15, 0.15),
)
SCENARIO_PROBABILITY_TOL: float = 1e-9

# Minimum distance (pct) between a crashed price and a strike to call it safe.
MIN_SAFETY_BUFFER_PCT: float = 5.0

# Days per month when matching expiries to a timeframe.
DAYS_PER_MONTH: int = 30

# Risk profile
RISK_PROFILE_SPAN: float = 0.5
RISK_PROFILE_POINTS: int = 101

# ── CLI defaults ───────────────────────────────────────────────────────────
DEFAULT_SYMBOL: str = "AAPL"
DEFAULT_CRASH_PERCENT: float = 30.0
DEFAULT_TARGET_RETURN: float = 20.0
DEFAULT_TIMEFRAME_MONTHS: int = 3
DEFAULT_COMPARE_COUNT: int = 3

# ── Provider cache ─────────────────────────────────────────────────────────
QUOTE_CACHE_TTL_SECONDS: float = 60.0
