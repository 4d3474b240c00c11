"""Implied-volatility inversion and IV rank."""

from __future__ import annotations

import logging
import math
from typing import Sequence

import numpy as np
from scipy.optimize import brentq

from short_put_analytics.analytics.bsm import option_price
from short_put_analytics.config import (
    IV_SOLVER_HIGH,
    IV_SOLVER_LOW,
    IV_SOLVER_TOL,
)


LOGGER = logging.getLogger(__name__)


def implied_volatility(
    price: float,
    spot: float,
    strike: float,
    t: float,
    r: float,
    option_type: str,
    low: float = IV_SOLVER_LOW,
    high: float = IV_SOLVER_HIGH,
) -> float | None:
    """Back out Black-Scholes volatility from an option premium.

    Returns None when the premium sits outside the prices reachable inside
    ``[low, high]`` (for example below intrinsic value) or when ``t <= 0``.
    """
    if not math.isfinite(price) or price <= 0 or t <= 0:
        return None

    def objective(vol: float) -> float:
        return option_price(spot, strike, t, r, vol, option_type) - price

    f_low = objective(low)
    f_high = objective(high)
    if f_low * f_high > 0:
        LOGGER.debug(
            "IV bracket [%.4f, %.2f] does not contain price %.4f "
            "(K=%.2f, S=%.2f)",
            low,
            high,
            price,
            strike,
            spot,
        )
        return None
    return float(brentq(objective, low, high, xtol=IV_SOLVER_TOL))


def iv_rank(current_iv: float, iv_history: Sequence[float]) -> float | None:
    """Return where ``current_iv`` sits in its history, as 0-100.

    A flat history ranks at 50. Returns None for an empty history.
    """
    history = np.asarray(iv_history, dtype=np.float64)
    history = history[np.isfinite(history)]
    if history.size == 0:
        return None
    lo = float(history.min())
    hi = float(history.max())
    if math.isclose(lo, hi):
        return 50.0
    rank = (current_iv - lo) / (hi - lo) * 100.0
    return float(np.clip(rank, 0.0, 100.0))
