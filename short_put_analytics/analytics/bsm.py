"""Black-Scholes pricing and Greeks."""

from __future__ import annotations

import math

from short_put_analytics.config import DAYS_PER_YEAR, VOLATILITY_FLOOR
from short_put_analytics.structures import Greeks, ValidationError


# Abramowitz & Stegun 26.2.17, |error| < 7.5e-8
_AS_P = 0.2316419
_AS_B = (0.319381530, -0.356563782, 1.781477937, -1.821255978, 1.330274429)
_INV_SQRT_2PI = 1.0 / math.sqrt(2.0 * math.pi)

# Largest discount exponent passed to math.exp; beyond ~709 it raises.
_MAX_EXPONENT = 700.0


def norm_pdf(x: float) -> float:
    """Standard normal density."""
    return _INV_SQRT_2PI * math.exp(-0.5 * x * x)


def norm_cdf(x: float) -> float:
    """Standard normal CDF via the A&S rational polynomial."""
    if x < 0.0:
        return 1.0 - norm_cdf(-x)
    t = 1.0 / (1.0 + _AS_P * x)
    poly = 0.0
    for coeff in reversed(_AS_B):
        poly = (poly + coeff) * t
    return 1.0 - norm_pdf(x) * poly


def _check_inputs(spot: float, strike: float, t: float, r: float) -> None:
    if not math.isfinite(spot) or spot <= 0:
        raise ValidationError(f"spot must be positive and finite, got {spot!r}")
    if not math.isfinite(strike) or strike <= 0:
        raise ValidationError(
            f"strike must be positive and finite, got {strike!r}"
        )
    if not math.isfinite(t):
        raise ValidationError(f"time to expiry must be finite, got {t!r}")
    if not math.isfinite(r):
        raise ValidationError(f"risk-free rate must be finite, got {r!r}")


def _effective_vol(vol: float) -> float:
    if not math.isfinite(vol) or vol <= 0:
        return VOLATILITY_FLOOR
    return vol


def _d1_d2(
    spot: float,
    strike: float,
    t: float,
    r: float,
    vol: float,
) -> tuple[float, float]:
    vol_sqrt_t = vol * math.sqrt(t)
    log_moneyness = math.log(spot) - math.log(strike)
    d1 = (log_moneyness + (r + 0.5 * vol * vol) * t) / vol_sqrt_t
    return d1, d1 - vol_sqrt_t


def _discounted(strike: float, r: float, t: float) -> float:
    exponent = min(-r * t, _MAX_EXPONENT)
    return strike * math.exp(exponent)


def option_price(
    spot: float,
    strike: float,
    t: float,
    r: float,
    vol: float,
    option_type: str,
) -> float:
    """Return the European Black-Scholes price for a call or put."""
    _check_inputs(spot, strike, t, r)
    if option_type not in ("call", "put"):
        raise ValueError("option_type must be 'call' or 'put'")
    if t <= 0:
        if option_type == "call":
            return max(spot - strike, 0.0)
        return max(strike - spot, 0.0)

    vol = _effective_vol(vol)
    d1, d2 = _d1_d2(spot, strike, t, r, vol)
    discounted_strike = _discounted(strike, r, t)
    if option_type == "call":
        return spot * norm_cdf(d1) - discounted_strike * norm_cdf(d2)
    return discounted_strike * norm_cdf(-d2) - spot * norm_cdf(-d1)


def greeks(
    spot: float,
    strike: float,
    time_to_expiry_years: float,
    risk_free_rate: float,
    volatility: float,
    option_type: str,
) -> Greeks:
    """Return delta, gamma, theta, vega and rho for one contract.

    At or past expiry delta collapses to its intrinsic value (call: 1 if
    spot > strike, put: -1 if spot < strike, else 0) and every other Greek
    is zero. A non-positive volatility is replaced by ``VOLATILITY_FLOOR``.

    Theta is per calendar day; vega and rho are per one point (1%) move.
    """
    t = time_to_expiry_years
    r = risk_free_rate
    _check_inputs(spot, strike, t, r)
    if option_type not in ("call", "put"):
        raise ValueError("option_type must be 'call' or 'put'")

    if t <= 0:
        if option_type == "call":
            delta = 1.0 if spot > strike else 0.0
        else:
            delta = -1.0 if spot < strike else 0.0
        return Greeks(delta=delta, gamma=0.0, theta=0.0, vega=0.0, rho=0.0)

    vol = _effective_vol(volatility)
    sqrt_t = math.sqrt(t)
    d1, d2 = _d1_d2(spot, strike, t, r, vol)
    pdf_d1 = norm_pdf(d1)
    discounted_strike = _discounted(strike, r, t)

    gamma_denominator = spot * vol * sqrt_t
    gamma = pdf_d1 / gamma_denominator if gamma_denominator > 0 else 0.0
    vega = spot * pdf_d1 * sqrt_t / 100.0
    decay = -spot * pdf_d1 * vol / (2.0 * sqrt_t)

    if option_type == "call":
        delta = norm_cdf(d1)
        theta = (decay - r * discounted_strike * norm_cdf(d2)) / DAYS_PER_YEAR
        rho = discounted_strike * t * norm_cdf(d2) / 100.0
    else:
        delta = norm_cdf(d1) - 1.0
        theta = (decay + r * discounted_strike * norm_cdf(-d2)) / DAYS_PER_YEAR
        rho = -discounted_strike * t * norm_cdf(-d2) / 100.0

    return Greeks(delta=delta, gamma=gamma, theta=theta, vega=vega, rho=rho)
