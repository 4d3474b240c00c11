"""Per-contract trade metrics for selling puts."""

from __future__ import annotations

import datetime as dt
import logging
import math
from typing import Iterable

import pandas as pd

from short_put_analytics.analytics.bsm import greeks as model_greeks
from short_put_analytics.analytics.volatility import implied_volatility
from short_put_analytics.config import (
    DAYS_PER_YEAR,
    MIN_VIABLE_PREMIUM,
    RISK_FREE_RATE,
    VOLATILITY_FLOOR,
)
from short_put_analytics.structures import Contract, Greeks, TradeMetrics


LOGGER = logging.getLogger(__name__)

_SECONDS_PER_DAY = 86_400.0


def days_to_expiration(expiration: dt.date, now: dt.date | dt.datetime) -> int:
    """Return whole days until expiration, never less than 1.

    The expiration date is read as midnight; partial days round up.
    """
    if isinstance(expiration, dt.datetime):
        expiry_at = expiration
    else:
        expiry_at = dt.datetime.combine(expiration, dt.time())
    if isinstance(now, dt.datetime):
        now_at = now
    else:
        now_at = dt.datetime.combine(now, dt.time())
    if expiry_at.tzinfo is not None and now_at.tzinfo is None:
        now_at = now_at.replace(tzinfo=expiry_at.tzinfo)
    elif now_at.tzinfo is not None and expiry_at.tzinfo is None:
        expiry_at = expiry_at.replace(tzinfo=now_at.tzinfo)
    seconds = (expiry_at - now_at).total_seconds()
    return max(1, math.ceil(seconds / _SECONDS_PER_DAY))


def annualized_return(premium: float, strike: float, days: int) -> float:
    """Premium yield on the capital at risk, scaled to a 365-day year."""
    return (premium / (strike - premium)) * (DAYS_PER_YEAR / days)


def is_viable(contract: Contract, premium: float | None = None) -> bool:
    """Return False when the premium is too small or not below the strike."""
    if premium is None:
        premium = contract.mid
    return premium > MIN_VIABLE_PREMIUM and contract.strike > premium


def resolve_volatility(
    contract: Contract,
    days: int,
    risk_free_rate: float = RISK_FREE_RATE,
) -> float | None:
    """Quoted IV when present, else the IV implied by the mid premium."""
    if contract.implied_volatility > 0:
        return contract.implied_volatility
    return implied_volatility(
        contract.mid,
        contract.underlying_price,
        contract.strike,
        days / DAYS_PER_YEAR,
        risk_free_rate,
        contract.option_type,
    )


def resolve_greeks(
    contract: Contract,
    days: int,
    risk_free_rate: float = RISK_FREE_RATE,
    volatility: float | None = None,
) -> Greeks:
    """Fill Greeks the quote left at zero from the pricing model.

    Quoted non-zero values always win. When no volatility is known the
    missing fields stay at zero (unknown) rather than being invented.
    """
    quoted = (contract.delta, contract.gamma, contract.theta)
    if volatility is None:
        volatility = resolve_volatility(contract, days, risk_free_rate)
    if volatility is None:
        if 0.0 in quoted:
            LOGGER.debug(
                "%s %.2f: no volatility available; missing Greeks left unset",
                contract.symbol,
                contract.strike,
            )
        return Greeks(
            delta=contract.delta,
            gamma=contract.gamma,
            theta=contract.theta,
            vega=0.0,
            rho=0.0,
        )

    model = model_greeks(
        contract.underlying_price,
        contract.strike,
        days / DAYS_PER_YEAR,
        risk_free_rate,
        volatility,
        contract.option_type,
    )
    if 0.0 in quoted:
        LOGGER.debug(
            "%s %.2f: filling missing Greeks from model (vol=%.4f)",
            contract.symbol,
            contract.strike,
            volatility,
        )
    return Greeks(
        delta=contract.delta or model.delta,
        gamma=contract.gamma or model.gamma,
        theta=contract.theta or model.theta,
        vega=model.vega,
        rho=model.rho,
    )


def trade_metrics(
    contract: Contract,
    now: dt.date | dt.datetime,
    risk_free_rate: float = RISK_FREE_RATE,
) -> TradeMetrics | None:
    """Return sell-to-open metrics, or None when the contract is not viable.

    ``profit_probability`` is |delta|, an approximation of the chance the put
    expires worthless rather than a lognormal probability.
    """
    premium = contract.mid
    if not is_viable(contract, premium):
        return None

    days = days_to_expiration(contract.expiration, now)
    volatility = resolve_volatility(contract, days, risk_free_rate)
    resolved = resolve_greeks(contract, days, risk_free_rate, volatility)

    return TradeMetrics(
        contract=contract,
        premium=premium,
        days_to_expiration=days,
        annualized_return=annualized_return(premium, contract.strike, days),
        breakeven=contract.strike - premium,
        max_profit=premium,
        max_loss=contract.strike - premium,
        profit_probability=abs(resolved.delta),
        greeks=resolved,
        implied_volatility=volatility if volatility else VOLATILITY_FLOOR,
    )


def metrics_batch(
    contracts: Iterable[Contract],
    now: dt.date | dt.datetime,
    risk_free_rate: float = RISK_FREE_RATE,
) -> list[TradeMetrics]:
    """Compute metrics for every viable contract, preserving input order."""
    output: list[TradeMetrics] = []
    skipped = 0
    for contract in contracts:
        result = trade_metrics(contract, now, risk_free_rate)
        if result is None:
            skipped += 1
            LOGGER.debug(
                "Excluded %s %.2f %s: premium %.4f not viable",
                contract.symbol,
                contract.strike,
                contract.expiration,
                contract.mid,
            )
            continue
        output.append(result)
    if skipped:
        LOGGER.debug("Excluded %d non-viable contracts", skipped)
    return output


def metrics_frame(batch: Iterable[TradeMetrics]) -> pd.DataFrame:
    """Flatten metrics into a DataFrame for display and reporting."""
    return pd.DataFrame([item.to_dict() for item in batch])
