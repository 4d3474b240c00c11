"""Crash projection and scenario sweeps for short puts."""

from __future__ import annotations

import datetime as dt
import logging
import math
from typing import Iterable, Sequence

import numpy as np

from short_put_analytics.analytics.metrics import (
    annualized_return,
    days_to_expiration,
    is_viable,
)
from short_put_analytics.config import (
    CONTRACT_MULTIPLIER,
    DAYS_PER_MONTH,
    MIN_SAFETY_BUFFER_PCT,
    RISK_PROFILE_POINTS,
    RISK_PROFILE_SPAN,
    SCENARIO_GRID,
    SCENARIO_PROBABILITY_TOL,
)
from short_put_analytics.structures import (
    Contract,
    ExpectedValue,
    Scenario,
    ScenarioOutcome,
    ScenarioPnL,
    ScenarioResult,
    TradeMetrics,
    ValidationError,
)


LOGGER = logging.getLogger(__name__)


def _check_price(current_price: float) -> None:
    if not math.isfinite(current_price) or current_price <= 0:
        raise ValidationError(
            f"current price must be positive and finite, got {current_price!r}"
        )


def crash_price(current_price: float, crash_percent: float) -> float:
    """Underlying price after a drop of ``crash_percent`` percent."""
    _check_price(current_price)
    return current_price * (1.0 - crash_percent / 100.0)


def default_scenarios(
    grid: Iterable[tuple[str, float, float]] = SCENARIO_GRID,
) -> tuple[Scenario, ...]:
    return tuple(Scenario(name, change, prob) for name, change, prob in grid)


def project(
    chain: Iterable[Contract],
    current_price: float,
    crash_percent: float,
    target_return: float,
    timeframe_months: float,
    now: dt.date | dt.datetime,
    min_safety_buffer: float = MIN_SAFETY_BUFFER_PCT,
) -> list[ScenarioResult]:
    """Find puts that stay out of the money if the underlying crashes.

    A contract qualifies when its strike is below the crashed price and it
    expires within ``timeframe_months``. The premium is the bid (the price a
    seller can actually fill at). Survivors must return at least
    ``target_return`` percent annualized and keep a safety buffer above
    ``min_safety_buffer`` percent. Results are ordered by return on risk,
    highest first.
    """
    crashed = crash_price(current_price, crash_percent)
    results: list[ScenarioResult] = []
    for contract in chain:
        days = days_to_expiration(contract.expiration, now)
        if contract.strike >= crashed:
            continue
        if days / DAYS_PER_MONTH > timeframe_months:
            continue
        premium = contract.bid
        if not is_viable(contract, premium):
            LOGGER.debug(
                "Scenario skip %s %.2f: bid %.4f not viable",
                contract.symbol,
                contract.strike,
                premium,
            )
            continue

        safety_buffer = (crashed - contract.strike) / contract.strike * 100.0
        max_loss = (contract.strike - premium) * CONTRACT_MULTIPLIER
        result = ScenarioResult(
            symbol=contract.symbol,
            strike=contract.strike,
            expiration=contract.expiration,
            premium=premium,
            safety_buffer=safety_buffer,
            annualized_return=(
                annualized_return(premium, contract.strike, days) * 100.0
            ),
            would_be_assigned=contract.strike > crashed,
            days_to_expiry=days,
            max_loss=max_loss,
            return_on_risk=premium * CONTRACT_MULTIPLIER / max_loss * 100.0,
            volume=contract.volume,
            open_interest=contract.open_interest,
        )
        if result.annualized_return < target_return:
            continue
        if result.safety_buffer <= min_safety_buffer:
            continue
        results.append(result)

    LOGGER.debug(
        "Crash %.1f%% to %.2f: %d safe strikes", crash_percent, crashed, len(results)
    )
    return sorted(results, key=lambda item: -item.return_on_risk)


def _check_probabilities(scenarios: Sequence[Scenario]) -> None:
    total = sum(scenario.probability for scenario in scenarios)
    if abs(total - 1.0) > SCENARIO_PROBABILITY_TOL:
        raise ValidationError(
            f"Scenario probabilities must sum to 1.0, got {total:.12f}"
        )


def scenario_pnl(premium: float, strike: float, final_price: float) -> float:
    """Per-share expiry P&L of a short put."""
    if final_price >= strike:
        return premium
    return premium - (strike - final_price)


def sweep(
    selected: Sequence[TradeMetrics],
    current_price: float,
    scenarios: Sequence[Scenario] | None = None,
) -> list[ScenarioOutcome]:
    """Evaluate every candidate at expiry under each price scenario."""
    _check_price(current_price)
    if scenarios is None:
        scenarios = default_scenarios()
    _check_probabilities(scenarios)

    grid: list[ScenarioOutcome] = []
    for scenario in scenarios:
        final_price = current_price * (1.0 + scenario.price_change)
        rows = []
        for item in selected:
            pnl = scenario_pnl(item.premium, item.strike, final_price)
            rows.append(
                ScenarioPnL(
                    contract=item.contract,
                    pnl=pnl,
                    roi=pnl / item.strike * 100.0,
                )
            )
        grid.append(
            ScenarioOutcome(
                scenario=scenario,
                final_price=final_price,
                results=tuple(rows),
            )
        )
    return grid


def expected_values(grid: Sequence[ScenarioOutcome]) -> list[ExpectedValue]:
    """Probability-weighted P&L and ROI per candidate across a sweep."""
    if not grid:
        return []
    count = len(grid[0].results)
    output = []
    for idx in range(count):
        pnl = sum(o.results[idx].pnl * o.scenario.probability for o in grid)
        roi = sum(o.results[idx].roi * o.scenario.probability for o in grid)
        output.append(
            ExpectedValue(
                contract=grid[0].results[idx].contract,
                expected_pnl=pnl,
                expected_roi=roi,
            )
        )
    return output


def risk_profile(
    selected: Sequence[TradeMetrics],
    current_price: float,
    span: float = RISK_PROFILE_SPAN,
    points: int = RISK_PROFILE_POINTS,
    contracts: int = 1,
) -> tuple[np.ndarray, np.ndarray]:
    """Combined expiry P&L in dollars over ``current_price * (1 ± span)``."""
    _check_price(current_price)
    prices = current_price * (1.0 + np.linspace(-span, span, points))
    pnl = np.zeros(points, dtype=np.float64)
    for item in selected:
        assignment_loss = np.maximum(item.strike - prices, 0.0)
        pnl += (item.premium - assignment_loss) * CONTRACT_MULTIPLIER * contracts
    return prices, pnl
