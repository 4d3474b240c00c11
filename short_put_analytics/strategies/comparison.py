"""Side-by-side scoring of up to three short-put candidates."""

from __future__ import annotations

import dataclasses
import logging
import math
from dataclasses import dataclass
from typing import Sequence

from short_put_analytics.config import (
    LIQUIDITY_OPEN_INTEREST_WEIGHT,
    LIQUIDITY_SCORE_CAP,
    LIQUIDITY_VOLUME_WEIGHT,
    MAX_COMPARISON_CANDIDATES,
    SCORING_WEIGHTS,
)
from short_put_analytics.strategies.scenarios import expected_values, sweep
from short_put_analytics.structures import (
    ComparisonMetric,
    ExpectedValue,
    Scenario,
    ScenarioOutcome,
    TradeMetrics,
    ValidationError,
)


LOGGER = logging.getLogger(__name__)

_WEIGHT_KEYS = frozenset(
    {"return", "probability", "capital_efficiency", "liquidity", "inverse_volatility"}
)


@dataclass(frozen=True)
class ComparisonReport:
    ranked: list[ComparisonMetric]
    scenarios: list[ScenarioOutcome]
    expected: list[ExpectedValue]


def liquidity_score(volume: int, open_interest: int) -> float:
    """Blend of volume and open interest, capped at 100."""
    blended = (
        volume * LIQUIDITY_VOLUME_WEIGHT
        + open_interest * LIQUIDITY_OPEN_INTEREST_WEIGHT
    )
    return min(LIQUIDITY_SCORE_CAP, blended / 100.0 * 100.0)


def _check_weights(weights: dict[str, float]) -> None:
    if set(weights) != _WEIGHT_KEYS:
        raise ValidationError(
            f"Scoring weights must cover {sorted(_WEIGHT_KEYS)}, "
            f"got {sorted(weights)}"
        )
    total = sum(weights.values())
    if not math.isclose(total, 1.0, abs_tol=1e-9):
        raise ValidationError(f"Scoring weights must sum to 1.0, got {total}")


def _score_one(item: TradeMetrics, weights: dict[str, float]) -> ComparisonMetric:
    contract = item.contract
    probability = abs(item.greeks.delta) * 100.0
    win = probability / 100.0
    expected_return = win * item.max_profit - (1.0 - win) * item.max_loss
    volatility = item.implied_volatility
    capital_efficiency = item.premium / contract.strike * 100.0
    liquidity = liquidity_score(contract.volume, contract.open_interest)

    # Inverse-vol term is not capped.
    overall = (
        weights["return"] * (item.annualized_return * 100.0)
        + weights["probability"] * probability
        + weights["capital_efficiency"] * capital_efficiency
        + weights["liquidity"] * liquidity
        + weights["inverse_volatility"] * (100.0 / volatility)
    )
    return ComparisonMetric(
        metrics=item,
        probability_of_profit=probability,
        expected_return=expected_return,
        risk_adjusted_return=item.annualized_return / volatility,
        capital_efficiency=capital_efficiency,
        time_decay=abs(item.greeks.theta) * item.days_to_expiration,
        liquidity_score=liquidity,
        overall_score=overall,
    )


def score_candidates(
    selected: Sequence[TradeMetrics],
    max_candidates: int = MAX_COMPARISON_CANDIDATES,
    weights: dict[str, float] | None = None,
) -> list[ComparisonMetric]:
    """Score and rank candidates by weighted composite score.

    More than ``max_candidates`` is rejected outright; nothing is scored.
    Ranks are 1-based by descending score, ties keeping input order.
    """
    if len(selected) > max_candidates:
        raise ValidationError(
            f"At most {max_candidates} candidates can be compared, "
            f"got {len(selected)}"
        )
    if weights is None:
        weights = SCORING_WEIGHTS
    _check_weights(weights)

    for item in selected:
        if item.implied_volatility <= 0:
            raise ValidationError(
                f"Strike {item.strike}: implied volatility must be floored "
                "above zero before scoring"
            )

    scored = [_score_one(item, weights) for item in selected]
    ordered = sorted(scored, key=lambda metric: -metric.overall_score)
    return [
        dataclasses.replace(metric, rank=idx + 1)
        for idx, metric in enumerate(ordered)
    ]


def decompose_score(
    metric: ComparisonMetric,
    weights: dict[str, float] | None = None,
) -> dict[str, float]:
    """Return each weighted term of ``overall_score`` plus their total."""
    if weights is None:
        weights = SCORING_WEIGHTS
    raw = {
        "return": metric.metrics.annualized_return * 100.0,
        "probability": metric.probability_of_profit,
        "capital_efficiency": metric.capital_efficiency,
        "liquidity": metric.liquidity_score,
        "inverse_volatility": 100.0 / metric.metrics.implied_volatility,
    }
    components = {
        f"{key}_contribution": round(raw[key] * weight, 4)
        for key, weight in weights.items()
    }
    components["total"] = round(
        sum(raw[key] * weight for key, weight in weights.items()), 4
    )
    return components


def best_and_worst(
    ranked: Sequence[ComparisonMetric], field: str
) -> tuple[ComparisonMetric | None, ComparisonMetric | None]:
    """Return the highest and lowest candidate by a numeric field.

    ``annualized_return`` is read from the wrapped trade metrics.
    """
    if not ranked:
        return None, None

    def value(metric: ComparisonMetric) -> float:
        if field == "annualized_return":
            return metric.metrics.annualized_return
        return float(getattr(metric, field))

    ordered = sorted(ranked, key=lambda metric: -value(metric))
    return ordered[0], ordered[-1]


def compare(
    selected: Sequence[TradeMetrics],
    current_price: float,
    scenarios: Sequence[Scenario] | None = None,
    max_candidates: int = MAX_COMPARISON_CANDIDATES,
    weights: dict[str, float] | None = None,
) -> ComparisonReport:
    """Rank candidates and run the scenario sweep over the same set."""
    ranked = score_candidates(selected, max_candidates, weights)
    grid = sweep(list(selected), current_price, scenarios)
    LOGGER.info(
        "Compared %d candidates; top strike %s",
        len(ranked),
        ranked[0].strike if ranked else None,
    )
    return ComparisonReport(
        ranked=ranked,
        scenarios=grid,
        expected=expected_values(grid),
    )
