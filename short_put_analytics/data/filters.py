"""Filtering and ordering of trade metrics."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable

from short_put_analytics.config import (
    DELTA_RANGE,
    ENABLE_DELTA_FILTER,
    MAX_DAYS_TO_EXPIRATION,
    MAX_PREMIUM,
    MIN_ANNUALIZED_RETURN,
    MIN_DAYS_TO_EXPIRATION,
    MIN_PREMIUM,
    SORT_KEYS,
)
from short_put_analytics.structures import TradeMetrics


@dataclass(frozen=True)
class FilterCriteria:
    """Inclusive numeric bounds a trade must satisfy."""

    min_annualized_return: float = MIN_ANNUALIZED_RETURN
    delta_range: tuple[float, float] = DELTA_RANGE
    enable_delta_filter: bool = ENABLE_DELTA_FILTER
    min_days_to_expiration: int = MIN_DAYS_TO_EXPIRATION
    max_days_to_expiration: int = MAX_DAYS_TO_EXPIRATION
    min_premium: float = MIN_PREMIUM
    max_premium: float = MAX_PREMIUM


_SORT_KEY_FUNCS: dict[str, Callable[[TradeMetrics], float]] = {
    "annualized_return": lambda item: item.annualized_return,
    "premium": lambda item: item.premium,
    "days_to_expiration": lambda item: item.days_to_expiration,
    "delta": lambda item: item.greeks.delta,
}

assert set(_SORT_KEY_FUNCS) == set(SORT_KEYS), (
    "Sort key functions out of sync with config.SORT_KEYS: "
    f"{set(_SORT_KEY_FUNCS) ^ set(SORT_KEYS)}"
)


def is_good_trade(
    item: TradeMetrics, min_annualized_return: float = MIN_ANNUALIZED_RETURN
) -> bool:
    """Return True when the trade meets the return floor."""
    return item.annualized_return >= min_annualized_return


def passes_filters(item: TradeMetrics, criteria: FilterCriteria) -> bool:
    """Return True if the trade satisfies every active bound."""
    if not (
        criteria.min_days_to_expiration
        <= item.days_to_expiration
        <= criteria.max_days_to_expiration
    ):
        return False
    if not criteria.min_premium <= item.premium <= criteria.max_premium:
        return False
    if not is_good_trade(item, criteria.min_annualized_return):
        return False
    if criteria.enable_delta_filter:
        low, high = criteria.delta_range
        if not low <= item.greeks.delta <= high:
            return False
    return True


def filter_metrics(
    batch: Iterable[TradeMetrics],
    criteria: FilterCriteria | None = None,
) -> list[TradeMetrics]:
    """Keep trades passing ``criteria``, in input order."""
    if criteria is None:
        criteria = FilterCriteria()
    return [item for item in batch if passes_filters(item, criteria)]


def sort_metrics(
    batch: Iterable[TradeMetrics],
    key: str = "annualized_return",
    order: str = "desc",
) -> list[TradeMetrics]:
    """Return trades ordered by ``key``.

    The sort is stable in both directions: equal keys keep their input order
    even when descending.
    """
    key_func = _SORT_KEY_FUNCS.get(key)
    if key_func is None:
        raise ValueError(f"sort key must be one of {SORT_KEYS}, got {key!r}")
    if order == "asc":
        return sorted(batch, key=key_func)
    if order == "desc":
        return sorted(batch, key=lambda item: -key_func(item))
    raise ValueError("order must be 'asc' or 'desc'")
