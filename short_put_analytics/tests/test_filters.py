"""Tests for filtering and sorting trade metrics."""

import datetime as dt

import pytest

from short_put_analytics.data.filters import (
    FilterCriteria,
    filter_metrics,
    is_good_trade,
    passes_filters,
    sort_metrics,
)
from short_put_analytics.structures import Contract, Greeks, TradeMetrics


def _metrics(
    symbol: str = "XYZ",
    strike: float = 95.0,
    premium: float = 2.0,
    days: int = 30,
    annualized: float = 0.25,
    delta: float = -0.35,
) -> TradeMetrics:
    contract = Contract(
        symbol=symbol,
        strike=strike,
        expiration=dt.date(2026, 2, 4),
        bid=max(0.0, premium - 0.1),
        ask=premium + 0.1,
        underlying_price=100.0,
    )
    return TradeMetrics(
        contract=contract,
        premium=premium,
        days_to_expiration=days,
        annualized_return=annualized,
        breakeven=strike - premium,
        max_profit=premium,
        max_loss=strike - premium,
        profit_probability=abs(delta),
        greeks=Greeks(delta=delta, gamma=0.02, theta=-0.05, vega=0.1, rho=-0.02),
        implied_volatility=0.3,
    )


def test_bounds_are_inclusive() -> None:
    criteria = FilterCriteria()
    edges = [
        _metrics(days=7),
        _metrics(days=60),
        _metrics(premium=0.10),
        _metrics(premium=10.0),
        _metrics(annualized=0.20),
        _metrics(delta=-0.5),
        _metrics(delta=-0.3),
    ]
    for item in edges:
        assert passes_filters(item, criteria)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"days": 6},
        {"days": 61},
        {"premium": 0.09},
        {"premium": 10.01},
        {"annualized": 0.19},
        {"delta": -0.51},
        {"delta": -0.29},
    ],
)
def test_values_outside_bounds_are_rejected(kwargs: dict) -> None:
    assert not passes_filters(_metrics(**kwargs), FilterCriteria())


def test_delta_filter_can_be_disabled() -> None:
    item = _metrics(delta=-0.1)
    assert not passes_filters(item, FilterCriteria())
    assert passes_filters(item, FilterCriteria(enable_delta_filter=False))


def test_filter_metrics_keeps_input_order() -> None:
    batch = [
        _metrics(symbol="A"),
        _metrics(symbol="B", annualized=0.05),
        _metrics(symbol="C"),
    ]
    result = filter_metrics(batch)
    assert [item.contract.symbol for item in result] == ["A", "C"]
    assert filter_metrics([]) == []


def test_is_good_trade_threshold() -> None:
    assert is_good_trade(_metrics(annualized=0.20))
    assert not is_good_trade(_metrics(annualized=0.1999))
    assert is_good_trade(_metrics(annualized=0.1), min_annualized_return=0.1)


@pytest.mark.parametrize("order", ["asc", "desc"])
def test_sort_is_stable_for_equal_keys(order: str) -> None:
    batch = [
        _metrics(symbol="A", annualized=0.3),
        _metrics(symbol="B", annualized=0.5),
        _metrics(symbol="C", annualized=0.3),
        _metrics(symbol="D", annualized=0.3),
    ]
    result = sort_metrics(batch, "annualized_return", order)
    ties = [item.contract.symbol for item in result if item.annualized_return == 0.3]
    assert ties == ["A", "C", "D"]
    if order == "desc":
        assert result[0].contract.symbol == "B"
    else:
        assert result[-1].contract.symbol == "B"


def test_sort_by_each_key() -> None:
    batch = [
        _metrics(symbol="A", premium=1.0, days=40, delta=-0.45),
        _metrics(symbol="B", premium=3.0, days=10, delta=-0.32),
    ]
    assert [m.contract.symbol for m in sort_metrics(batch, "premium")] == ["B", "A"]
    assert [
        m.contract.symbol for m in sort_metrics(batch, "days_to_expiration", "asc")
    ] == ["B", "A"]
    assert [m.contract.symbol for m in sort_metrics(batch, "delta", "asc")] == [
        "A",
        "B",
    ]


def test_sort_rejects_unknown_key_or_order() -> None:
    with pytest.raises(ValueError):
        sort_metrics([_metrics()], "gamma")
    with pytest.raises(ValueError):
        sort_metrics([_metrics()], "premium", "sideways")
