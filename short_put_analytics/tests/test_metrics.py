"""Tests for per-contract trade metrics."""

import datetime as dt
import math

import pytest

from short_put_analytics.analytics.bsm import greeks
from short_put_analytics.analytics.metrics import (
    days_to_expiration,
    is_viable,
    metrics_batch,
    metrics_frame,
    trade_metrics,
)
from short_put_analytics.config import RISK_FREE_RATE, VOLATILITY_FLOOR
from short_put_analytics.structures import Contract, Greeks


NOW = dt.datetime(2026, 1, 5, 9, 30)
EXPIRY_30D = dt.date(2026, 2, 4)


def _contract(
    strike: float = 95.0,
    bid: float = 1.9,
    ask: float = 2.1,
    iv: float = 0.3,
    delta: float = -0.3,
    gamma: float = 0.02,
    theta: float = -0.05,
    expiration: dt.date = EXPIRY_30D,
    spot: float = 100.0,
) -> Contract:
    return Contract(
        symbol="XYZ",
        strike=strike,
        expiration=expiration,
        bid=bid,
        ask=ask,
        implied_volatility=iv,
        open_interest=500,
        volume=120,
        delta=delta,
        gamma=gamma,
        theta=theta,
        underlying_price=spot,
    )


def test_days_to_expiration_rounds_partial_days_up() -> None:
    assert days_to_expiration(EXPIRY_30D, NOW) == 30
    assert days_to_expiration(EXPIRY_30D, dt.date(2026, 1, 5)) == 30


def test_days_to_expiration_never_below_one() -> None:
    assert days_to_expiration(dt.date(2026, 1, 5), NOW) == 1
    assert days_to_expiration(dt.date(2025, 12, 1), NOW) == 1


def test_annualized_return_formula_is_exact() -> None:
    metrics = trade_metrics(_contract(strike=100.0), NOW)
    assert metrics is not None
    premium = metrics.premium
    assert premium == pytest.approx(2.0)
    assert metrics.days_to_expiration == 30
    assert metrics.annualized_return == (premium / (100.0 - premium)) * (365 / 30)
    assert metrics.breakeven == 100.0 - premium
    assert metrics.max_profit == premium
    assert metrics.max_loss == 100.0 - premium


def test_profit_probability_is_abs_delta() -> None:
    metrics = trade_metrics(_contract(delta=-0.42), NOW)
    assert metrics is not None
    assert metrics.profit_probability == pytest.approx(0.42)


@pytest.mark.parametrize(
    "strike, bid, ask",
    [
        (100.0, 0.0, 0.0),
        (100.0, 0.0, 0.02),
        (1.0, 1.0, 1.2),
        (2.0, 1.9, 2.1),
    ],
)
def test_non_viable_contracts_are_excluded(strike: float, bid: float, ask: float) -> None:
    contract = _contract(strike=strike, bid=bid, ask=ask)
    assert not is_viable(contract)
    assert trade_metrics(contract, NOW) is None


def test_batch_drops_non_viable_and_keeps_order() -> None:
    chain = [
        _contract(strike=90.0, bid=0.9, ask=1.1),
        _contract(strike=100.0, bid=0.0, ask=0.0),
        _contract(strike=95.0, bid=1.9, ask=2.1),
    ]
    batch = metrics_batch(chain, NOW)
    assert [item.strike for item in batch] == [90.0, 95.0]
    for item in batch:
        assert math.isfinite(item.annualized_return)
        assert item.days_to_expiration >= 1


def test_quoted_greeks_are_kept() -> None:
    metrics = trade_metrics(_contract(), NOW)
    assert metrics is not None
    assert metrics.greeks.delta == -0.3
    assert metrics.greeks.gamma == 0.02
    assert metrics.greeks.theta == -0.05
    assert metrics.greeks.vega > 0
    assert metrics.implied_volatility == 0.3


def test_missing_greeks_come_from_model() -> None:
    contract = _contract(delta=0.0, gamma=0.0, theta=0.0)
    first = trade_metrics(contract, NOW)
    second = trade_metrics(contract, NOW)
    assert first is not None and second is not None
    expected = greeks(100.0, 95.0, 30 / 365, RISK_FREE_RATE, 0.3, "put")
    assert first.greeks == expected
    assert first.greeks == second.greeks
    assert first.profit_probability == pytest.approx(abs(expected.delta))


def test_partially_missing_greeks_mix_quote_and_model() -> None:
    metrics = trade_metrics(_contract(delta=-0.25, gamma=0.0, theta=0.0), NOW)
    assert metrics is not None
    expected = greeks(100.0, 95.0, 30 / 365, RISK_FREE_RATE, 0.3, "put")
    assert metrics.greeks.delta == -0.25
    assert metrics.greeks.gamma == expected.gamma
    assert metrics.greeks.theta == expected.theta


def test_missing_iv_is_backed_out_of_premium() -> None:
    metrics = trade_metrics(
        _contract(bid=0.95, ask=1.05, iv=0.0, delta=0.0, gamma=0.0, theta=0.0),
        NOW,
    )
    assert metrics is not None
    assert metrics.implied_volatility > VOLATILITY_FLOOR
    assert -1.0 < metrics.greeks.delta < 0.0


def test_unresolvable_iv_leaves_greeks_unknown() -> None:
    # Premium below intrinsic value: no volatility reproduces it.
    contract = _contract(
        strike=100.0, bid=5.0, ask=5.2, iv=0.0, delta=0.0, gamma=0.0, theta=0.0,
        spot=80.0,
    )
    metrics = trade_metrics(contract, NOW)
    assert metrics is not None
    assert metrics.implied_volatility == VOLATILITY_FLOOR
    assert metrics.greeks == Greeks(
        delta=0.0, gamma=0.0, theta=0.0, vega=0.0, rho=0.0
    )
    assert metrics.profit_probability == 0.0


def test_metrics_frame_columns() -> None:
    batch = metrics_batch([_contract(), _contract(strike=90.0)], NOW)
    frame = metrics_frame(batch)
    assert len(frame) == 2
    for col in ("strike", "premium", "annualized_return", "delta", "breakeven"):
        assert col in frame.columns
