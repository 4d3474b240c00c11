"""Tests for implied-volatility inversion and IV rank."""

import pytest

from short_put_analytics.analytics.bsm import option_price
from short_put_analytics.analytics.volatility import implied_volatility, iv_rank


def test_implied_volatility_recovers_model_vol() -> None:
    t = 30 / 365
    price = option_price(100.0, 95.0, t, 0.05, 0.40, "put")
    assert implied_volatility(price, 100.0, 95.0, t, 0.05, "put") == pytest.approx(
        0.40, abs=1e-5
    )


def test_implied_volatility_below_intrinsic_is_none() -> None:
    assert implied_volatility(1.0, 80.0, 100.0, 0.1, 0.05, "put") is None


def test_implied_volatility_rejects_empty_price_and_expired() -> None:
    assert implied_volatility(0.0, 100.0, 95.0, 0.1, 0.05, "put") is None
    assert implied_volatility(1.0, 100.0, 95.0, 0.0, 0.05, "put") is None


def test_iv_rank() -> None:
    history = [0.20, 0.25, 0.40]
    assert iv_rank(0.30, history) == pytest.approx(50.0)
    assert iv_rank(0.50, history) == 100.0
    assert iv_rank(0.10, history) == 0.0
    assert iv_rank(0.30, [0.3, 0.3]) == 50.0
    assert iv_rank(0.30, []) is None
