"""Tests for contract validation."""

import datetime as dt

import numpy as np
import pytest

from short_put_analytics.structures import Contract, ValidationError


def _contract(**overrides) -> Contract:
    fields = {
        "symbol": "XYZ",
        "strike": 95.0,
        "expiration": dt.date(2026, 2, 20),
        "bid": 1.0,
        "ask": 1.2,
        "underlying_price": 100.0,
    }
    fields.update(overrides)
    return Contract(**fields)


def test_mid_and_to_dict() -> None:
    contract = _contract()
    assert contract.mid == pytest.approx(1.1)
    row = contract.to_dict()
    assert row["expiration"] == "2026-02-20"
    assert row["option_type"] == "put"
    assert row["iv"] == 0.0


@pytest.mark.parametrize(
    "overrides",
    [
        {"strike": 0.0},
        {"strike": -5.0},
        {"strike": float("nan")},
        {"underlying_price": 0.0},
        {"underlying_price": float("inf")},
        {"bid": -0.1},
        {"ask": float("nan")},
        {"bid": 1.5, "ask": 1.2},
        {"open_interest": -1},
        {"volume": -5},
    ],
)
def test_malformed_quotes_raise(overrides: dict) -> None:
    with pytest.raises(ValidationError):
        _contract(**overrides)


def test_validation_error_is_value_error() -> None:
    with pytest.raises(ValueError):
        _contract(strike=0.0)


def test_unknown_option_type() -> None:
    with pytest.raises(ValueError):
        _contract(option_type="straddle")


def test_numpy_scalars_are_accepted() -> None:
    contract = _contract(
        strike=np.int64(95),
        bid=np.float64(1.0),
        ask=np.float32(1.25),
        underlying_price=np.float64(100.0),
        open_interest=np.int64(120),
    )
    assert contract.strike == 95
    assert contract.mid == pytest.approx(1.125)
