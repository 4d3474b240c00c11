"""Tests for simulated position hand-off."""

import datetime as dt

import pytest

from short_put_analytics.strategies.positions import open_position
from short_put_analytics.structures import Contract, ValidationError


def _contract(bid: float = 1.9, ask: float = 2.1) -> Contract:
    return Contract(
        symbol="XYZ",
        strike=95.0,
        expiration=dt.date(2026, 2, 20),
        bid=bid,
        ask=ask,
        underlying_price=100.0,
    )


def test_open_position_books_premium_and_collateral() -> None:
    position = open_position(_contract(), 2, dt.datetime(2026, 1, 5, 10, 0))

    assert position.action == "sell"
    assert position.option_type == "put"
    assert position.premium_received == pytest.approx(400.0)
    assert position.collateral == pytest.approx(19_000.0)
    assert position.breakeven == pytest.approx(93.0)
    assert position.entry_date == dt.date(2026, 1, 5)
    assert position.status == "active"

    row = position.to_dict()
    assert row["type"] == "put"
    assert row["expiration"] == "2026-02-20"
    assert row["entry_date"] == "2026-01-05"


def test_open_position_rejects_bad_inputs() -> None:
    with pytest.raises(ValidationError):
        open_position(_contract(), 0, dt.date(2026, 1, 5))
    with pytest.raises(ValidationError):
        open_position(_contract(bid=0.0, ask=0.0), 1, dt.date(2026, 1, 5))
