"""Records passed between the analytics stages."""

from __future__ import annotations

import datetime as dt
import math
import numbers
from dataclasses import dataclass, field
from typing import Any


class ValidationError(ValueError):
    """Malformed caller input that cannot be degraded or skipped."""


def _is_finite(value: float) -> bool:
    return (
        isinstance(value, numbers.Real)
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


@dataclass(frozen=True)
class Contract:
    """Single option quote as handed over by the market-data provider.

    Zero ``implied_volatility``, ``delta``, ``gamma`` or ``theta`` means the
    provider did not supply the field.
    """

    symbol: str
    strike: float
    expiration: dt.date
    bid: float
    ask: float
    implied_volatility: float = 0.0
    open_interest: int = 0
    volume: int = 0
    delta: float = 0.0
    gamma: float = 0.0
    theta: float = 0.0
    underlying_price: float = 0.0
    option_type: str = "put"

    def __post_init__(self) -> None:
        if not _is_finite(self.strike) or self.strike <= 0:
            raise ValidationError(
                f"{self.symbol}: strike must be a positive finite number, "
                f"got {self.strike!r}"
            )
        if not _is_finite(self.underlying_price) or self.underlying_price <= 0:
            raise ValidationError(
                f"{self.symbol}: underlying price must be a positive finite "
                f"number, got {self.underlying_price!r}"
            )
        if not (_is_finite(self.bid) and _is_finite(self.ask)):
            raise ValidationError(f"{self.symbol}: bid/ask must be finite")
        if self.bid < 0 or self.ask < 0:
            raise ValidationError(f"{self.symbol}: bid/ask must be >= 0")
        if self.bid > self.ask:
            raise ValidationError(
                f"{self.symbol}: bid {self.bid} exceeds ask {self.ask}"
            )
        if self.open_interest < 0 or self.volume < 0:
            raise ValidationError(
                f"{self.symbol}: open interest and volume must be >= 0, got "
                f"{self.open_interest} and {self.volume}"
            )
        if self.option_type not in ("put", "call"):
            raise ValueError("option_type must be 'call' or 'put'")

    @property
    def mid(self) -> float:
        return (self.bid + self.ask) / 2.0

    def to_dict(self) -> dict[str, Any]:
        """Convert contract to dictionary for report serialization."""
        return {
            "symbol": self.symbol,
            "option_type": self.option_type,
            "strike": self.strike,
            "expiration": self.expiration.strftime("%Y-%m-%d"),
            "bid": self.bid,
            "ask": self.ask,
            "iv": self.implied_volatility,
            "open_interest": self.open_interest,
            "volume": self.volume,
            "delta": self.delta,
            "gamma": self.gamma,
            "theta": self.theta,
            "underlying_price": self.underlying_price,
        }


@dataclass(frozen=True)
class Greeks:
    """Black-Scholes sensitivities; theta per day, vega and rho per point."""

    delta: float
    gamma: float
    theta: float
    vega: float
    rho: float


@dataclass(frozen=True)
class TradeMetrics:
    """Sell-to-open metrics for one viable contract."""

    contract: Contract
    premium: float
    days_to_expiration: int
    annualized_return: float
    breakeven: float
    max_profit: float
    max_loss: float
    profit_probability: float
    greeks: Greeks
    implied_volatility: float

    @property
    def strike(self) -> float:
        return self.contract.strike

    @property
    def delta(self) -> float:
        return self.greeks.delta

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.contract.to_dict(),
            "premium": self.premium,
            "days_to_expiration": self.days_to_expiration,
            "annualized_return": self.annualized_return,
            "breakeven": self.breakeven,
            "max_profit": self.max_profit,
            "max_loss": self.max_loss,
            "profit_probability": self.profit_probability,
            "delta": self.greeks.delta,
            "gamma": self.greeks.gamma,
            "theta": self.greeks.theta,
            "vega": self.greeks.vega,
            "rho": self.greeks.rho,
            "iv": self.implied_volatility,
        }


@dataclass(frozen=True)
class ComparisonMetric:
    """Composite scoring of one candidate within a comparison set."""

    metrics: TradeMetrics
    probability_of_profit: float
    expected_return: float
    risk_adjusted_return: float
    capital_efficiency: float
    time_decay: float
    liquidity_score: float
    overall_score: float
    rank: int = 0

    @property
    def strike(self) -> float:
        return self.metrics.contract.strike


@dataclass(frozen=True)
class ScenarioResult:
    """A put that stays out of the money under a crash scenario."""

    symbol: str
    strike: float
    expiration: dt.date
    premium: float
    safety_buffer: float
    annualized_return: float
    would_be_assigned: bool
    days_to_expiry: int
    max_loss: float
    return_on_risk: float
    volume: int
    open_interest: int


@dataclass(frozen=True)
class Scenario:
    name: str
    price_change: float
    probability: float


@dataclass(frozen=True)
class ScenarioPnL:
    contract: Contract
    pnl: float
    roi: float

    @property
    def strike(self) -> float:
        return self.contract.strike


@dataclass(frozen=True)
class ScenarioOutcome:
    scenario: Scenario
    final_price: float
    results: tuple[ScenarioPnL, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ExpectedValue:
    """Probability-weighted P&L and ROI of one candidate across a sweep.

    Identified by ``contract``: candidates on different expiries can share a
    strike.
    """

    contract: Contract
    expected_pnl: float
    expected_roi: float

    @property
    def strike(self) -> float:
        return self.contract.strike
