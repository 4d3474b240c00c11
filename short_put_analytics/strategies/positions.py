"""Hand-off of a chosen contract to simulated position bookkeeping."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Any

from short_put_analytics.analytics.metrics import is_viable
from short_put_analytics.config import CONTRACT_MULTIPLIER
from short_put_analytics.structures import Contract, ValidationError


@dataclass(frozen=True)
class SimulatedPosition:
    """A sold-to-open put as the bookkeeping side records it."""

    symbol: str
    option_type: str
    action: str
    strike: float
    expiration: dt.date
    contracts: int
    premium_received: float
    collateral: float
    breakeven: float
    entry_date: dt.date
    status: str = "active"

    def to_dict(self) -> dict[str, Any]:
        return {
            "symbol": self.symbol,
            "type": self.option_type,
            "action": self.action,
            "strike": self.strike,
            "expiration": self.expiration.strftime("%Y-%m-%d"),
            "contracts": self.contracts,
            "premium_received": self.premium_received,
            "collateral": self.collateral,
            "breakeven": self.breakeven,
            "entry_date": self.entry_date.strftime("%Y-%m-%d"),
            "status": self.status,
        }


def open_position(
    contract: Contract,
    contracts: int,
    now: dt.date | dt.datetime,
) -> SimulatedPosition:
    """Build a cash-secured short-put position filled at the mid."""
    if contracts <= 0:
        raise ValidationError(f"contracts must be positive, got {contracts}")
    premium = contract.mid
    if not is_viable(contract, premium):
        raise ValidationError(
            f"{contract.symbol} {contract.strike}: premium {premium:.4f} "
            "is not tradable"
        )
    entry = now.date() if isinstance(now, dt.datetime) else now
    return SimulatedPosition(
        symbol=contract.symbol,
        option_type=contract.option_type,
        action="sell",
        strike=contract.strike,
        expiration=contract.expiration,
        contracts=contracts,
        premium_received=premium * CONTRACT_MULTIPLIER * contracts,
        collateral=contract.strike * CONTRACT_MULTIPLIER * contracts,
        breakeven=contract.strike - premium,
        entry_date=entry,
    )
