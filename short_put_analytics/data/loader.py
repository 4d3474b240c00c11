"""Load put chains using yfinance."""

from __future__ import annotations

import datetime as dt
import logging

import pandas as pd
import yfinance as yf

from short_put_analytics.data.cache import TTLCache
from short_put_analytics.structures import Contract, ValidationError


LOGGER = logging.getLogger(__name__)

_REQUIRED = ["strike", "bid", "ask"]
_OPTIONAL_FLOAT = ["impliedVolatility", "delta", "gamma", "theta"]
_OPTIONAL_INT = ["openInterest", "volume"]


def get_spot_price(ticker: str, cache: TTLCache | None = None) -> float:
    """Fetch the latest close price for a ticker."""
    key = (ticker, "spot")
    if cache is not None:
        cached = cache.get(key)
        if cached is not None:
            return cached
    history = yf.Ticker(ticker).history(period="5d")
    if history.empty:
        raise ValueError(f"No price history returned for {ticker}.")
    spot = float(history["Close"].iloc[-1])
    if cache is not None:
        cache.set(key, spot)
    return spot


def get_option_expiries(ticker: str) -> list[dt.date]:
    """Return available option expiry dates as date objects."""
    expiries = yf.Ticker(ticker).options
    if not expiries:
        raise ValueError(f"No option expiries available for {ticker}.")
    return [dt.datetime.strptime(exp, "%Y-%m-%d").date() for exp in expiries]


def contracts_from_frame(
    frame: pd.DataFrame,
    symbol: str,
    expiration: dt.date,
    underlying_price: float,
    option_type: str = "put",
) -> list[Contract]:
    """Normalize a provider chain frame into contracts.

    Missing optional fields become 0 (unknown). Rows that fail contract
    validation are dropped with a warning.
    """
    missing = [col for col in _REQUIRED if col not in frame.columns]
    if missing:
        raise ValueError(f"Missing option fields: {missing}")

    frame = frame.copy()
    for col in _REQUIRED + _OPTIONAL_FLOAT + _OPTIONAL_INT:
        if col not in frame.columns:
            frame[col] = 0.0
        frame[col] = pd.to_numeric(frame[col], errors="coerce").fillna(0.0)

    contracts: list[Contract] = []
    for row in frame.itertuples(index=False):
        try:
            contracts.append(
                Contract(
                    symbol=symbol,
                    strike=float(row.strike),
                    expiration=expiration,
                    bid=float(row.bid),
                    ask=float(row.ask),
                    implied_volatility=float(row.impliedVolatility),
                    open_interest=int(row.openInterest),
                    volume=int(row.volume),
                    delta=float(row.delta),
                    gamma=float(row.gamma),
                    theta=float(row.theta),
                    underlying_price=float(underlying_price),
                    option_type=option_type,
                )
            )
        except ValidationError as exc:
            LOGGER.warning("Dropping malformed quote: %s", exc)
    return contracts


def get_put_chain(
    ticker: str,
    expiration: dt.date,
    cache: TTLCache | None = None,
) -> list[Contract]:
    """Fetch the put chain for one expiry."""
    key = (ticker, expiration)
    if cache is not None:
        cached = cache.get(key)
        if cached is not None:
            LOGGER.info("Using cached %s chain for %s", ticker, expiration)
            return cached

    spot = get_spot_price(ticker, cache)
    chain = yf.Ticker(ticker).option_chain(expiration.strftime("%Y-%m-%d"))
    puts = chain.puts
    _raise_if_market_closed(puts)
    contracts = contracts_from_frame(puts, ticker, expiration, spot)
    LOGGER.info(
        "Loaded %d %s puts expiring %s (spot=%.2f)",
        len(contracts),
        ticker,
        expiration,
        spot,
    )

    if cache is not None:
        cache.set(key, contracts)
    return contracts


def _raise_if_market_closed(chain: pd.DataFrame) -> None:
    if chain.empty:
        raise ValueError("Provider returned an empty option chain.")
    bids = chain["bid"].fillna(0.0)
    asks = chain["ask"].fillna(0.0)
    if (bids == 0).all() and (asks == 0).all():
        raise ValueError(
            "Options bid/ask are all 0.00; market appears closed or data unavailable."
        )
