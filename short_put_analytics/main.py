"""CLI entrypoint for short-put analysis."""

from __future__ import annotations

import argparse
import datetime as dt
import logging
from pathlib import Path

from short_put_analytics import config
from short_put_analytics.analytics.metrics import days_to_expiration, metrics_batch
from short_put_analytics.data.cache import TTLCache
from short_put_analytics.data.filters import (
    FilterCriteria,
    filter_metrics,
    sort_metrics,
)
from short_put_analytics.data.loader import get_option_expiries, get_put_chain
from short_put_analytics.data.test_data import (
    DEFAULT_SPOT,
    generate_test_chain,
    list_available_scenarios,
)
from short_put_analytics.reports.reporter import (
    format_comparison_summary,
    format_scenario_summary,
    write_report,
)
from short_put_analytics.strategies.comparison import compare
from short_put_analytics.strategies.scenarios import (
    crash_price,
    project,
    risk_profile,
)
from short_put_analytics.structures import Contract
from short_put_analytics.viz.plots import plot_expected_values, plot_risk_profile


LOGGER = logging.getLogger(__name__)


def _parse_date(value: str | None) -> dt.date | None:
    if value is None:
        return None
    return dt.datetime.strptime(value, "%Y-%m-%d").date()


def _load_live_chain(
    symbol: str,
    expiration: dt.date | None,
    max_days: int,
    now: dt.datetime,
) -> list[Contract]:
    cache = TTLCache()
    if expiration is not None:
        expiries = [expiration]
    else:
        expiries = [
            exp
            for exp in get_option_expiries(symbol)
            if days_to_expiration(exp, now) <= max_days
        ]
    if not expiries:
        raise ValueError(f"No {symbol} expiries within {max_days} days.")

    contracts: list[Contract] = []
    for expiry in expiries:
        contracts.extend(get_put_chain(symbol, expiry, cache=cache))
    return contracts


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Short put analysis")
    parser.add_argument("--symbol", type=str, default=config.DEFAULT_SYMBOL)
    parser.add_argument("--expiration", type=str, help="YYYY-MM-DD")
    parser.add_argument(
        "--output",
        type=str,
        default="reports/short_put_report.html",
        help="Output HTML report path",
    )
    parser.add_argument(
        "--min-return",
        type=float,
        default=config.MIN_ANNUALIZED_RETURN,
        help="Minimum annualized return as a fraction (0.20 = 20%%)",
    )
    parser.add_argument(
        "--no-delta-filter",
        action="store_true",
        help="Disable the delta band filter",
    )
    parser.add_argument("--min-delta", type=float, default=config.DELTA_RANGE[0])
    parser.add_argument("--max-delta", type=float, default=config.DELTA_RANGE[1])
    parser.add_argument(
        "--min-days", type=int, default=config.MIN_DAYS_TO_EXPIRATION
    )
    parser.add_argument(
        "--max-days", type=int, default=config.MAX_DAYS_TO_EXPIRATION
    )
    parser.add_argument("--min-premium", type=float, default=config.MIN_PREMIUM)
    parser.add_argument("--max-premium", type=float, default=config.MAX_PREMIUM)
    parser.add_argument(
        "--sort-by",
        type=str,
        default="annualized_return",
        choices=list(config.SORT_KEYS),
    )
    parser.add_argument("--order", type=str, default="desc", choices=["asc", "desc"])
    parser.add_argument(
        "--compare",
        type=int,
        default=config.DEFAULT_COMPARE_COUNT,
        help="Number of top candidates to compare (at most 3)",
    )
    parser.add_argument(
        "--crash-percent", type=float, default=config.DEFAULT_CRASH_PERCENT
    )
    parser.add_argument(
        "--target-return",
        type=float,
        default=config.DEFAULT_TARGET_RETURN,
        help="Crash-test annualized return floor in percent",
    )
    parser.add_argument(
        "--timeframe",
        type=int,
        default=config.DEFAULT_TIMEFRAME_MONTHS,
        help="Crash-test horizon in months",
    )
    parser.add_argument(
        "--test-data",
        action="store_true",
        help="Use a synthetic chain instead of live market data",
    )
    parser.add_argument(
        "--test-scenario",
        type=str,
        default="baseline",
        choices=list_available_scenarios(),
        help="Synthetic chain preset (only with --test-data)",
    )
    parser.add_argument("--seed", type=int, default=42)
    return parser


def main(argv: list[str] | None = None) -> None:
    """Run the put-selling analysis pipeline."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    now = dt.datetime.now()
    symbol = args.symbol.upper()
    try:
        if args.test_data:
            LOGGER.info(
                "Generating synthetic chain (scenario: %s)", args.test_scenario
            )
            contracts = generate_test_chain(
                args.test_scenario,
                symbol=symbol,
                spot=DEFAULT_SPOT,
                now=now.date(),
                seed=args.seed,
            )
        else:
            horizon = max(args.max_days, args.timeframe * config.DAYS_PER_MONTH)
            contracts = _load_live_chain(
                symbol, _parse_date(args.expiration), horizon, now
            )
    except ValueError as exc:
        LOGGER.error("%s", exc)
        return
    if not contracts:
        LOGGER.error("No contracts loaded for %s", symbol)
        return
    spot = contracts[0].underlying_price

    batch = metrics_batch(contracts, now)
    criteria = FilterCriteria(
        min_annualized_return=args.min_return,
        delta_range=(args.min_delta, args.max_delta),
        enable_delta_filter=not args.no_delta_filter,
        min_days_to_expiration=args.min_days,
        max_days_to_expiration=args.max_days,
        min_premium=args.min_premium,
        max_premium=args.max_premium,
    )
    candidates = sort_metrics(filter_metrics(batch, criteria), args.sort_by, args.order)
    LOGGER.info(
        "%d of %d viable contracts pass filters (%d loaded)",
        len(candidates),
        len(batch),
        len(contracts),
    )

    try:
        selected = candidates[: args.compare]
        comparison = compare(selected, spot) if selected else None
        crashed = crash_price(spot, args.crash_percent)
        safe = project(
            contracts,
            spot,
            args.crash_percent,
            args.target_return,
            args.timeframe,
            now,
        )
    except ValueError as exc:
        LOGGER.error("%s", exc)
        return

    context = {
        "symbol": symbol,
        "underlying_price": spot,
        "generated_at": now.strftime("%Y-%m-%d %H:%M"),
        "analyzed": len(batch),
        "candidates": candidates[:50],
        "min_return": args.min_return,
        "ranked": [],
        "expected_by_contract": {},
        "expected_plot": None,
        "risk_plot": None,
        "crash_percent": args.crash_percent,
        "crash_price": crashed,
        "target_return": args.target_return,
        "safe_strikes": safe,
    }
    if comparison is not None:
        prices, pnl = risk_profile(selected, spot)
        context.update(
            ranked=comparison.ranked,
            expected_by_contract={
                item.contract: item.expected_pnl for item in comparison.expected
            },
            expected_plot=plot_expected_values(
                [
                    f"{item.strike:.2f}\n{item.contract.expiration:%m-%d}"
                    for item in comparison.expected
                ],
                [item.expected_pnl for item in comparison.expected],
            ),
            risk_plot=plot_risk_profile(prices, pnl, spot),
        )
        print(format_comparison_summary(comparison.ranked, comparison.expected))

    print(
        format_scenario_summary(
            symbol,
            spot,
            args.crash_percent,
            crashed,
            args.target_return,
            safe,
        )
    )

    report_path = Path(args.output)
    write_report(report_path, context)
    LOGGER.info("Report written to %s", report_path)


if __name__ == "__main__":
    main()
