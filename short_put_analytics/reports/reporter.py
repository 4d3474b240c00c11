"""HTML report and assistant-facing summaries."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from jinja2 import BaseLoader, Environment

from short_put_analytics.structures import (
    ComparisonMetric,
    ExpectedValue,
    ScenarioResult,
    TradeMetrics,
)


def format_currency(value):
    if value is None:
        return "N/A"
    return f"${float(value):,.2f}"


def format_percent(value):
    if value is None:
        return "N/A"
    return f"{float(value):.1f}%"


_jinja_env = Environment(loader=BaseLoader(), autoescape=True)
_jinja_env.filters["currency"] = format_currency
_jinja_env.filters["pct"] = format_percent


HTML_TEMPLATE = """\
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <title>{{ symbol }} Put Selling Report</title>
  <style>
    body { font-family: Arial, sans-serif; margin: 24px; color: #1b1b1b; background: #fafafa; }
    h1 { color: #16334c; border-bottom: 3px solid #16334c; padding-bottom: 12px; }
    h2 { color: #16334c; margin-top: 32px; border-bottom: 1px solid #ddd; padding-bottom: 8px; }
    table { border-collapse: collapse; width: 100%; margin: 16px 0; font-size: 0.95em; }
    th, td { border: 1px solid #cbd5e0; padding: 8px 10px; text-align: left; }
    th { background-color: #edf2f7; font-weight: 600; }
    tr:nth-child(even) { background-color: #f7fafc; }
    .good { color: #2f855a; font-weight: bold; }
    .note { font-size: 0.9em; color: #4a5568; background: #fffaf0; padding: 12px; border-left: 4px solid #ed8936; margin: 12px 0; }
  </style>
</head>
<body>
  <h1>{{ symbol }} Put Selling Report</h1>
  <p>Underlying: {{ underlying_price | currency }} &middot; Generated {{ generated_at }}</p>

  <h2>Candidates ({{ candidates | length }} of {{ analyzed }} analyzed)</h2>
  {% if candidates %}
  <table>
    <tr>
      <th>Strike</th><th>Expiration</th><th>DTE</th><th>Premium</th>
      <th>Annualized</th><th>Delta</th><th>Breakeven</th><th>IV</th>
    </tr>
    {% for row in candidates %}
    <tr>
      <td>{{ "%.2f" | format(row.strike) }}</td>
      <td>{{ row.contract.expiration }}</td>
      <td>{{ row.days_to_expiration }}</td>
      <td>{{ row.premium | currency }}</td>
      <td class="{{ 'good' if row.annualized_return >= min_return else '' }}">
        {{ (row.annualized_return * 100) | pct }}</td>
      <td>{{ "%.3f" | format(row.greeks.delta) }}</td>
      <td>{{ row.breakeven | currency }}</td>
      <td>{{ (row.implied_volatility * 100) | pct }}</td>
    </tr>
    {% endfor %}
  </table>
  {% else %}
  <p class="note">No options meet the current filter criteria.</p>
  {% endif %}

  {% if ranked %}
  <h2>Comparison</h2>
  <table>
    <tr>
      <th>Rank</th><th>Strike</th><th>Score</th><th>PoP</th><th>Expected Return</th>
      <th>Capital Eff.</th><th>Liquidity</th><th>Time Decay</th><th>Expected P&amp;L</th>
    </tr>
    {% for metric in ranked %}
    <tr>
      <td>{{ metric.rank }}</td>
      <td>{{ "%.2f" | format(metric.strike) }}</td>
      <td>{{ "%.1f" | format(metric.overall_score) }}</td>
      <td>{{ metric.probability_of_profit | pct }}</td>
      <td>{{ metric.expected_return | currency }}</td>
      <td>{{ metric.capital_efficiency | pct }}</td>
      <td>{{ "%.0f" | format(metric.liquidity_score) }}</td>
      <td>{{ metric.time_decay | currency }}</td>
      <td>{{ expected_by_contract.get(metric.metrics.contract) | currency }}</td>
    </tr>
    {% endfor %}
  </table>
  {% if expected_plot %}<img src="data:image/png;base64,{{ expected_plot }}" alt="Expected P&amp;L" />{% endif %}
  {% if risk_plot %}<img src="data:image/png;base64,{{ risk_plot }}" alt="Risk profile" />{% endif %}
  {% endif %}

  <h2>Crash Test: {{ crash_percent | pct }} drop to {{ crash_price | currency }}</h2>
  {% if safe_strikes %}
  <table>
    <tr>
      <th>Strike</th><th>Expiration</th><th>Bid</th><th>Safety Buffer</th>
      <th>Annualized</th><th>Return on Risk</th><th>Max Loss</th><th>OI</th>
    </tr>
    {% for row in safe_strikes %}
    <tr>
      <td>{{ "%.2f" | format(row.strike) }}</td>
      <td>{{ row.expiration }}</td>
      <td>{{ row.premium | currency }}</td>
      <td>{{ row.safety_buffer | pct }}</td>
      <td>{{ row.annualized_return | pct }}</td>
      <td>{{ "%.2f" | format(row.return_on_risk) }}%</td>
      <td>{{ row.max_loss | currency }}</td>
      <td>{{ row.open_interest }}</td>
    </tr>
    {% endfor %}
  </table>
  {% else %}
  <p class="note">No strikes survive a {{ crash_percent | pct }} drop while returning
  {{ target_return | pct }} annualized.</p>
  {% endif %}

  <p class="note">Probability of profit uses |delta| as an approximation.</p>
</body>
</html>
"""


def write_report(output_path: Path, context: dict) -> None:
    """Render the HTML report to ``output_path``."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    template = _jinja_env.from_string(HTML_TEMPLATE)
    output_path.write_text(template.render(**context), encoding="utf-8")


def format_scenario_summary(
    symbol: str,
    current_price: float,
    crash_percent: float,
    crash_price: float,
    target_return: float,
    results: Sequence[ScenarioResult],
    limit: int = 10,
) -> str:
    """Plain-text crash-test summary for the chat assistant."""
    lines = [
        f"{symbol} at {format_currency(current_price)}; "
        f"{format_percent(crash_percent)} crash to {format_currency(crash_price)}.",
        f"Target annualized return: {format_percent(target_return)}.",
    ]
    if not results:
        lines.append("No safe strikes found.")
        return "\n".join(lines)
    lines.append(f"{len(results)} safe strikes (best return on risk first):")
    for row in results[:limit]:
        lines.append(
            f"- {row.strike:.2f} exp {row.expiration}: bid "
            f"{format_currency(row.premium)}, buffer {format_percent(row.safety_buffer)}, "
            f"annualized {format_percent(row.annualized_return)}, "
            f"RoR {row.return_on_risk:.2f}%, OI {row.open_interest}"
        )
    return "\n".join(lines)


def format_comparison_summary(
    ranked: Sequence[ComparisonMetric],
    expected: Sequence[ExpectedValue] = (),
) -> str:
    """Plain-text ranking summary for the chat assistant."""
    expected_by_contract = {item.contract: item for item in expected}
    lines = []
    for metric in ranked:
        trade: TradeMetrics = metric.metrics
        line = (
            f"#{metric.rank} strike {metric.strike:.2f} exp "
            f"{trade.contract.expiration}: score {metric.overall_score:.1f}, "
            f"annualized {format_percent(trade.annualized_return * 100)}, "
            f"PoP {format_percent(metric.probability_of_profit)}, "
            f"liquidity {metric.liquidity_score:.0f}"
        )
        ev = expected_by_contract.get(trade.contract)
        if ev is not None:
            line += (
                f", expected P&L {format_currency(ev.expected_pnl)}"
                f" ({format_percent(ev.expected_roi)} ROI)"
            )
        lines.append(line)
    return "\n".join(lines)
