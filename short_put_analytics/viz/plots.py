"""Plot generation for reports."""

from __future__ import annotations

import base64
from io import BytesIO

import matplotlib
import matplotlib.pyplot as plt


matplotlib.use("Agg")


def plot_risk_profile(prices, pnl, current_price: float) -> str:
    """Return base64 PNG of the combined expiry P&L curve."""
    fig, ax = plt.subplots(figsize=(5, 3))
    ax.plot(prices, pnl, color="#2f855a")
    ax.axhline(0.0, color="#718096", linewidth=0.8)
    ax.axvline(current_price, color="#2c5282", linestyle="--", linewidth=0.8)
    ax.set_title("Risk Profile at Expiry")
    ax.set_xlabel("Underlying price")
    ax.set_ylabel("P&L ($)")
    return _encode(fig)


def plot_expected_values(labels, expected_pnl) -> str:
    """Return base64 PNG of probability-weighted P&L per candidate.

    ``labels`` must be unique per candidate; repeated labels share a bar.
    """
    fig, ax = plt.subplots(figsize=(4, 3))
    colors = ["#2f855a" if value >= 0 else "#c53030" for value in expected_pnl]
    ax.bar(labels, expected_pnl, color=colors)
    ax.set_title("Expected P&L per Share")
    ax.set_xlabel("Strike / expiry")
    return _encode(fig)


def _encode(fig) -> str:
    buffer = BytesIO()
    fig.tight_layout()
    fig.savefig(buffer, format="png", dpi=150)
    plt.close(fig)
    buffer.seek(0)
    return base64.b64encode(buffer.read()).decode("ascii")
