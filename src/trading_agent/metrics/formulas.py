"""Pure metric computation functions — no DB, no I/O."""

from __future__ import annotations

from typing import Sequence

import numpy as np


def win_rate(wins: int, total: int) -> float:
    """Win rate as a percentage 0-100."""
    if total <= 0:
        return 0.0
    return wins / total * 100


def average(total: float, count: int) -> float:
    if count <= 0:
        return 0.0
    return total / count


def profit_factor(profits: Sequence[float]) -> float:
    """Gross profit / gross loss. 0 when there are no losing trades."""
    gross_profit = sum(p for p in profits if p > 0)
    gross_loss = abs(sum(p for p in profits if p < 0))
    if gross_loss <= 0:
        return 0.0
    return gross_profit / gross_loss


def max_drawdown(profits: Sequence[float]) -> float:
    """Largest peak-to-trough drop of the cumulative profit curve, in profit units.

    The curve starts at 0 before the first trade.
    """
    if not profits:
        return 0.0
    curve = np.concatenate(([0.0], np.cumsum(np.asarray(profits, dtype=np.float64))))
    peak = np.maximum.accumulate(curve)
    return float(np.max(peak - curve))
