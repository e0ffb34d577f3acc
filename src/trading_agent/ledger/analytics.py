"""Aggregate performance over ledger decision records."""

from __future__ import annotations

from collections.abc import Iterable

from trading_agent.metrics.formulas import average, max_drawdown, profit_factor, win_rate
from trading_agent.models import LedgerAnalytics, LedgerRecord


def compute_analytics(records: Iterable[LedgerRecord]) -> LedgerAnalytics:
    """Compute analytics over the executed subset of *records*.

    Insight records and non-executed decisions are ignored. A trade with no
    recorded profit counts as 0 (not profitable). Drawdown is measured over
    the trades in chronological order whatever order *records* arrive in.
    """
    trades = sorted(
        (r for r in records if r.record_type == "decision" and r.executed),
        key=lambda r: (r.ts, r.seq),
    )
    profits = [r.profit for r in trades]
    total = len(trades)
    profitable = sum(1 for p in profits if p > 0)
    total_profit = sum(profits)

    return LedgerAnalytics(
        total_trades=total,
        profitable_trades=profitable,
        win_rate=win_rate(profitable, total),
        total_profit=total_profit,
        average_profit=average(total_profit, total),
        profit_factor=profit_factor(profits),
        max_drawdown=max_drawdown(profits),
    )
