"""Trading metrics — pure formulas over realised profits."""

from trading_agent.metrics.formulas import average, max_drawdown, profit_factor, win_rate

__all__ = ["average", "max_drawdown", "profit_factor", "win_rate"]
