"""Risk management — position sizing and trade monitoring."""

from trading_agent.risk.monitor import RiskProfile, TradeReview, monitor_trade, select_profile
from trading_agent.risk.sizing import (
    MAX_PORTFOLIO_FRACTION,
    calculate_position_size,
    calculate_stop_price,
    calculate_take_profit_price,
)

__all__ = [
    "MAX_PORTFOLIO_FRACTION",
    "RiskProfile",
    "TradeReview",
    "calculate_position_size",
    "calculate_stop_price",
    "calculate_take_profit_price",
    "monitor_trade",
    "select_profile",
]
