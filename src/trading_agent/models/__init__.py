"""Pydantic domain models."""

from trading_agent.models.decision import Decision, ExecutionResult, PipelineOutcome
from trading_agent.models.ledger import LedgerAnalytics, LedgerQuery, LedgerRecord
from trading_agent.models.market import MACD, IndicatorSnapshot, MovingAverages
from trading_agent.models.signal import Signal
from trading_agent.models.venue import PortfolioBalance, TradeQuote

__all__ = [
    "Decision",
    "ExecutionResult",
    "IndicatorSnapshot",
    "LedgerAnalytics",
    "LedgerQuery",
    "LedgerRecord",
    "MACD",
    "MovingAverages",
    "PipelineOutcome",
    "PortfolioBalance",
    "Signal",
    "TradeQuote",
]
