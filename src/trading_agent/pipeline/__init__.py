"""Execution pipeline — Analyze -> Decide -> Execute -> Record."""

from trading_agent.pipeline.capabilities import MarketDataSource, TradingVenue
from trading_agent.pipeline.pipeline import Analysis, ExecutionPipeline, Skip
from trading_agent.pipeline.tokens import TokenRegistry

__all__ = [
    "Analysis",
    "ExecutionPipeline",
    "MarketDataSource",
    "Skip",
    "TokenRegistry",
    "TradingVenue",
]
