"""Market data sources that produce IndicatorSnapshots."""

from trading_agent.market.source import CandleIndicatorSource, build_snapshot

__all__ = ["CandleIndicatorSource", "build_snapshot"]
