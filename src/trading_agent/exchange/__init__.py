"""Exchange and network API clients."""

from trading_agent.exchange.hyperliquid import HyperliquidClient
from trading_agent.exchange.recall import RecallClient

__all__ = ["HyperliquidClient", "RecallClient"]
