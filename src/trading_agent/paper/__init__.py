"""Paper trading venue — simulated balance, quotes and fills."""

from trading_agent.paper.venue import PaperVenue

__all__ = ["PaperVenue"]
