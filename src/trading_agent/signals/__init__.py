"""Signal engine — indicator readings to an action/confidence verdict."""

from trading_agent.signals.engine import score_snapshot

__all__ = ["score_snapshot"]
