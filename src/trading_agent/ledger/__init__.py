"""Decision ledger — append-only record store with analytics."""

from trading_agent.ledger.analytics import compute_analytics
from trading_agent.ledger.ledger import Ledger
from trading_agent.ledger.stores import LedgerStore, RecallMemoryStore, SqlLedgerStore

__all__ = [
    "Ledger",
    "LedgerStore",
    "RecallMemoryStore",
    "SqlLedgerStore",
    "compute_analytics",
]
