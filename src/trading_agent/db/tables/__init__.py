"""Import all table modules so Base.metadata knows about them."""

from trading_agent.db.tables.ledger import LedgerRecordRow

__all__ = ["LedgerRecordRow"]
