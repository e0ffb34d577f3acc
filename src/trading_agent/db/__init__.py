"""Database layer — ledger engine, sessions and ORM base."""

from trading_agent.db.base import Base
from trading_agent.db.engine import database_url, dispose_engine, init_engine

__all__ = ["Base", "database_url", "dispose_engine", "init_engine"]
