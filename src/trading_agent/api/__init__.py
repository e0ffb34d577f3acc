"""Read-only HTTP view of the decision ledger."""

from trading_agent.api.app import create_app

__all__ = ["create_app"]
