"""Trading agent — signal scoring, risk-bounded execution, decision ledger."""

__version__ = "0.1.0"
