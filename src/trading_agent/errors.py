"""Exception taxonomy shared by the pipeline, ledger and scheduler."""

from __future__ import annotations


class TradingAgentError(Exception):
    """Base class for all trading agent errors."""


class InvalidInput(TradingAgentError, ValueError):
    """Bad numeric or symbolic parameters. Fatal to the single call only."""


class UnknownInstrument(InvalidInput):
    """An instrument or token symbol is missing from the token registry."""


class CapabilityFailure(TradingAgentError):
    """An external capability (market data, venue) failed or timed out."""

    def __init__(self, capability: str, message: str) -> None:
        super().__init__(f"{capability}: {message}")
        self.capability = capability


class StoreUnavailable(TradingAgentError):
    """The ledger's persistence backend could not be reached."""


class AlreadyRunning(TradingAgentError):
    """start() was called on a scheduler that is already running."""


class NotRunning(TradingAgentError):
    """A running-only operation was called on a stopped scheduler."""


class ConfigurationError(TradingAgentError):
    """Collaborators cannot be built from the loaded configuration."""
