"""Configuration system."""

from trading_agent.config.loader import load_config
from trading_agent.config.schema import AppConfig

__all__ = ["AppConfig", "load_config"]
