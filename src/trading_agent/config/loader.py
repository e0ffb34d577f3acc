"""Config loader — reads YAML, applies TRADING_* env var overrides."""

from __future__ import annotations

import os
from pathlib import Path

import yaml

from trading_agent.config.schema import AppConfig

# env var -> (section, key)
_ENV_OVERRIDES = {
    "TRADING_DATABASE_URL": ("database", "url"),
    "TRADING_LOG_LEVEL": ("logging", "level"),
    "TRADING_LOG_FORMAT": ("logging", "format"),
    "TRADING_RECALL_URL": ("recall", "base_url"),
    "TRADING_RECALL_API_KEY": ("recall", "api_key"),
    "TRADING_VENUE": ("venue", "kind"),
    "TRADING_LEDGER_BACKEND": ("ledger", "backend"),
}


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from a YAML file, then apply env var overrides.

    If *path* is None or the file doesn't exist, returns defaults.

    Environment variable overrides:
        TRADING_DATABASE_URL    -> database.url
        TRADING_LOG_LEVEL       -> logging.level
        TRADING_LOG_FORMAT      -> logging.format
        TRADING_RECALL_URL      -> recall.base_url
        TRADING_RECALL_API_KEY  -> recall.api_key
        TRADING_VENUE           -> venue.kind
        TRADING_LEDGER_BACKEND  -> ledger.backend
    """
    data: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            with open(p) as f:
                data = yaml.safe_load(f) or {}

    for env_name, (section, key) in _ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            data.setdefault(section, {})[key] = value

    return AppConfig.model_validate(data)
