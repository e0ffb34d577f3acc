"""FastAPI server runner."""

from __future__ import annotations

import uvicorn
import structlog

from trading_agent.config.loader import load_config
from trading_agent.db.engine import dispose_engine, init_engine
from trading_agent.exchange.recall import RecallClient
from trading_agent.ledger import Ledger, RecallMemoryStore, SqlLedgerStore
from trading_agent.logging.setup import setup_logging
from trading_agent.api.app import create_app

logger = structlog.get_logger("api_runner")


def main(config_path: str | None = None) -> None:
    """Load config, open the ledger and serve the API."""
    config = load_config(config_path)
    setup_logging(
        level=config.logging.level,
        log_format=config.logging.format,
        log_file=config.logging.file,
    )

    closers = []
    if config.ledger.backend == "recall":
        recall = RecallClient(
            base_url=config.recall.base_url,
            api_key=config.recall.api_key,
            timeout_s=config.recall.timeout_s,
        )
        closers.append(recall.close)
        store = RecallMemoryStore(recall)
    else:
        store = SqlLedgerStore(init_engine(config.database.url))
    app = create_app(
        Ledger(store, analytics_limit=config.ledger.analytics_limit),
        closers=closers,
    )

    logger.info("api_starting", host=config.api.host, port=config.api.port)
    try:
        uvicorn.run(
            app,
            host=config.api.host,
            port=config.api.port,
            log_config=None,  # Use our structlog setup
        )
    finally:
        dispose_engine()
