"""Scheduler runner — wires collaborators from config and runs until signalled."""

from __future__ import annotations

import asyncio
import signal
from dataclasses import dataclass, field
from typing import Any

import structlog

from trading_agent.config.loader import load_config
from trading_agent.config.schema import AppConfig
from trading_agent.db.engine import dispose_engine, init_engine
from trading_agent.errors import ConfigurationError, UnknownInstrument
from trading_agent.exchange.hyperliquid import HyperliquidClient
from trading_agent.exchange.recall import RecallClient
from trading_agent.ledger import Ledger, RecallMemoryStore, SqlLedgerStore
from trading_agent.logging.setup import setup_logging
from trading_agent.market import CandleIndicatorSource
from trading_agent.paper import PaperVenue
from trading_agent.pipeline import ExecutionPipeline, TokenRegistry
from trading_agent.scheduler.scheduler import Scheduler

log = structlog.get_logger("runner")


@dataclass
class Service:
    """Everything main() needs to run and later close."""

    scheduler: Scheduler
    clients: list[Any] = field(default_factory=list)
    stop_task: asyncio.Task | None = None

    def request_stop(self) -> asyncio.Task:
        """Schedule scheduler.stop() once; repeated signals reuse the pending task."""
        if self.stop_task is None or self.stop_task.done():
            self.stop_task = asyncio.get_running_loop().create_task(self.scheduler.stop())
        return self.stop_task

    async def close(self) -> None:
        for client in self.clients:
            await client.close()
        dispose_engine()


def build_service(config: AppConfig) -> Service:
    """Build the scheduler and its collaborators. Raises ConfigurationError."""
    if not config.scheduler.instruments:
        raise ConfigurationError("scheduler.instruments is empty")
    tokens = TokenRegistry(config.tokens)
    try:
        for symbol in config.scheduler.instruments:
            base, quote = TokenRegistry.split_symbol(symbol)
            tokens.address(base)
            tokens.address(quote)
    except UnknownInstrument as exc:
        raise ConfigurationError(str(exc)) from exc

    needs_recall = config.venue.kind == "recall" or config.ledger.backend == "recall"
    if needs_recall and not config.recall.api_key:
        raise ConfigurationError("recall.api_key is required for the recall venue or ledger")

    clients: list[Any] = []
    recall: RecallClient | None = None
    if needs_recall:
        recall = RecallClient(
            base_url=config.recall.base_url,
            api_key=config.recall.api_key,
            timeout_s=config.recall.timeout_s,
            token_decimals=config.recall.token_decimals,
        )
        clients.append(recall)

    on_price = None
    if config.venue.kind == "recall":
        venue = recall
    else:
        # Paper cash is the quote asset of the first instrument
        _, cash = TokenRegistry.split_symbol(config.scheduler.instruments[0])
        venue = PaperVenue(
            cash_token=tokens.address(cash),
            initial_balance=config.venue.initial_balance,
            liquidity=config.venue.liquidity,
            fee_pct=config.venue.fee_pct,
        )

        def on_price(symbol: str, price: float) -> None:
            # Keeps paper balances of the base asset valued at the latest close
            base, _ = TokenRegistry.split_symbol(symbol)
            venue.mark_price(tokens.address(base), price)

    market_client = HyperliquidClient(base_url=config.market_data.base_url)
    clients.append(market_client)
    market_data = CandleIndicatorSource(
        market_client,
        candle_limit=config.market_data.candle_limit,
        on_price=on_price,
    )

    if config.ledger.backend == "recall":
        store = RecallMemoryStore(recall)
    else:
        store = SqlLedgerStore(init_engine(config.database.url))
    ledger = Ledger(store, analytics_limit=config.ledger.analytics_limit)

    pipeline = ExecutionPipeline(
        market_data,
        venue,
        ledger,
        tokens,
        execution=config.execution,
        signals=config.signals,
    )
    return Service(scheduler=Scheduler(pipeline, config.scheduler), clients=clients)


async def run(config: AppConfig) -> None:
    """Start the scheduler and block until SIGINT/SIGTERM stops it."""
    service = build_service(config)
    scheduler = service.scheduler
    loop = asyncio.get_running_loop()

    def _request_stop(signame: str) -> None:
        log.info("shutdown_requested", signal=signame)
        service.request_stop()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, _request_stop, sig.name)

    try:
        await scheduler.start()
        await scheduler.wait()
        if service.stop_task is not None:
            await service.stop_task
    finally:
        await service.close()


def main(config_path: str | None = None) -> int:
    """Load config, set up logging and run the loop. Returns the exit status."""
    config = load_config(config_path)
    setup_logging(
        level=config.logging.level,
        log_format=config.logging.format,
        log_file=config.logging.file,
    )
    try:
        asyncio.run(run(config))
    except Exception:
        log.exception("startup_failed")
        return 1
    log.info("shutdown_complete")
    return 0
