"""FastAPI application exposing ledger records and analytics."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Awaitable, Callable, Iterable, Literal

import structlog
from fastapi import FastAPI, HTTPException, Query

from trading_agent.errors import StoreUnavailable
from trading_agent.ledger import Ledger
from trading_agent.models import LedgerAnalytics, LedgerQuery, LedgerRecord

logger = structlog.get_logger("api")


def create_app(
    ledger: Ledger,
    closers: Iterable[Callable[[], Awaitable[None]]] = (),
) -> FastAPI:
    """Build the API over *ledger*; each closer is awaited on shutdown."""
    closers = list(closers)
    app = FastAPI(
        title="Trading Agent Ledger API",
        description="Decisions, insights and performance recorded by the trading agent",
        version="0.1.0",
    )

    @app.on_event("shutdown")
    async def close_clients():
        for close in closers:
            await close()

    @app.get("/api/health")
    async def health_check():
        return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}

    @app.get("/api/ledger/records", response_model=list[LedgerRecord])
    async def list_records(
        record_type: Literal["decision", "insight"] | None = None,
        instrument: str | None = None,
        limit: int = Query(default=20, ge=1, le=1000),
    ):
        query = LedgerQuery(record_type=record_type, instrument=instrument, limit=limit)
        try:
            return await ledger.query(query)
        except StoreUnavailable as exc:
            logger.error("ledger_query_failed", error=str(exc))
            raise HTTPException(status_code=503, detail="ledger unavailable")

    @app.get("/api/ledger/analytics", response_model=LedgerAnalytics)
    async def analytics(instrument: str | None = None):
        try:
            return await ledger.analytics(instrument)
        except StoreUnavailable as exc:
            logger.error("ledger_analytics_failed", error=str(exc))
            raise HTTPException(status_code=503, detail="ledger unavailable")

    return app
