"""Ledger — append-only decision/insight records keyed by instrument and time."""

from __future__ import annotations

import itertools
from collections.abc import Callable
from datetime import datetime, timezone

import structlog

from trading_agent.errors import StoreUnavailable
from trading_agent.ledger.analytics import compute_analytics
from trading_agent.ledger.stores import LedgerStore
from trading_agent.models import (
    Decision,
    ExecutionResult,
    LedgerAnalytics,
    LedgerQuery,
    LedgerRecord,
)

log = structlog.get_logger("ledger")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Ledger:
    """Append-only record store in front of a LedgerStore backend.

    Records are never updated or deleted. Each record gets a UTC timestamp
    and a process-wide monotonic sequence number, so two records written in
    the same clock tick still have distinct identities.
    """

    def __init__(
        self,
        store: LedgerStore,
        *,
        clock: Callable[[], datetime] = _utcnow,
        analytics_limit: int = 100,
    ) -> None:
        self._store = store
        self._clock = clock
        self._seq = itertools.count()
        self.analytics_limit = analytics_limit

    # ── Record factories ──────────────────────────────────────

    def record_decision(self, decision: Decision, result: ExecutionResult) -> LedgerRecord:
        return LedgerRecord(
            record_type="decision",
            instrument=decision.symbol,
            ts=self._clock(),
            seq=next(self._seq),
            payload={
                "action": decision.action,
                "decision": decision.model_dump(mode="json"),
                "result": result.model_dump(mode="json"),
            },
        )

    def record_insight(self, symbol: str, insight: str, confidence: float) -> LedgerRecord:
        return LedgerRecord(
            record_type="insight",
            instrument=symbol,
            ts=self._clock(),
            seq=next(self._seq),
            payload={"insight": insight, "confidence": confidence},
        )

    # ── Writes ────────────────────────────────────────────────

    async def append(self, record: LedgerRecord) -> None:
        """Persist *record*. Raises StoreUnavailable if the backend is down."""
        await self._store.put(record)
        log.debug("ledger_appended", key=record.key)

    async def try_append(self, record: LedgerRecord) -> bool:
        """Best-effort append: log and return False instead of raising.

        Used after a trade has already been submitted, so no store error,
        expected or not, may reach the caller.
        """
        try:
            await self.append(record)
        except Exception as exc:
            log.error(
                "ledger_append_failed",
                instrument=record.instrument,
                record_type=record.record_type,
                error=str(exc),
                # Anything but an outage is a bug worth a traceback
                exc_info=not isinstance(exc, StoreUnavailable),
            )
            return False
        return True

    # ── Reads ─────────────────────────────────────────────────

    async def query(self, query: LedgerQuery) -> list[LedgerRecord]:
        """Records matching *query*, most relevant first."""
        return await self._store.search(query)

    async def trading_history(self, symbol: str, limit: int = 10) -> list[LedgerRecord]:
        return await self.query(LedgerQuery(record_type="decision", instrument=symbol, limit=limit))

    async def market_insights(self, symbol: str, limit: int = 5) -> list[LedgerRecord]:
        return await self.query(LedgerQuery(record_type="insight", instrument=symbol, limit=limit))

    async def analytics(self, instrument: str | None = None) -> LedgerAnalytics:
        records = await self.query(LedgerQuery(
            record_type="decision",
            instrument=instrument,
            limit=self.analytics_limit,
        ))
        return compute_analytics(records)
