"""Ledger persistence backends.

Both stores translate their driver errors into StoreUnavailable so the
ledger's callers see one failure type regardless of backend.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone
from typing import Protocol

import httpx
import structlog
from pydantic import ValidationError
from sqlalchemy import desc, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from trading_agent.db.tables.ledger import LedgerRecordRow
from trading_agent.errors import InvalidInput, StoreUnavailable
from trading_agent.exchange.recall import RecallClient
from trading_agent.models import LedgerQuery, LedgerRecord

log = structlog.get_logger("ledger_store")


class LedgerStore(Protocol):
    async def put(self, record: LedgerRecord) -> None: ...

    async def search(self, query: LedgerQuery) -> list[LedgerRecord]: ...


def _as_utc(ts: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


class SqlLedgerStore:
    """Ledger records in the trading_ledger.records table."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    async def put(self, record: LedgerRecord) -> None:
        row = LedgerRecordRow(
            record_type=record.record_type,
            instrument=record.instrument,
            ts=record.ts,
            seq=record.seq,
            payload=record.payload,
        )
        try:
            with self._session_factory() as session:
                session.add(row)
                session.commit()
        except IntegrityError as exc:
            raise InvalidInput(f"duplicate ledger record {record.key}") from exc
        except SQLAlchemyError as exc:
            raise StoreUnavailable(f"ledger write failed: {exc}") from exc

    async def search(self, query: LedgerQuery) -> list[LedgerRecord]:
        """Most recent first; ties on timestamp broken by sequence number."""
        stmt = select(LedgerRecordRow)
        if query.record_type is not None:
            stmt = stmt.where(LedgerRecordRow.record_type == query.record_type)
        if query.instrument is not None:
            stmt = stmt.where(LedgerRecordRow.instrument == query.instrument)
        stmt = stmt.order_by(desc(LedgerRecordRow.ts), desc(LedgerRecordRow.seq)).limit(query.limit)

        try:
            with self._session_factory() as session:
                rows = session.execute(stmt).scalars().all()
        except SQLAlchemyError as exc:
            raise StoreUnavailable(f"ledger read failed: {exc}") from exc

        return [
            LedgerRecord(
                record_type=r.record_type,
                instrument=r.instrument,
                ts=_as_utc(r.ts),
                seq=r.seq,
                payload=r.payload or {},
            )
            for r in rows
        ]


class RecallMemoryStore:
    """Ledger records kept in the Recall network's memory service.

    Search results follow the service's relevance ranking, not strict
    chronological order.
    """

    def __init__(self, client: RecallClient) -> None:
        self._client = client

    async def put(self, record: LedgerRecord) -> None:
        data = {
            "record_type": record.record_type,
            "instrument": record.instrument,
            "timestamp": record.ts.isoformat(),
            "seq": record.seq,
            "payload": record.payload,
        }
        try:
            await self._client.store_memory(record.key, data, timestamp=record.ts.isoformat())
        except (httpx.HTTPError, ValueError) as exc:
            # ValueError covers a 2xx reply whose body is not JSON
            raise StoreUnavailable(f"memory store failed: {exc}") from exc

    async def search(self, query: LedgerQuery) -> list[LedgerRecord]:
        filters: dict[str, str] = {}
        if query.record_type is not None:
            filters["record_type"] = query.record_type
        if query.instrument is not None:
            filters["instrument"] = query.instrument
        text = f"{query.record_type or 'trading'} records for {query.instrument or 'all instruments'}"

        try:
            results = await self._client.search_memory(text, filters=filters, limit=query.limit)
        except (httpx.HTTPError, ValueError) as exc:
            raise StoreUnavailable(f"memory search failed: {exc}") from exc

        records: list[LedgerRecord] = []
        for data in results:
            try:
                records.append(LedgerRecord(
                    record_type=data["record_type"],
                    instrument=data["instrument"],
                    ts=datetime.fromisoformat(data["timestamp"]),
                    seq=data.get("seq", 0),
                    payload=data.get("payload") or {},
                ))
            except (KeyError, ValueError, ValidationError):
                log.warning("memory_record_unparseable", data=data)
        return records
