"""Ledger record, query filter and analytics models."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

RecordType = Literal["decision", "insight"]


class LedgerRecord(BaseModel):
    """One append-only ledger entry.

    Identity is (record_type, instrument, ts, seq); ``seq`` breaks ties
    between records written within the same clock tick.
    """

    model_config = ConfigDict(frozen=True)

    record_type: RecordType
    instrument: str
    ts: datetime
    seq: int = Field(ge=0)
    payload: dict[str, Any] = Field(default_factory=dict)

    @property
    def key(self) -> str:
        ms = int(self.ts.timestamp() * 1000)
        return f"{self.record_type}_{self.instrument}_{ms}_{self.seq}"

    @property
    def executed(self) -> bool:
        result = self.payload.get("result") or {}
        return bool(result.get("executed"))

    @property
    def profit(self) -> float:
        result = self.payload.get("result") or {}
        return float(result.get("profit") or 0.0)


class LedgerQuery(BaseModel):
    record_type: RecordType | None = None
    instrument: str | None = None
    limit: int = Field(default=10, ge=1, le=1000)


class LedgerAnalytics(BaseModel):
    """Aggregate performance over executed decision records."""

    total_trades: int = 0
    profitable_trades: int = 0
    win_rate: float = 0.0
    total_profit: float = 0.0
    average_profit: float = 0.0
    profit_factor: float = 0.0
    max_drawdown: float = 0.0
