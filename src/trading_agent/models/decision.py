"""Decision, execution result and pipeline outcome models."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from trading_agent.models.signal import Signal


class Decision(BaseModel):
    """A sized trade the Decide stage committed to. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    action: Literal["buy", "sell"]
    position_size: Decimal = Field(ge=0)
    rationale: str
    confidence: float = Field(ge=0.0, le=1.0)
    stop_loss_pct: float
    # Quote-currency price of the base asset when the decision was made
    entry_price: float | None = Field(default=None, gt=0)
    target_price: float | None = None
    stop_loss: float | None = None
    ts: datetime


class ExecutionResult(BaseModel):
    """Terminal result of the Execute stage for one decision."""

    model_config = ConfigDict(frozen=True)

    executed: bool
    tx_hash: str | None = None
    token_in: str | None = None
    token_out: str | None = None
    amount_in: Decimal | None = None
    estimated_amount_out: Decimal | None = None
    min_amount_out: Decimal | None = None
    price_impact: float | None = None
    reason: str | None = None
    # Realised profit, filled in by whoever settles the trade later
    profit: float | None = None


class PipelineOutcome(BaseModel):
    """What the Record stage hands back to the caller."""

    symbol: str
    status: Literal["success", "skipped"]
    message: str
    stage: Literal["decide", "execute"]
    signal: Signal | None = None
    decision: Decision | None = None
    execution: ExecutionResult | None = None

    @property
    def executed(self) -> bool:
        return self.execution is not None and self.execution.executed
