"""Indicator snapshot models — the technical readings fed to the signal engine."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class MACD(BaseModel):
    """Trend-convergence triple."""

    model_config = ConfigDict(frozen=True)

    line: float
    signal: float
    histogram: float


class MovingAverages(BaseModel):
    model_config = ConfigDict(frozen=True)

    sma20: float
    sma50: float
    ema12: float
    ema26: float


class IndicatorSnapshot(BaseModel):
    """Technical readings for one instrument and timeframe at a point in time."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    timeframe: str = "1h"
    rsi: float = Field(ge=0.0, le=100.0)
    macd: MACD
    moving_averages: MovingAverages
    volume: float = Field(ge=0.0)
    volatility: float = Field(ge=0.0)
    price: float | None = None
    ts: datetime | None = None
