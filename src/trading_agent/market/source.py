"""Candle-backed indicator source — builds IndicatorSnapshots from exchange candles."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable

import structlog

from trading_agent.exchange.hyperliquid import HyperliquidClient
from trading_agent.models import MACD, IndicatorSnapshot, MovingAverages
from trading_agent.signals.indicators import (
    ema,
    macd,
    notional_volume,
    realized_volatility,
    rsi,
    sma,
)

log = structlog.get_logger("market_source")

# Enough history for SMA50 and a 26/9 MACD
MIN_CANDLES = 51


def build_snapshot(
    symbol: str,
    timeframe: str,
    closes: list[Decimal],
    volumes: list[Decimal],
    ts: datetime | None = None,
) -> IndicatorSnapshot:
    """Compute all indicator readings from close and volume series (oldest first).

    Raises ValueError when the series is too short.
    """
    if len(closes) < MIN_CANDLES:
        raise ValueError(f"need at least {MIN_CANDLES} candles for {symbol}, got {len(closes)}")

    line, signal, histogram = macd(closes)
    return IndicatorSnapshot(
        symbol=symbol,
        timeframe=timeframe,
        rsi=float(rsi(closes)),
        macd=MACD(line=float(line), signal=float(signal), histogram=float(histogram)),
        moving_averages=MovingAverages(
            sma20=float(sma(closes, 20)),
            sma50=float(sma(closes, 50)),
            ema12=float(ema(closes, 12)),
            ema26=float(ema(closes, 26)),
        ),
        volume=float(notional_volume(closes, volumes)),
        volatility=float(realized_volatility(closes)),
        price=float(closes[-1]),
        ts=ts or datetime.now(timezone.utc),
    )


class CandleIndicatorSource:
    """MarketDataSource over Hyperliquid candle snapshots.

    Instruments are "BASE/QUOTE"; candles are fetched for BASE. If given,
    *on_price* is called with (symbol, latest close) for every snapshot.
    """

    def __init__(
        self,
        client: HyperliquidClient,
        candle_limit: int = 100,
        on_price: Callable[[str, float], None] | None = None,
    ) -> None:
        self.client = client
        self.candle_limit = max(candle_limit, MIN_CANDLES)
        self.on_price = on_price

    async def get_market_data(self, symbol: str, timeframe: str = "1h") -> IndicatorSnapshot:
        coin = symbol.partition("/")[0].upper()
        candles = await self.client.get_recent_candles(coin, timeframe, self.candle_limit)
        closes = [Decimal(str(c["c"])) for c in candles]
        volumes = [Decimal(str(c["v"])) for c in candles]
        snapshot = build_snapshot(symbol, timeframe, closes, volumes)
        log.debug("snapshot_built", instrument=symbol, candles=len(candles), rsi=snapshot.rsi)
        if self.on_price is not None and snapshot.price:
            self.on_price(symbol, snapshot.price)
        return snapshot
