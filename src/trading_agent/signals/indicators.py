"""Technical indicators — pure functions on price series."""

from __future__ import annotations

from decimal import Decimal
from statistics import mean, pstdev


def rsi(closes: list[Decimal], period: int = 14) -> Decimal | None:
    """Relative Strength Index (Wilder's smoothing).

    Returns a Decimal in [0, 100] or None if there are fewer than
    ``period + 1`` data points.
    """
    if len(closes) < period + 1:
        return None

    deltas = [closes[i] - closes[i - 1] for i in range(1, len(closes))]

    # Seed with simple average of first *period* changes
    gains = [d if d > 0 else Decimal(0) for d in deltas[:period]]
    losses = [-d if d < 0 else Decimal(0) for d in deltas[:period]]
    avg_gain = Decimal(mean(gains))
    avg_loss = Decimal(mean(losses))

    for d in deltas[period:]:
        avg_gain = (avg_gain * (period - 1) + (d if d > 0 else Decimal(0))) / period
        avg_loss = (avg_loss * (period - 1) + (-d if d < 0 else Decimal(0))) / period

    if avg_loss == 0:
        return Decimal(100)
    rs = avg_gain / avg_loss
    return Decimal(100) - Decimal(100) / (1 + rs)


def sma(values: list[Decimal], period: int) -> Decimal | None:
    """Simple moving average of the last *period* values."""
    if period <= 0 or len(values) < period:
        return None
    return Decimal(mean(values[-period:]))


def ema_series(values: list[Decimal], period: int) -> list[Decimal]:
    """Exponential moving average series, seeded with the SMA of the first window.

    The returned list is aligned with ``values[period - 1:]``; empty when there
    is not enough data.
    """
    if period <= 0 or len(values) < period:
        return []
    alpha = Decimal(2) / Decimal(period + 1)
    current = Decimal(mean(values[:period]))
    series = [current]
    for v in values[period:]:
        current = alpha * v + (1 - alpha) * current
        series.append(current)
    return series


def ema(values: list[Decimal], period: int) -> Decimal | None:
    """Latest exponential moving average value."""
    series = ema_series(values, period)
    return series[-1] if series else None


def macd(
    closes: list[Decimal],
    fast: int = 12,
    slow: int = 26,
    signal_period: int = 9,
) -> tuple[Decimal, Decimal, Decimal] | None:
    """MACD line, signal line and histogram.

    Returns ``(line, signal, histogram)`` or None when fewer than
    ``slow + signal_period - 1`` closes are available.
    """
    if len(closes) < slow + signal_period - 1:
        return None
    fast_series = ema_series(closes, fast)
    slow_series = ema_series(closes, slow)
    # Align the fast series to the slow one (both end at the latest close)
    offset = len(fast_series) - len(slow_series)
    line_series = [f - s for f, s in zip(fast_series[offset:], slow_series)]
    signal_series = ema_series(line_series, signal_period)
    line = line_series[-1]
    signal = signal_series[-1]
    return line, signal, line - signal


def realized_volatility(closes: list[Decimal], window: int = 24) -> Decimal | None:
    """Standard deviation of simple returns over *window*, scaled by sqrt(window).

    For hourly candles with the default window this is a daily volatility.
    """
    if len(closes) < window + 1:
        return None
    recent = closes[-(window + 1):]
    returns = [
        (recent[i] - recent[i - 1]) / recent[i - 1]
        for i in range(1, len(recent))
        if recent[i - 1] != 0
    ]
    if len(returns) < 2:
        return Decimal(0)
    return Decimal(pstdev(returns)) * Decimal(window).sqrt()


def notional_volume(
    closes: list[Decimal],
    volumes: list[Decimal],
    window: int = 24,
) -> Decimal:
    """Traded notional (close * volume) summed over the last *window* bars."""
    pairs = list(zip(closes, volumes))[-window:]
    return sum((c * v for c, v in pairs), Decimal(0))
