"""Additive rule scoring — turns an IndicatorSnapshot into a Signal.

Each rule is evaluated independently and fires at most once:

    momentum      RSI < oversold / > overbought          +0.30, sets bias
    trend         MACD line vs signal, histogram sign    +0.25, bias if unset
    alignment     EMA12 vs EMA26                          +0.20, bias if unset
    volume        volume above threshold                  +0.15
    volatility    volatility above threshold              confidence x 0.8

The first rule to pick a side wins; later rules only add confidence.
Confidence is clamped to [0, 1] and rounded to two decimals.
"""

from __future__ import annotations

from decimal import Decimal

from trading_agent.config.schema import SignalConfig
from trading_agent.models import IndicatorSnapshot, Signal
from trading_agent.risk.sizing import calculate_stop_price, calculate_take_profit_price

MOMENTUM_WEIGHT = 0.30
TREND_WEIGHT = 0.25
ALIGNMENT_WEIGHT = 0.20
VOLUME_WEIGHT = 0.15

_DEFAULTS = SignalConfig()


def score_snapshot(snapshot: IndicatorSnapshot, params: SignalConfig | None = None) -> Signal:
    """Score *snapshot* and return the verdict. Never raises, never blocks."""
    p = params or _DEFAULTS
    bias: str | None = None
    confidence = 0.0
    reasons: list[str] = []

    if snapshot.rsi < p.oversold:
        bias = "buy"
        confidence += MOMENTUM_WEIGHT
        reasons.append("RSI oversold")
    elif snapshot.rsi > p.overbought:
        bias = "sell"
        confidence += MOMENTUM_WEIGHT
        reasons.append("RSI overbought")

    macd = snapshot.macd
    if macd.line > macd.signal and macd.histogram > 0:
        bias = bias or "buy"
        confidence += TREND_WEIGHT
        reasons.append("MACD bullish crossover")
    elif macd.line < macd.signal and macd.histogram < 0:
        bias = bias or "sell"
        confidence += TREND_WEIGHT
        reasons.append("MACD bearish crossover")

    ma = snapshot.moving_averages
    if ma.ema12 > ma.ema26:
        bias = bias or "buy"
        confidence += ALIGNMENT_WEIGHT
        reasons.append("EMA bullish alignment")
    elif ma.ema12 < ma.ema26:
        bias = bias or "sell"
        confidence += ALIGNMENT_WEIGHT
        reasons.append("EMA bearish alignment")

    if snapshot.volume > p.volume_threshold:
        confidence += VOLUME_WEIGHT
        reasons.append("High volume confirmation")

    if snapshot.volatility > p.volatility_threshold:
        confidence *= p.volatility_dampening
        reasons.append("High volatility detected")

    action = bias or "hold"
    confidence = round(min(max(confidence, 0.0), 1.0), 2)

    target_price = stop_loss = None
    if action != "hold" and snapshot.price is not None and snapshot.price > 0:
        price = Decimal(str(snapshot.price))
        target_price = float(calculate_take_profit_price(action, price, p.take_profit_pct))
        stop_loss = float(calculate_stop_price(action, price, p.stop_loss_pct))

    return Signal(
        action=action,
        confidence=confidence,
        reasons=tuple(reasons),
        target_price=target_price,
        stop_loss=stop_loss,
    )
