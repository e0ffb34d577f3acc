"""Tests for technical indicators — known-value validation."""

from __future__ import annotations

from decimal import Decimal

import pytest

from trading_agent.signals.indicators import (
    ema,
    ema_series,
    macd,
    notional_volume,
    realized_volatility,
    rsi,
    sma,
)


class TestRSI:
    def test_insufficient_data_returns_none(self):
        assert rsi([Decimal(i) for i in range(14)], period=14) is None
        assert rsi([], period=14) is None

    def test_exactly_enough_data(self):
        # 15 closes → 14 deltas → exactly one period
        closes = [Decimal(i) for i in range(15)]
        result = rsi(closes, period=14)
        assert result is not None

    def test_all_gains_returns_100(self):
        # Monotonically increasing → RSI = 100
        closes = [Decimal(i) for i in range(20)]
        result = rsi(closes, period=14)
        assert result == Decimal(100)

    def test_all_losses_returns_0(self):
        # Monotonically decreasing → RSI = 0
        closes = [Decimal(20 - i) for i in range(20)]
        result = rsi(closes, period=14)
        assert result == Decimal(0)

    def test_equal_gains_and_losses_around_50(self):
        # Alternating up/down → RSI near 50
        closes = []
        price = Decimal(100)
        for i in range(30):
            closes.append(price)
            price += Decimal(1) if i % 2 == 0 else Decimal(-1)
        result = rsi(closes, period=14)
        assert result is not None
        assert Decimal(40) < result < Decimal(60)

    def test_known_value(self):
        # Hand-calculated example: 14 gains of +1, then 5 losses of -1
        closes = [Decimal(100)]
        for _ in range(14):
            closes.append(closes[-1] + Decimal(1))
        for _ in range(5):
            closes.append(closes[-1] - Decimal(1))
        result = rsi(closes, period=14)
        assert result is not None
        # After 14 gains: avg_gain=1, avg_loss=0 → RSI seed=100
        # Then Wilder smoothing through 5 losses brings it down
        assert Decimal(40) < result < Decimal(80)

    def test_custom_period(self):
        closes = [Decimal(i) for i in range(10)]
        result = rsi(closes, period=5)
        assert result is not None
        assert result == Decimal(100)  # all gains


class TestMovingAverages:
    def test_sma_insufficient_data(self):
        assert sma([Decimal(1)] * 19, 20) is None
        assert sma([], 20) is None

    def test_sma_uses_last_window(self):
        closes = [Decimal(50)] * 20 + [Decimal(i) for i in range(1, 21)]
        assert sma(closes, 20) == Decimal("10.5")

    def test_ema_series_alignment(self):
        closes = [Decimal(i) for i in range(30)]
        series = ema_series(closes, 12)
        assert len(series) == 30 - 12 + 1
        # Seeded with the SMA of the first window
        assert series[0] == Decimal("5.5")

    def test_ema_constant_series(self):
        closes = [Decimal(100)] * 40
        assert float(ema(closes, 12)) == pytest.approx(100.0)

    def test_ema_reacts_faster_than_sma(self):
        closes = [Decimal(100)] * 40 + [Decimal(110)] * 5
        assert ema(closes, 20) > sma(closes, 20)

    def test_ema_insufficient_data(self):
        assert ema([Decimal(1)] * 5, 12) is None
        assert ema_series([Decimal(1)] * 5, 12) == []


class TestMACD:
    def test_insufficient_data_returns_none(self):
        assert macd([Decimal(i) for i in range(33)]) is None

    def test_constant_prices_flat(self):
        line, signal, histogram = macd([Decimal(100)] * 60)
        assert float(line) == pytest.approx(0.0, abs=1e-9)
        assert float(signal) == pytest.approx(0.0, abs=1e-9)
        assert float(histogram) == pytest.approx(0.0, abs=1e-9)

    def test_uptrend_positive_line(self):
        line, signal, histogram = macd([Decimal(100 + i) for i in range(60)])
        assert line > 0
        assert histogram == line - signal

    def test_downtrend_negative_line(self):
        line, _, _ = macd([Decimal(200 - i) for i in range(60)])
        assert line < 0


class TestVolatilityAndVolume:
    def test_volatility_insufficient_data(self):
        assert realized_volatility([Decimal(100)] * 24) is None

    def test_constant_prices_zero_volatility(self):
        assert realized_volatility([Decimal(100)] * 30) == Decimal(0)

    def test_alternating_prices_positive_volatility(self):
        closes = [Decimal(100) if i % 2 == 0 else Decimal(110) for i in range(30)]
        assert realized_volatility(closes) > 0

    def test_notional_volume_window(self):
        closes = [Decimal(2)] * 30
        volumes = [Decimal(3)] * 30
        assert notional_volume(closes, volumes) == Decimal(144)

    def test_notional_volume_short_series(self):
        assert notional_volume([Decimal(10)], [Decimal(5)]) == Decimal(50)
