"""Tests for additive rule scoring."""

from __future__ import annotations

import pytest

from conftest import make_snapshot, strong_buy, strong_sell
from trading_agent.config.schema import SignalConfig
from trading_agent.signals import score_snapshot


class TestScoreSnapshot:
    def test_all_buy_rules(self):
        sig = score_snapshot(strong_buy())
        assert sig.action == "buy"
        assert sig.confidence == 0.90
        assert sig.reasons == (
            "RSI oversold",
            "MACD bullish crossover",
            "EMA bullish alignment",
            "High volume confirmation",
        )

    def test_all_sell_rules(self):
        sig = score_snapshot(strong_sell())
        assert sig.action == "sell"
        assert sig.confidence == 0.90
        assert sig.reasons[0] == "RSI overbought"

    def test_neutral_snapshot_holds(self):
        sig = score_snapshot(make_snapshot())
        assert sig.action == "hold"
        assert sig.confidence == 0.0
        assert sig.reasons == ()
        assert sig.rationale == "No rule fired"
        assert sig.target_price is None
        assert sig.stop_loss is None

    def test_volume_alone_holds_with_confidence(self):
        sig = score_snapshot(make_snapshot(volume=600_000))
        assert sig.action == "hold"
        assert sig.confidence == 0.15

    def test_first_bias_wins(self):
        # RSI says buy; MACD and EMA say sell but only add confidence
        snap = make_snapshot(rsi=20, macd=(-1.0, 0.0, -1.0), ema12=90, ema26=100)
        sig = score_snapshot(snap)
        assert sig.action == "buy"
        assert sig.confidence == 0.75
        assert "MACD bearish crossover" in sig.reasons

    def test_macd_sets_bias_when_rsi_neutral(self):
        snap = make_snapshot(macd=(-1.0, 0.0, -1.0), ema12=105, ema26=100)
        sig = score_snapshot(snap)
        assert sig.action == "sell"
        assert sig.confidence == 0.45

    def test_macd_needs_histogram_agreement(self):
        snap = make_snapshot(macd=(1.0, 0.5, -0.1))
        sig = score_snapshot(snap)
        assert sig.action == "hold"
        assert sig.confidence == 0.0

    def test_volatility_dampens_confidence(self):
        snap = strong_buy().model_copy(update={"volatility": 0.5})
        sig = score_snapshot(snap)
        assert sig.action == "buy"
        assert sig.confidence == 0.72
        assert sig.reasons[-1] == "High volatility detected"

    def test_boundaries_do_not_fire(self):
        snap = make_snapshot(rsi=30, volume=500_000, volatility=0.3)
        sig = score_snapshot(snap)
        assert sig.action == "hold"
        assert sig.confidence == 0.0

    def test_rationale_joins_reasons_in_order(self):
        sig = score_snapshot(strong_buy())
        assert sig.rationale == (
            "RSI oversold. MACD bullish crossover. EMA bullish alignment. "
            "High volume confirmation."
        )

    def test_target_and_stop_for_buy(self):
        sig = score_snapshot(strong_buy())
        assert sig.target_price == pytest.approx(106.0)
        assert sig.stop_loss == pytest.approx(97.0)

    def test_target_and_stop_for_sell(self):
        sig = score_snapshot(strong_sell())
        assert sig.target_price == pytest.approx(94.0)
        assert sig.stop_loss == pytest.approx(103.0)

    def test_no_levels_without_price(self):
        snap = strong_buy().model_copy(update={"price": None})
        sig = score_snapshot(snap)
        assert sig.action == "buy"
        assert sig.target_price is None

    def test_custom_thresholds(self):
        params = SignalConfig(oversold=40)
        sig = score_snapshot(make_snapshot(rsi=35), params)
        assert sig.action == "buy"
        assert sig.confidence == 0.30

    def test_confidence_always_in_unit_interval(self):
        params = SignalConfig(volatility_dampening=2.0)
        snap = strong_buy().model_copy(update={"volatility": 1.0})
        sig = score_snapshot(snap, params)
        assert sig.confidence == 1.0

    def test_deterministic(self):
        assert score_snapshot(strong_buy()) == score_snapshot(strong_buy())
