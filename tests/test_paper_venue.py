"""Tests for the simulated trading venue."""

from __future__ import annotations

import asyncio
from decimal import Decimal

import pytest

from trading_agent.errors import InvalidInput
from trading_agent.paper import PaperVenue

USDC = "0xusdc"
ETH = "0xeth"


@pytest.fixture
def venue():
    return PaperVenue(cash_token=USDC, initial_balance=10000, liquidity=1_000_000, fee_pct=0.003)


class TestPaperVenue:
    def test_initial_balance(self, venue):
        bal = asyncio.run(venue.get_portfolio_balance())
        assert bal.total_balance == Decimal("10000")

    def test_quote_linear_impact(self, venue):
        quote = asyncio.run(venue.get_trade_quote(USDC, ETH, Decimal("10000")))
        assert quote.price_impact == pytest.approx(1.0)
        # 10000 * 0.997 * 0.99
        assert quote.amount_out == Decimal("9870.30000")

    def test_large_trade_exceeds_impact_limit(self, venue):
        quote = asyncio.run(venue.get_trade_quote(USDC, ETH, Decimal("20000")))
        assert quote.price_impact >= 1.5

    def test_execute_moves_balances(self, venue):
        quote = venue.quote(Decimal("1000"))
        tx = asyncio.run(venue.execute_trade(USDC, ETH, Decimal("1000"), Decimal("0")))
        assert tx == "paper-00000001"
        assert venue.balances[USDC] == Decimal("9000")
        assert venue.balances[ETH] == quote.amount_out
        total = asyncio.run(venue.get_portfolio_balance()).total_balance
        assert total == Decimal("9000") + quote.amount_out

    def test_tx_hashes_increment(self, venue):
        first = asyncio.run(venue.execute_trade(USDC, ETH, Decimal("10"), Decimal("0")))
        second = asyncio.run(venue.execute_trade(USDC, ETH, Decimal("10"), Decimal("0")))
        assert (first, second) == ("paper-00000001", "paper-00000002")

    def test_insufficient_balance(self, venue):
        with pytest.raises(InvalidInput, match="insufficient"):
            asyncio.run(venue.execute_trade(ETH, USDC, Decimal("1"), Decimal("0")))
        assert venue.balances[USDC] == Decimal("10000")

    def test_min_amount_out_enforced(self, venue):
        with pytest.raises(InvalidInput, match="slippage"):
            asyncio.run(venue.execute_trade(USDC, ETH, Decimal("100"), Decimal("100")))
        assert venue.balances[USDC] == Decimal("10000")

    def test_invalid_liquidity(self):
        with pytest.raises(InvalidInput):
            PaperVenue(cash_token=USDC, liquidity=0)


class TestMarkPrices:
    def test_unmarked_token_valued_at_one(self, venue):
        assert venue.mark(ETH) == Decimal(1)

    def test_buy_converts_at_mark(self, venue):
        venue.mark_price(ETH, 2500)
        quote = asyncio.run(venue.get_trade_quote(USDC, ETH, Decimal("10000")))
        assert quote.price_impact == pytest.approx(1.0)
        # 10000 * 0.997 * 0.99 / 2500
        assert quote.amount_out == Decimal("3.94812")

    def test_sell_impact_uses_value(self, venue):
        venue.mark_price(ETH, 2500)
        quote = asyncio.run(venue.get_trade_quote(ETH, USDC, Decimal("4")))
        assert quote.price_impact == pytest.approx(1.0)
        assert quote.amount_out == Decimal("9870.30000")

    def test_portfolio_valued_at_marks(self, venue):
        venue.mark_price(ETH, 2000)
        venue.balances[ETH] = Decimal("1.5")
        total = asyncio.run(venue.get_portfolio_balance()).total_balance
        assert total == Decimal("13000")

    def test_round_trip_in_token_units(self, venue):
        venue.mark_price(ETH, 2000)
        asyncio.run(venue.execute_trade(USDC, ETH, Decimal("2000"), Decimal("0")))
        held = venue.balances[ETH]
        assert Decimal("0.99") < held < Decimal("1")
        asyncio.run(venue.execute_trade(ETH, USDC, held, Decimal("0")))
        assert venue.balances[ETH] == Decimal(0)
        assert Decimal("9975") < venue.balances[USDC] < Decimal("10000")

    def test_invalid_mark(self, venue):
        with pytest.raises(InvalidInput):
            venue.mark_price(ETH, 0)
