"""Tests for instrument symbol to token address resolution."""

from __future__ import annotations

import pytest

from trading_agent.errors import InvalidInput, UnknownInstrument


class TestTokenRegistry:
    def test_buy_spends_quote_asset(self, tokens):
        assert tokens.resolve("ETH/USDC", "buy") == ("0xusdc", "0xeth")

    def test_sell_spends_base_asset(self, tokens):
        assert tokens.resolve("ETH/USDC", "sell") == ("0xeth", "0xusdc")

    def test_case_insensitive(self, tokens):
        assert tokens.resolve("link/usdc", "buy") == ("0xusdc", "0xlink")

    def test_unknown_token(self, tokens):
        with pytest.raises(UnknownInstrument):
            tokens.resolve("DOGE/USDC", "buy")

    @pytest.mark.parametrize("symbol", ["ETHUSDC", "/USDC", "ETH/", ""])
    def test_malformed_symbol(self, tokens, symbol):
        with pytest.raises(UnknownInstrument):
            tokens.resolve(symbol, "buy")

    def test_hold_has_no_tokens(self, tokens):
        with pytest.raises(InvalidInput):
            tokens.resolve("ETH/USDC", "hold")

    def test_split_symbol(self):
        from trading_agent.pipeline import TokenRegistry

        assert TokenRegistry.split_symbol("btc/usdc") == ("BTC", "USDC")
