"""PaperVenue — a deterministic in-memory TradingVenue.

Balances are tracked per token address in token units. Each token has a
mark price in quote-currency value (1 until marked), used to value the
portfolio and to convert a swap from token_in to token_out less a fee.
Price impact grows linearly with trade value relative to the configured
pool liquidity.
"""

from __future__ import annotations

import itertools
from collections import defaultdict
from decimal import Decimal

import structlog

from trading_agent.errors import InvalidInput
from trading_agent.models import PortfolioBalance, TradeQuote

log = structlog.get_logger("paper_venue")


class PaperVenue:
    def __init__(
        self,
        cash_token: str,
        initial_balance: float = 10000,
        liquidity: float = 1_000_000,
        fee_pct: float = 0.003,
    ) -> None:
        if liquidity <= 0:
            raise InvalidInput(f"liquidity must be > 0, got {liquidity}")
        self.cash_token = cash_token
        self.liquidity = Decimal(str(liquidity))
        self.fee_pct = Decimal(str(fee_pct))
        self.balances: dict[str, Decimal] = defaultdict(Decimal)
        self.balances[cash_token] = Decimal(str(initial_balance))
        self.marks: dict[str, Decimal] = {}
        self._tx_ids = itertools.count(1)

    def mark_price(self, token: str, price: float) -> None:
        """Set the quote-currency value of one unit of *token*."""
        if price <= 0:
            raise InvalidInput(f"mark price must be > 0, got {price}")
        self.marks[token] = Decimal(str(price))

    def mark(self, token: str) -> Decimal:
        return self.marks.get(token, Decimal(1))

    async def get_portfolio_balance(self) -> PortfolioBalance:
        total = sum(
            (amount * self.mark(token) for token, amount in self.balances.items()),
            Decimal(0),
        )
        return PortfolioBalance(total_balance=total)

    def quote(self, amount_in: Decimal, token_in: str = "", token_out: str = "") -> TradeQuote:
        value_in = amount_in * self.mark(token_in)
        impact_pct = value_in / self.liquidity * 100
        value_out = value_in * (1 - self.fee_pct) * (1 - impact_pct / 100)
        amount_out = value_out / self.mark(token_out)
        return TradeQuote(amount_out=max(amount_out, Decimal(0)), price_impact=float(impact_pct))

    async def get_trade_quote(
        self,
        token_in: str,
        token_out: str,
        amount_in: Decimal,
    ) -> TradeQuote:
        return self.quote(amount_in, token_in, token_out)

    async def execute_trade(
        self,
        token_in: str,
        token_out: str,
        amount_in: Decimal,
        min_amount_out: Decimal,
    ) -> str:
        if self.balances[token_in] < amount_in:
            raise InvalidInput(
                f"insufficient {token_in} balance: {self.balances[token_in]} < {amount_in}"
            )
        amount_out = self.quote(amount_in, token_in, token_out).amount_out
        if amount_out < min_amount_out:
            raise InvalidInput(f"slippage: {amount_out} < min {min_amount_out}")

        self.balances[token_in] -= amount_in
        self.balances[token_out] += amount_out
        tx_hash = f"paper-{next(self._tx_ids):08d}"
        log.info(
            "paper_fill",
            tx_hash=tx_hash,
            token_in=token_in,
            token_out=token_out,
            amount_in=str(amount_in),
            amount_out=str(amount_out),
        )
        return tx_hash
