"""External capabilities the pipeline consumes.

Implementations live outside the core (exchange clients, the paper venue,
test fakes). Any exception raised by these calls, timeouts included, is a
capability failure.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Protocol

from trading_agent.models import IndicatorSnapshot, PortfolioBalance, TradeQuote


class MarketDataSource(Protocol):
    async def get_market_data(self, symbol: str, timeframe: str = "1h") -> IndicatorSnapshot: ...


class TradingVenue(Protocol):
    async def get_portfolio_balance(self) -> PortfolioBalance: ...

    async def get_trade_quote(
        self,
        token_in: str,
        token_out: str,
        amount_in: Decimal,
    ) -> TradeQuote: ...

    async def execute_trade(
        self,
        token_in: str,
        token_out: str,
        amount_in: Decimal,
        min_amount_out: Decimal,
    ) -> str: ...
