"""Recall network client — portfolio, trade quote/execute and memory REST API.

Token amounts cross the wire in base units (``amount * 10**decimals``);
the rest of the agent works in whole-token Decimals.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

import httpx

from trading_agent.models import PortfolioBalance, TradeQuote

AGENT_NAME = "trading-agent"


class RecallClient:
    """Async client for the Recall competition network."""

    def __init__(
        self,
        base_url: str = "https://api.sandbox.competitions.recall.network",
        api_key: str = "",
        timeout_s: float = 15.0,
        token_decimals: int = 6,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout_s = timeout_s
        self.token_decimals = token_decimals
        self._transport = transport
        self._http: httpx.AsyncClient | None = None

    async def _get_http(self) -> httpx.AsyncClient:
        if self._http is None or self._http.is_closed:
            self._http = httpx.AsyncClient(
                base_url=self.base_url,
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=self.timeout_s,
                transport=self._transport,
            )
        return self._http

    async def close(self) -> None:
        if self._http and not self._http.is_closed:
            await self._http.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        http = await self._get_http()
        resp = await http.request(method, path, **kwargs)
        resp.raise_for_status()
        # Memory writes may answer 204 with no body
        if not resp.content:
            return None
        return resp.json()

    def to_base_units(self, amount: Decimal) -> str:
        return str(int(amount * (Decimal(10) ** self.token_decimals)))

    def from_base_units(self, raw: str | int | float) -> Decimal:
        return Decimal(str(raw)) / (Decimal(10) ** self.token_decimals)

    # --- Trading venue ---

    async def get_portfolio_balance(self) -> PortfolioBalance:
        data = await self._request("GET", "/api/account/balances")
        return PortfolioBalance(total_balance=Decimal(str(data["totalBalance"])))

    async def get_trade_quote(
        self,
        token_in: str,
        token_out: str,
        amount_in: Decimal,
    ) -> TradeQuote:
        data = await self._request(
            "GET",
            "/api/trade/quote",
            params={
                "tokenIn": token_in,
                "tokenOut": token_out,
                "amountIn": self.to_base_units(amount_in),
            },
        )
        return TradeQuote(
            amount_out=self.from_base_units(data["amountOut"]),
            price_impact=float(data["priceImpact"]),
        )

    async def execute_trade(
        self,
        token_in: str,
        token_out: str,
        amount_in: Decimal,
        min_amount_out: Decimal,
    ) -> str:
        """Submit a swap and return its transaction hash."""
        data = await self._request(
            "POST",
            "/api/trade/execute",
            json={
                "tokenIn": token_in,
                "tokenOut": token_out,
                "amountIn": self.to_base_units(amount_in),
                "minAmountOut": self.to_base_units(min_amount_out),
            },
        )
        return str(data["txHash"])

    # --- Memory ---

    async def store_memory(self, key: str, data: dict[str, Any], timestamp: str) -> None:
        await self._request(
            "POST",
            "/memory/store",
            json={
                "key": key,
                "data": data,
                "metadata": {"agent": AGENT_NAME, "timestamp": timestamp},
            },
        )

    async def search_memory(
        self,
        query: str,
        filters: dict[str, Any] | None = None,
        limit: int = 10,
    ) -> list[dict[str, Any]]:
        """Relevance search over stored memories; returns the ``data`` dicts."""
        body = await self._request(
            "POST",
            "/memory/search",
            json={"query": query, "filters": filters or {}, "limit": limit},
        )
        return [item.get("data", {}) for item in (body or {}).get("results", [])]
