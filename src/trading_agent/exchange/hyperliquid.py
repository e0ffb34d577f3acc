"""Hyperliquid info API client — the agent's candle feed."""

from __future__ import annotations

import time
from typing import Any

import httpx

# Candle intervals the agent can analyse, in milliseconds
CANDLE_INTERVALS_MS = {
    "1m": 60_000,
    "5m": 300_000,
    "15m": 900_000,
    "1h": 3_600_000,
    "4h": 14_400_000,
    "1d": 86_400_000,
}


class HyperliquidClient:
    """Async client for the public ``/info`` endpoint.

    Only the candle snapshot request is used; no API key is needed.
    """

    def __init__(
        self,
        base_url: str = "https://api.hyperliquid.xyz",
        timeout_s: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self._transport = transport
        self._http: httpx.AsyncClient | None = None

    async def _get_http(self) -> httpx.AsyncClient:
        if self._http is None or self._http.is_closed:
            self._http = httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout_s, transport=self._transport,
            )
        return self._http

    async def close(self) -> None:
        if self._http and not self._http.is_closed:
            await self._http.aclose()

    async def _info(self, request_type: str, **req: Any) -> Any:
        http = await self._get_http()
        resp = await http.post("/info", json={"type": request_type, "req": req})
        resp.raise_for_status()
        return resp.json()

    async def get_recent_candles(
        self,
        coin: str,
        interval: str,
        limit: int,
        end_ms: int | None = None,
    ) -> list[dict]:
        """The latest *limit* candles for *coin*, oldest first.

        Each candle is a dict with keys t, T, s, i, o, c, h, l, v, n; prices
        and volume arrive as strings. Raises ValueError for an interval not
        in CANDLE_INTERVALS_MS.
        """
        try:
            step = CANDLE_INTERVALS_MS[interval]
        except KeyError:
            raise ValueError(f"unsupported interval {interval!r}") from None
        if end_ms is None:
            end_ms = int(time.time() * 1000)

        candles = await self._info(
            "candleSnapshot",
            coin=coin,
            interval=interval,
            startTime=end_ms - step * limit,
            endTime=end_ms,
        )
        candles.sort(key=lambda c: c["t"])
        return candles[-limit:]
