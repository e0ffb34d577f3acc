"""Shared test fixtures and in-memory collaborators."""

from __future__ import annotations

from decimal import Decimal

import pytest
from sqlalchemy import BigInteger, Integer, JSON, create_engine
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from trading_agent.db.base import Base
from trading_agent.errors import StoreUnavailable
from trading_agent.ledger import Ledger
from trading_agent.models import (
    MACD,
    IndicatorSnapshot,
    LedgerQuery,
    LedgerRecord,
    MovingAverages,
    PortfolioBalance,
    TradeQuote,
)
from trading_agent.pipeline import TokenRegistry

TOKENS = {
    "USDC": "0xusdc",
    "ETH": "0xeth",
    "BTC": "0xbtc",
    "LINK": "0xlink",
}


@pytest.fixture
def session_factory():
    """In-memory SQLite session factory with all tables created.

    Patches JSONB→JSON and BigInteger→Integer for SQLite compatibility.
    StaticPool keeps one connection so every session sees the same database.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # SQLite doesn't support schemas, JSONB, or BigInteger autoincrement
    for table in Base.metadata.tables.values():
        table.schema = None
        for col in table.columns:
            if isinstance(col.type, JSONB):
                col.type = JSON()
            if isinstance(col.type, BigInteger):
                col.type = Integer()

    Base.metadata.create_all(engine)
    yield sessionmaker(bind=engine, expire_on_commit=False)
    engine.dispose()


# ── Snapshots ─────────────────────────────────────────────────


def make_snapshot(
    symbol: str = "ETH/USDC",
    rsi: float = 50.0,
    macd: tuple[float, float, float] = (0.0, 0.0, 0.0),
    ema12: float = 100.0,
    ema26: float = 100.0,
    volume: float = 0.0,
    volatility: float = 0.0,
    price: float | None = 100.0,
) -> IndicatorSnapshot:
    """Neutral snapshot (no rule fires) unless overridden."""
    line, signal, histogram = macd
    return IndicatorSnapshot(
        symbol=symbol,
        rsi=rsi,
        macd=MACD(line=line, signal=signal, histogram=histogram),
        moving_averages=MovingAverages(sma20=100.0, sma50=100.0, ema12=ema12, ema26=ema26),
        volume=volume,
        volatility=volatility,
        price=price,
    )


def strong_buy(symbol: str = "ETH/USDC") -> IndicatorSnapshot:
    """Every buy rule fires: confidence 0.90."""
    return make_snapshot(
        symbol=symbol, rsi=25, macd=(1.0, 0.5, 0.5), ema12=105, ema26=100, volume=1_000_000,
    )


def strong_sell(symbol: str = "ETH/USDC") -> IndicatorSnapshot:
    return make_snapshot(
        symbol=symbol, rsi=75, macd=(-1.0, -0.5, -0.5), ema12=95, ema26=100, volume=1_000_000,
    )


# ── Fakes ─────────────────────────────────────────────────────


class FakeMarketData:
    def __init__(self, snapshot: IndicatorSnapshot | None = None, error: Exception | None = None):
        self.snapshot = snapshot or make_snapshot()
        self.error = error
        self.calls: list[tuple[str, str]] = []

    async def get_market_data(self, symbol: str, timeframe: str) -> IndicatorSnapshot:
        self.calls.append((symbol, timeframe))
        if self.error is not None:
            raise self.error
        return self.snapshot.model_copy(update={"symbol": symbol})


class FakeVenue:
    def __init__(
        self,
        balance: Decimal = Decimal("10000"),
        amount_out: Decimal = Decimal("2.5"),
        price_impact: float = 0.5,
    ):
        self.balance = balance
        self.amount_out = amount_out
        self.price_impact = price_impact
        self.balance_error: Exception | None = None
        self.quote_error: Exception | None = None
        self.execute_error: Exception | None = None
        self.calls: list[tuple] = []

    async def get_portfolio_balance(self) -> PortfolioBalance:
        self.calls.append(("balance",))
        if self.balance_error is not None:
            raise self.balance_error
        return PortfolioBalance(total_balance=self.balance)

    async def get_trade_quote(self, token_in, token_out, amount_in) -> TradeQuote:
        self.calls.append(("quote", token_in, token_out, amount_in))
        if self.quote_error is not None:
            raise self.quote_error
        return TradeQuote(amount_out=self.amount_out, price_impact=self.price_impact)

    async def execute_trade(self, token_in, token_out, amount_in, min_amount_out) -> str:
        self.calls.append(("execute", token_in, token_out, amount_in, min_amount_out))
        if self.execute_error is not None:
            raise self.execute_error
        return "0xabc123"

    def called(self, name: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == name]


class MemoryStore:
    """LedgerStore kept in a list; ``fail`` makes every call raise StoreUnavailable."""

    def __init__(self):
        self.records: list[LedgerRecord] = []
        self.fail = False

    async def put(self, record: LedgerRecord) -> None:
        if self.fail:
            raise StoreUnavailable("store down")
        self.records.append(record)

    async def search(self, query: LedgerQuery) -> list[LedgerRecord]:
        if self.fail:
            raise StoreUnavailable("store down")
        matches = [
            r for r in self.records
            if (query.record_type is None or r.record_type == query.record_type)
            and (query.instrument is None or r.instrument == query.instrument)
        ]
        matches.sort(key=lambda r: (r.ts, r.seq), reverse=True)
        return matches[:query.limit]


@pytest.fixture
def tokens():
    return TokenRegistry(TOKENS)


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def ledger(memory_store):
    return Ledger(memory_store)
