"""ExecutionPipeline — the four-stage trade state machine.

    analyze ──> decide ──> execute ──> record
                  │                      ▲
                  └──── skipped ─────────┘

Stages run strictly in order for one instrument. Decide may exit early
with a skip (hold or low confidence); Execute always ends in an
ExecutionResult, converting capability errors into a failed result. Only a
market-data failure in Analyze escapes, as CapabilityFailure, for the
caller to contain.

Ledger writes: a decide-stage skip appends an insight record, every
execute outcome appends a decision record before execute() returns.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import ROUND_DOWN, Decimal

import structlog

from trading_agent.config.schema import ExecutionConfig, SignalConfig
from trading_agent.errors import CapabilityFailure, InvalidInput
from trading_agent.ledger import Ledger
from trading_agent.models import (
    Decision,
    ExecutionResult,
    IndicatorSnapshot,
    PipelineOutcome,
    Signal,
)
from trading_agent.pipeline.capabilities import MarketDataSource, TradingVenue
from trading_agent.pipeline.tokens import TokenRegistry
from trading_agent.risk.sizing import calculate_position_size
from trading_agent.signals import score_snapshot

log = structlog.get_logger("pipeline")

# Amounts are sent with six decimal places
AMOUNT_QUANTUM = Decimal("0.000001")


@dataclass(frozen=True)
class Analysis:
    symbol: str
    timeframe: str
    snapshot: IndicatorSnapshot
    signal: Signal


@dataclass(frozen=True)
class Skip:
    """An intentional no-trade exit from the Decide stage."""

    reason: str


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ExecutionPipeline:
    """Runs one instrument through analyze, decide, execute and record."""

    def __init__(
        self,
        market_data: MarketDataSource,
        venue: TradingVenue,
        ledger: Ledger,
        tokens: TokenRegistry,
        *,
        execution: ExecutionConfig | None = None,
        signals: SignalConfig | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.market_data = market_data
        self.venue = venue
        self.ledger = ledger
        self.tokens = tokens
        self.config = execution or ExecutionConfig()
        self.signal_params = signals or SignalConfig()
        self._clock = clock

    async def run(self, symbol: str, timeframe: str = "1h") -> PipelineOutcome:
        """Evaluate *symbol* end to end. Raises CapabilityFailure from analyze only."""
        analysis = await self.analyze(symbol, timeframe)
        decided = await self.decide(analysis)
        if isinstance(decided, Skip):
            insight = self.ledger.record_insight(
                symbol, analysis.signal.rationale, analysis.signal.confidence,
            )
            await self.ledger.try_append(insight)
            return self.record(analysis, decided)
        result = await self.execute(decided)
        return self.record(analysis, decided, result)

    # ── Stages ────────────────────────────────────────────────

    async def analyze(self, symbol: str, timeframe: str) -> Analysis:
        try:
            snapshot = await self.market_data.get_market_data(symbol, timeframe)
        except Exception as exc:
            raise CapabilityFailure("market_data", f"{symbol}: {exc}") from exc

        signal = score_snapshot(snapshot, self.signal_params)
        log.debug(
            "market_analyzed",
            instrument=symbol,
            action=signal.action,
            confidence=signal.confidence,
            rationale=signal.rationale,
        )
        return Analysis(symbol=symbol, timeframe=timeframe, snapshot=snapshot, signal=signal)

    async def decide(self, analysis: Analysis) -> Decision | Skip:
        signal = analysis.signal
        if signal.action == "hold":
            return Skip(f"Explicit hold: {signal.rationale}")
        if signal.confidence < self.config.min_confidence:
            return Skip(f"Low confidence ({signal.confidence})")

        price = analysis.snapshot.price
        if signal.action == "sell" and not price:
            # Sells spend the base asset, so the size must be converted at a known price
            return Skip("price unavailable for sell sizing")

        try:
            portfolio = await self.venue.get_portfolio_balance()
        except Exception as exc:
            return Skip(f"portfolio balance unavailable: {exc}")

        stop_loss_pct = (
            self.config.buy_stop_loss_pct if signal.action == "buy"
            else self.config.sell_stop_loss_pct
        )
        size = calculate_position_size(portfolio.total_balance, self.config.risk_pct, stop_loss_pct)
        if size <= 0:
            return Skip("insufficient balance")

        return Decision(
            symbol=analysis.symbol,
            action=signal.action,
            position_size=size,
            rationale=signal.rationale,
            confidence=signal.confidence,
            stop_loss_pct=stop_loss_pct,
            entry_price=price or None,
            target_price=signal.target_price,
            stop_loss=signal.stop_loss,
            ts=self._clock(),
        )

    async def execute(self, decision: Decision) -> ExecutionResult:
        """Quote, guard on price impact, submit. Never raises."""
        try:
            result = await self._quote_and_submit(decision)
        except Exception as exc:
            result = ExecutionResult(executed=False, reason=f"execution failed: {exc}")

        await self.ledger.try_append(self.ledger.record_decision(decision, result))
        return result

    def record(
        self,
        analysis: Analysis,
        decided: Decision | Skip,
        result: ExecutionResult | None = None,
    ) -> PipelineOutcome:
        """Normalise the prior stage's outcome into success / skipped."""
        if isinstance(decided, Skip):
            log.info(
                "trade_skipped",
                instrument=analysis.symbol,
                stage="decide",
                reason=decided.reason,
                confidence=analysis.signal.confidence,
            )
            return PipelineOutcome(
                symbol=analysis.symbol,
                status="skipped",
                message=decided.reason,
                stage="decide",
                signal=analysis.signal,
            )

        if result is not None and result.executed:
            log.info(
                "trade_executed",
                instrument=decided.symbol,
                action=decided.action,
                tx_hash=result.tx_hash,
                amount_in=str(result.amount_in),
                estimated_amount_out=str(result.estimated_amount_out),
                price_impact=result.price_impact,
            )
            return PipelineOutcome(
                symbol=decided.symbol,
                status="success",
                message=f"Trade executed with tx hash {result.tx_hash}",
                stage="execute",
                signal=analysis.signal,
                decision=decided,
                execution=result,
            )

        reason = (result.reason if result is not None else None) or "Unknown reason"
        log.warning(
            "trade_skipped",
            instrument=decided.symbol,
            stage="execute",
            action=decided.action,
            reason=reason,
        )
        return PipelineOutcome(
            symbol=decided.symbol,
            status="skipped",
            message=reason,
            stage="execute",
            signal=analysis.signal,
            decision=decided,
            execution=result,
        )

    # ── Helpers ───────────────────────────────────────────────

    def amount_in(self, decision: Decision) -> Decimal:
        """Amount of token_in to spend, after the fee buffer.

        Position size is in quote-currency units. A buy spends the quote
        asset, so it is used as is; a sell spends the base asset, so it is
        converted at the decision's entry price.
        """
        amount = decision.position_size * Decimal(str(self.config.fee_buffer))
        if decision.action == "sell":
            if decision.entry_price is None:
                raise InvalidInput(f"sell on {decision.symbol} has no entry price")
            amount = amount / Decimal(str(decision.entry_price))
        return amount.quantize(AMOUNT_QUANTUM, rounding=ROUND_DOWN)

    async def _quote_and_submit(self, decision: Decision) -> ExecutionResult:
        token_in, token_out = self.tokens.resolve(decision.symbol, decision.action)
        amount_in = self.amount_in(decision)

        quote = await self.venue.get_trade_quote(token_in, token_out, amount_in)
        if quote.price_impact >= self.config.max_price_impact_pct:
            return ExecutionResult(
                executed=False,
                token_in=token_in,
                token_out=token_out,
                amount_in=amount_in,
                estimated_amount_out=quote.amount_out,
                price_impact=quote.price_impact,
                reason=f"price impact too high ({quote.price_impact}%)",
            )

        min_amount_out = (
            quote.amount_out * (1 - Decimal(str(self.config.slippage_tolerance)))
        ).quantize(AMOUNT_QUANTUM, rounding=ROUND_DOWN)
        tx_hash = await self.venue.execute_trade(token_in, token_out, amount_in, min_amount_out)
        return ExecutionResult(
            executed=True,
            tx_hash=tx_hash,
            token_in=token_in,
            token_out=token_out,
            amount_in=amount_in,
            estimated_amount_out=quote.amount_out,
            min_amount_out=min_amount_out,
            price_impact=quote.price_impact,
        )
