"""Scheduler — background rotation loop with cooldown, spacing and error containment.

States: Stopped (initial/terminal) and Running. start() moves to Running and
launches one asyncio task; stop() moves back to Stopped and lets the loop
observe the flag at the top of the next cycle or instrument. Sleeps wake
early on stop(), so shutdown waits for at most the in-flight external call.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass, field

import structlog

from trading_agent.config.schema import SchedulerConfig
from trading_agent.errors import AlreadyRunning, NotRunning, StoreUnavailable
from trading_agent.ledger import Ledger
from trading_agent.models import PipelineOutcome
from trading_agent.pipeline import ExecutionPipeline

log = structlog.get_logger("scheduler")


@dataclass
class SchedulerState:
    """Mutable loop state. Created by start(), owned by the loop, dropped by stop()."""

    instruments: list[str]
    cooldown_s: float
    inter_call_spacing_s: float
    cycle_spacing_s: float
    active: bool = True
    # instrument -> epoch seconds of its last executed trade
    last_trade: dict[str, float] = field(default_factory=dict)
    cycles: int = 0


class Scheduler:
    def __init__(
        self,
        pipeline: ExecutionPipeline,
        config: SchedulerConfig | None = None,
        *,
        ledger: Ledger | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.pipeline = pipeline
        self.ledger = ledger or pipeline.ledger
        self.config = config or SchedulerConfig()
        self._clock = clock
        self._state: SchedulerState | None = None
        self._task: asyncio.Task | None = None
        self._wakeup: asyncio.Event | None = None

    @property
    def running(self) -> bool:
        return self._state is not None and self._state.active

    def new_state(self) -> SchedulerState:
        return SchedulerState(
            instruments=list(self.config.instruments),
            cooldown_s=self.config.cooldown_s,
            inter_call_spacing_s=self.config.inter_call_spacing_s,
            cycle_spacing_s=self.config.cycle_spacing_s,
        )

    # ── Lifecycle ─────────────────────────────────────────────

    async def start(self) -> None:
        """Stopped -> Running. Raises AlreadyRunning when already running."""
        if self.running:
            raise AlreadyRunning("scheduler is already running")
        self._state = self.new_state()
        self._wakeup = asyncio.Event()
        self._task = asyncio.create_task(self._run_loop(self._state))
        log.info("scheduler_started", instruments=self._state.instruments)

    async def stop(self) -> None:
        """Running -> Stopped. Calling it while stopped is a no-op."""
        if self._state is None:
            log.debug("scheduler_already_stopped")
            return
        self._state.active = False
        if self._wakeup is not None:
            self._wakeup.set()
        task, self._task = self._task, None
        if task is not None and task is not asyncio.current_task():
            await task
        self._state = None
        self._wakeup = None
        log.info("scheduler_stopped")

    async def wait(self) -> None:
        """Block until the loop exits. Raises NotRunning if never started."""
        if self._task is None:
            raise NotRunning("scheduler is not running")
        await asyncio.shield(self._task)

    # ── Loop ──────────────────────────────────────────────────

    async def _run_loop(self, state: SchedulerState) -> None:
        try:
            await self.restore_cooldowns(state)
        except Exception:
            log.exception("cooldown_restore_error")

        while state.active:
            try:
                await self.run_cycle(state)
            except Exception:
                log.exception("cycle_error", backoff_s=self.config.error_backoff_s)
                await self._pause(state, self.config.error_backoff_s)
                continue
            await self._pause(state, state.cycle_spacing_s)

    async def restore_cooldowns(self, state: SchedulerState) -> None:
        """Seed last_trade from the newest executed decision per instrument in the ledger."""
        for symbol in state.instruments:
            try:
                history = await self.ledger.trading_history(symbol)
            except StoreUnavailable as exc:
                log.warning("cooldown_restore_failed", instrument=symbol, error=str(exc))
                continue
            executed = [r.ts.timestamp() for r in history if r.executed]
            if executed:
                state.last_trade[symbol] = max(executed)
                log.info("cooldown_restored", instrument=symbol, last_trade=max(executed))

    async def run_cycle(self, state: SchedulerState) -> None:
        """One rotation over all instruments, spaced by the inter-call delay."""
        state.cycles += 1
        last = len(state.instruments) - 1
        for i, symbol in enumerate(state.instruments):
            if not state.active:
                break
            await self.evaluate_instrument(state, symbol)
            # Cycle spacing follows the last instrument instead
            if i < last:
                await self._pause(state, state.inter_call_spacing_s)

    async def evaluate_instrument(self, state: SchedulerState, symbol: str) -> PipelineOutcome | None:
        """Run the pipeline for *symbol* unless it is cooling down.

        Returns the outcome, or None when skipped for cooldown or on failure.
        """
        now = self._clock()
        last = state.last_trade.get(symbol)
        if last is not None and now - last < state.cooldown_s:
            log.info(
                "instrument_cooling_down",
                instrument=symbol,
                remaining_s=round(state.cooldown_s - (now - last), 1),
            )
            return None

        try:
            outcome = await self.pipeline.run(symbol, self.config.timeframe)
        except Exception as exc:
            log.error("instrument_error", instrument=symbol, error=str(exc), exc_info=True)
            return None

        # The pipeline has already appended its ledger record at this point
        if outcome.executed:
            state.last_trade[symbol] = self._clock()
        return outcome

    async def _pause(self, state: SchedulerState, seconds: float) -> None:
        """Sleep for *seconds*, waking early if stop() is called."""
        if seconds <= 0 or not state.active:
            return
        if self._wakeup is None:
            await asyncio.sleep(seconds)
            return
        try:
            await asyncio.wait_for(self._wakeup.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            pass
