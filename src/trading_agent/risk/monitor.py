"""Open-trade review and risk profile selection."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Literal

from trading_agent.errors import InvalidInput

Recommendation = Literal["hold", "close", "partial_close", "review"]


@dataclass(frozen=True)
class TradeReview:
    """Result of reviewing an open trade against its exit levels."""

    recommendation: Recommendation
    reason: str
    pnl_pct: float


@dataclass(frozen=True)
class RiskProfile:
    name: str
    risk_level: Literal["low", "medium", "high"]
    max_position_fraction: float
    stop_loss: float
    take_profit: float
    risk_per_trade: float


PROFILES: dict[str, RiskProfile] = {
    "conservative": RiskProfile("conservative", "low", 0.10, 0.05, 0.10, 0.01),
    "balanced": RiskProfile("balanced", "medium", 0.25, 0.10, 0.20, 0.015),
    "aggressive": RiskProfile("aggressive", "high", 0.50, 0.15, 0.30, 0.03),
}

# Accounts below this balance get position and per-trade risk caps
SMALL_ACCOUNT_BALANCE = 1000.0


def monitor_trade(
    entry_price: float,
    current_price: float,
    stop_loss: float | None = None,
    take_profit: float | None = None,
) -> TradeReview:
    """Recommend an action for an open long trade.

    Priority: stop loss -> take profit -> partial profit above +20 %
    -> review below -10 % -> hold.
    """
    if entry_price <= 0:
        raise InvalidInput(f"entry_price must be > 0, got {entry_price}")
    pnl_pct = (current_price - entry_price) / entry_price * 100

    if stop_loss is not None and current_price <= stop_loss:
        return TradeReview("close", "Stop loss triggered", pnl_pct)
    if take_profit is not None and current_price >= take_profit:
        return TradeReview("close", "Take profit target reached", pnl_pct)
    if pnl_pct > 20:
        return TradeReview("partial_close", "Consider taking partial profits", pnl_pct)
    if pnl_pct < -10:
        return TradeReview("review", "Trade showing significant loss, review strategy", pnl_pct)
    return TradeReview("hold", "Trade within normal parameters", pnl_pct)


def select_profile(
    volatility: Literal["low", "medium", "high"],
    balance: float,
    risk_tolerance: Literal["conservative", "moderate", "aggressive"] = "moderate",
) -> RiskProfile:
    """Pick a risk profile from tolerance and market volatility.

    High volatility steps one profile down; small accounts are capped at
    30 % position size and 2 % risk per trade.
    """
    ladder = ["conservative", "balanced", "aggressive"]
    index = {"conservative": 0, "moderate": 1, "aggressive": 2}.get(risk_tolerance, 1)
    if volatility == "high":
        index = max(index - 1, 0)
    profile = PROFILES[ladder[index]]

    if balance < SMALL_ACCOUNT_BALANCE:
        profile = replace(
            profile,
            max_position_fraction=min(profile.max_position_fraction, 0.3),
            risk_per_trade=min(profile.risk_per_trade, 0.02),
        )
    return profile
