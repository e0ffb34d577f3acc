"""Position sizing and price-level calculations — pure functions, no I/O."""

from __future__ import annotations

from decimal import Decimal

from trading_agent.errors import InvalidInput

MAX_PORTFOLIO_FRACTION = Decimal("0.5")


def calculate_position_size(
    balance: Decimal | float,
    risk_pct: float,
    stop_loss_pct: float,
) -> Decimal:
    """Calculate position size from fixed-fractional risk, capped at half the balance.

    Percentages are in percent units (1.5 means 1.5 %).

    risk_amount = balance * risk_pct / 100
    size = risk_amount / (stop_loss_pct / 100)
    result = min(size, 0.5 * balance)

    Raises InvalidInput if balance < 0 or either percentage <= 0.
    """
    balance = Decimal(str(balance))
    if balance < 0:
        raise InvalidInput(f"balance must be >= 0, got {balance}")
    if risk_pct <= 0:
        raise InvalidInput(f"risk_pct must be > 0, got {risk_pct}")
    if stop_loss_pct <= 0:
        raise InvalidInput(f"stop_loss_pct must be > 0, got {stop_loss_pct}")

    risk_amount = balance * Decimal(str(risk_pct)) / 100
    size = risk_amount / (Decimal(str(stop_loss_pct)) / 100)
    return min(size, balance * MAX_PORTFOLIO_FRACTION)


def calculate_stop_price(
    action: str,
    entry_price: Decimal,
    stop_loss_pct: float,
) -> Decimal:
    """Calculate stop-loss trigger price (*stop_loss_pct* as a fraction).

    buy:  entry * (1 - pct)
    sell: entry * (1 + pct)
    """
    pct = Decimal(str(stop_loss_pct))
    if action == "buy":
        return entry_price * (1 - pct)
    else:
        return entry_price * (1 + pct)


def calculate_take_profit_price(
    action: str,
    entry_price: Decimal,
    take_profit_pct: float,
) -> Decimal:
    """Calculate take-profit target price (*take_profit_pct* as a fraction).

    buy:  entry * (1 + pct)
    sell: entry * (1 - pct)
    """
    pct = Decimal(str(take_profit_pct))
    if action == "buy":
        return entry_price * (1 + pct)
    else:
        return entry_price * (1 - pct)
