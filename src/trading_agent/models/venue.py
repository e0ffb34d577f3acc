"""Typed responses from the trading venue capabilities."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class PortfolioBalance(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_balance: Decimal = Field(ge=0)


class TradeQuote(BaseModel):
    """Quote for swapping *amount_in* of one token into another."""

    model_config = ConfigDict(frozen=True)

    amount_out: Decimal = Field(ge=0)
    price_impact: float  # percent
