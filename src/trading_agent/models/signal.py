"""Signal model — the signal engine's verdict."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Action = Literal["buy", "sell", "hold"]


class Signal(BaseModel):
    """An action/confidence verdict with the reasons that produced it."""

    model_config = ConfigDict(frozen=True)

    action: Action = "hold"
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    reasons: tuple[str, ...] = ()
    target_price: float | None = None
    stop_loss: float | None = None

    @property
    def rationale(self) -> str:
        """Fired-rule phrases in rule order, as one sentence-per-rule string."""
        if not self.reasons:
            return "No rule fired"
        return ". ".join(self.reasons) + "."
