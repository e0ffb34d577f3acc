"""Token registry — maps instrument symbols to the token addresses a venue trades."""

from __future__ import annotations

from trading_agent.errors import InvalidInput, UnknownInstrument


class TokenRegistry:
    def __init__(self, addresses: dict[str, str]) -> None:
        self._addresses = {k.upper(): v for k, v in addresses.items()}

    def address(self, token: str) -> str:
        try:
            return self._addresses[token.upper()]
        except KeyError:
            raise UnknownInstrument(f"no address registered for token {token!r}") from None

    @staticmethod
    def split_symbol(symbol: str) -> tuple[str, str]:
        """Split "ETH/USDC" into ("ETH", "USDC")."""
        base, sep, quote = symbol.partition("/")
        if not sep or not base or not quote:
            raise UnknownInstrument(f"instrument {symbol!r} is not of the form BASE/QUOTE")
        return base.upper(), quote.upper()

    def resolve(self, symbol: str, action: str) -> tuple[str, str]:
        """Return (token_in, token_out) addresses for trading *symbol*.

        buy spends the quote asset for the base asset; sell is the reverse.
        """
        base, quote = self.split_symbol(symbol)
        base_addr, quote_addr = self.address(base), self.address(quote)
        if action == "buy":
            return quote_addr, base_addr
        if action == "sell":
            return base_addr, quote_addr
        raise InvalidInput(f"cannot resolve tokens for action {action!r}")
