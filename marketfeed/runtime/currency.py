"""
Currency code canonicalization.

Venues name some currencies differently from the rest of the market (XBT for
bitcoin, BCC for bitcoin cash). CurrencyCodeMapper uppercases venue codes
and applies an alias table so symbols line up across venues.
"""

from typing import Dict, Mapping, Optional

DEFAULT_COMMON_CURRENCIES: Dict[str, str] = {
    "XBT": "BTC",
    "BCC": "BCH",
    "BCHABC": "BCH",
    "BCHSV": "BSV",
    "DRK": "DASH",
}


class CurrencyCodeMapper:
    """
    Maps venue currency names to canonical codes.

    The mapper is a pure function object: calling it never mutates state.

    Example:
        >>> mapper = CurrencyCodeMapper()
        >>> mapper("xbt")
        'BTC'
        >>> mapper("USD")
        'USD'
    """

    def __init__(self, aliases: Optional[Mapping[str, str]] = None):
        """
        Initialize the mapper.

        Args:
            aliases: Venue code -> canonical code. Defaults to the common
                aliases table. Keys are matched case-insensitively.
        """
        source = DEFAULT_COMMON_CURRENCIES if aliases is None else aliases
        self._aliases = {key.upper(): value.upper() for key, value in source.items()}

    def __call__(self, code: str) -> str:
        upper = code.strip().upper()
        return self._aliases.get(upper, upper)

    def __repr__(self) -> str:
        return f"CurrencyCodeMapper(aliases={len(self._aliases)})"
