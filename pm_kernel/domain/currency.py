"""Currency -- ISO 4217 registry for project budgets and cost fields."""

from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True)
class CurrencyInfo:
    """Information about a single ISO 4217 currency."""

    code: str
    decimal_places: int
    name: str
    symbol: str


class CurrencyRegistry:
    """Registry of the ISO 4217 currencies a project may be budgeted in."""

    _CURRENCIES: ClassVar[dict[str, CurrencyInfo]] = {
        "USD": CurrencyInfo("USD", 2, "US Dollar", "$"),
        "EUR": CurrencyInfo("EUR", 2, "Euro", "€"),
        "GBP": CurrencyInfo("GBP", 2, "Pound Sterling", "£"),
        "CHF": CurrencyInfo("CHF", 2, "Swiss Franc", "CHF"),
        "CAD": CurrencyInfo("CAD", 2, "Canadian Dollar", "CA$"),
        "AUD": CurrencyInfo("AUD", 2, "Australian Dollar", "A$"),
        "NZD": CurrencyInfo("NZD", 2, "New Zealand Dollar", "NZ$"),
        "SEK": CurrencyInfo("SEK", 2, "Swedish Krona", "kr"),
        "NOK": CurrencyInfo("NOK", 2, "Norwegian Krone", "kr"),
        "DKK": CurrencyInfo("DKK", 2, "Danish Krone", "kr"),
        "INR": CurrencyInfo("INR", 2, "Indian Rupee", "₹"),
        "SGD": CurrencyInfo("SGD", 2, "Singapore Dollar", "S$"),
        "JPY": CurrencyInfo("JPY", 0, "Japanese Yen", "¥"),
        "KRW": CurrencyInfo("KRW", 0, "South Korean Won", "₩"),
    }

    # Display precision for codes outside the registry
    DEFAULT_DECIMAL_PLACES: ClassVar[int] = 2

    @classmethod
    def is_valid(cls, code: str) -> bool:
        """Check if a currency code is a supported ISO 4217 code."""
        if not code or not isinstance(code, str):
            return False
        return code.upper().strip() in cls._CURRENCIES

    @classmethod
    def get_info(cls, code: str) -> CurrencyInfo | None:
        """Get currency information by code."""
        if not code or not isinstance(code, str):
            return None
        return cls._CURRENCIES.get(code.upper().strip())

    @classmethod
    def get_decimal_places(cls, code: str) -> int:
        """Get decimal places for a currency."""
        info = cls.get_info(code)
        return info.decimal_places if info else cls.DEFAULT_DECIMAL_PLACES

    @classmethod
    def get_symbol(cls, code: str) -> str:
        """Get the display symbol, falling back to the code itself."""
        info = cls.get_info(code)
        return info.symbol if info else code

