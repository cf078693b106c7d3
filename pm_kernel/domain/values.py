"""
Values -- Currency and Money value objects.

Responsibility:
    Every monetary field of a project (budget, resource cost, task planned
    value, earned value and actual cost) is a ``Money``: a Decimal amount
    that never travels without its ``Currency``.

Architecture position:
    Kernel > Domain -- pure, zero I/O.  Used by the entity records and by
    every engine that sums or compares money.

Invariants enforced:
    - Amounts are Decimal.  Floats are converted through ``str`` so binary
      noise never enters a total.
    - Currency codes are checked against ``CurrencyRegistry``.
    - Sums and differences require both operands in one currency.

Failure modes:
    - InvalidCurrencyError for an unsupported code.
    - CurrencyMismatchError when two currencies meet in one operation.
    - ValueError for an amount that is not a number.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from pm_kernel.domain.currency import CurrencyRegistry
from pm_kernel.exceptions import CurrencyMismatchError, InvalidCurrencyError

_ZERO = Decimal("0")


@dataclass(frozen=True, slots=True)
class Currency:
    """ISO 4217 code, upper-cased and validated on construction."""

    code: str

    def __post_init__(self) -> None:
        code = self.code.strip().upper() if isinstance(self.code, str) else ""
        if not CurrencyRegistry.is_valid(code):
            raise InvalidCurrencyError(str(self.code))
        object.__setattr__(self, "code", code)

    @property
    def decimal_places(self) -> int:
        return CurrencyRegistry.get_decimal_places(self.code)

    @property
    def symbol(self) -> str:
        """Display symbol, e.g. "$" for USD."""
        return CurrencyRegistry.get_symbol(self.code)

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"Currency({self.code!r})"


def _as_currency(currency: Currency | str) -> Currency:
    return currency if isinstance(currency, Currency) else Currency(currency)


@dataclass(frozen=True, slots=True)
class Money:
    """
    An amount in one currency.

    Guarantees:
        - Immutable and hashable; equality compares amount and currency.
        - Sums and differences return new Money in the same currency.

    Non-goals:
        - No currency conversion.
        - No implicit rounding; call ``round()`` for display precision.
    """

    amount: Decimal
    currency: Currency

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            try:
                object.__setattr__(self, "amount", Decimal(str(self.amount)))
            except (InvalidOperation, ValueError) as e:
                raise ValueError(f"Invalid amount: {self.amount!r}") from e
        if isinstance(self.currency, str):
            object.__setattr__(self, "currency", Currency(self.currency))
        elif not isinstance(self.currency, Currency):
            raise TypeError(f"currency must be Currency or str, got {type(self.currency)}")

    @classmethod
    def of(cls, amount: Decimal | str | int, currency: Currency | str) -> Money:
        """Build Money from a Decimal, numeric string or int."""
        return cls(Decimal(str(amount)), _as_currency(currency))

    @classmethod
    def zero(cls, currency: Currency | str) -> Money:
        return cls(_ZERO, _as_currency(currency))

    @property
    def is_negative(self) -> bool:
        return self.amount < _ZERO

    def round(self, rounding: str = ROUND_HALF_UP) -> Money:
        """Round to the currency's minor unit (2 places for USD, 0 for JPY)."""
        places = self.currency.decimal_places
        exponent = Decimal(1).scaleb(-places)
        return Money(self.amount.quantize(exponent, rounding=rounding), self.currency)

    def _same_currency_amount(self, other: Money) -> Decimal:
        if self.currency != other.currency:
            raise CurrencyMismatchError(self.currency.code, other.currency.code)
        return other.amount

    # Arithmetic

    def __add__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return Money(self.amount + self._same_currency_amount(other), self.currency)

    def __sub__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return Money(self.amount - self._same_currency_amount(other), self.currency)

    def __abs__(self) -> Money:
        return Money(abs(self.amount), self.currency)

    def __str__(self) -> str:
        return f"{self.amount} {self.currency.code}"

    def __repr__(self) -> str:
        return f"Money({self.amount!r}, {self.currency!r})"
