from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal, InvalidOperation
from enum import StrEnum

from paybridge.domain.exceptions import InvalidMoneyError

MAX_AMOUNT = Decimal("100000000")
CENTS = Decimal("0.01")


class Currency(StrEnum):
    """Supported ISO 4217 currency codes."""

    NGN = "NGN"
    USD = "USD"
    GBP = "GBP"
    EUR = "EUR"

    @property
    def symbol(self) -> str:
        return _SYMBOLS[self]


_SYMBOLS = {
    Currency.NGN: "₦",
    Currency.USD: "$",
    Currency.GBP: "£",
    Currency.EUR: "€",
}


@dataclass(frozen=True, slots=True)
class Money:
    """Monetary value with a currency.

    Invariants (checked on every construction, including arithmetic):
      - amount is quantized to 2 decimal places (half-up)
      - 0 < amount <= MAX_AMOUNT
      - currency is one of Currency

    Equality is value equality on (amount, currency), so 1000 NGN never
    equals 1000 USD.
    """

    amount: Decimal
    currency: Currency = Currency.NGN

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", _quantize(self.amount))
        object.__setattr__(self, "currency", _normalize_currency(self.currency))

        if self.amount <= 0:
            raise InvalidMoneyError("Amount must be greater than zero", "AMOUNT_NOT_POSITIVE")

        if self.amount > MAX_AMOUNT:
            raise InvalidMoneyError("Amount exceeds maximum allowed value", "AMOUNT_TOO_LARGE")

    @classmethod
    def create(cls, amount: Decimal | int | float | str, currency: Currency | str = "NGN") -> Money:
        """Create Money from any numeric-ish input.

        Floats are converted through their shortest repr so that
        ``Money.create(100.004)`` becomes ``100.00`` rather than carrying
        binary noise.

        Raises:
            InvalidMoneyError: If the amount or currency is invalid.
        """
        return cls(amount=_to_decimal(amount), currency=_normalize_currency(currency))

    @classmethod
    def from_minor_units(
        cls, units: int, currency: Currency | str = "NGN", decimals: int = 2
    ) -> Money:
        """Build Money from a provider minor-unit amount (kobo, cents)."""
        return cls.create(Decimal(units).scaleb(-decimals), currency)

    def to_minor_units(self, decimals: int = 2) -> int:
        """Convert to the smallest currency unit (e.g. kobo, cents)."""
        return int(self.amount.scaleb(decimals).to_integral_value(rounding=ROUND_DOWN))

    def add(self, other: Money) -> Money:
        self._ensure_same_currency(other, "add")
        return Money(self.amount + other.amount, self.currency)

    def subtract(self, other: Money) -> Money:
        self._ensure_same_currency(other, "subtract")
        result = self.amount - other.amount
        if result <= 0:
            raise InvalidMoneyError(
                "Cannot subtract to zero or negative amount", "NEGATIVE_RESULT"
            )
        return Money(result, self.currency)

    def multiply_by(self, factor: Decimal | int | str) -> Money:
        factor = _to_decimal(factor)
        if factor <= 0:
            raise InvalidMoneyError(
                "Cannot multiply by zero or negative factor", "INVALID_FACTOR"
            )
        return Money(self.amount * factor, self.currency)

    def __add__(self, other: Money) -> Money:
        return self.add(other)

    def __sub__(self, other: Money) -> Money:
        return self.subtract(other)

    def __lt__(self, other: Money) -> bool:
        self._ensure_same_currency(other, "compare")
        return self.amount < other.amount

    def __le__(self, other: Money) -> bool:
        self._ensure_same_currency(other, "compare")
        return self.amount <= other.amount

    def __gt__(self, other: Money) -> bool:
        self._ensure_same_currency(other, "compare")
        return self.amount > other.amount

    def __ge__(self, other: Money) -> bool:
        self._ensure_same_currency(other, "compare")
        return self.amount >= other.amount

    def __str__(self) -> str:
        return f"{self.currency.symbol}{self.amount:,.2f}"

    def _ensure_same_currency(self, other: Money, operation: str) -> None:
        if self.currency != other.currency:
            raise InvalidMoneyError(
                f"Cannot {operation} money with different currencies "
                f"({self.currency} vs {other.currency})",
                "CURRENCY_MISMATCH",
            )


def _to_decimal(value: Decimal | int | float | str) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise InvalidMoneyError(f"Amount is not a number: {value!r}", "INVALID_AMOUNT")
    try:
        return Decimal(str(value))
    except InvalidOperation as e:
        raise InvalidMoneyError(f"Amount is not a number: {value!r}", "INVALID_AMOUNT") from e


def _quantize(amount: Decimal) -> Decimal:
    amount = _to_decimal(amount)
    if not amount.is_finite():
        raise InvalidMoneyError(f"Amount is not a finite number: {amount}", "INVALID_AMOUNT")
    try:
        return amount.quantize(CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        # More digits than the decimal context can hold at 2 places.
        if amount > 0:
            raise InvalidMoneyError(
                "Amount exceeds maximum allowed value", "AMOUNT_TOO_LARGE"
            ) from e
        raise InvalidMoneyError("Amount must be greater than zero", "AMOUNT_NOT_POSITIVE") from e


def _normalize_currency(currency: Currency | str | None) -> Currency:
    if isinstance(currency, Currency):
        return currency
    if currency is None or not str(currency).strip():
        raise InvalidMoneyError("Currency is required", "CURRENCY_REQUIRED")
    try:
        return Currency(str(currency).strip().upper())
    except ValueError as e:
        raise InvalidMoneyError(
            f"Currency '{currency}' is not supported", "UNSUPPORTED_CURRENCY"
        ) from e
