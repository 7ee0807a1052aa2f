"""Fixed-point monetary values bound to a currency"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from functools import total_ordering
from typing import Union

from backoffice.domain.exceptions import (
    CurrencyMismatchError,
    InvalidArgumentError,
    UnsupportedCurrencyError,
)
from backoffice.domain.rules import CURRENCY_MINOR_UNITS

AmountLike = Union[Decimal, int, str]


def minor_unit_exponent(currency: str) -> Decimal:
    """Quantization exponent for a currency, e.g. Decimal('0.01') for GHS"""
    try:
        places = CURRENCY_MINOR_UNITS[currency]
    except KeyError:
        raise UnsupportedCurrencyError(f"Unsupported currency: {currency!r}")
    return Decimal(1).scaleb(-places)


def quantize_half_up(value: Decimal, currency: str) -> Decimal:
    """Round a raw decimal to the currency's minor unit, halves away from zero"""
    return value.quantize(minor_unit_exponent(currency), rounding=ROUND_HALF_UP)


def _to_decimal(value: AmountLike) -> Decimal:
    # bool is an int subclass; floats would carry binary rounding error
    if isinstance(value, (bool, float)):
        raise InvalidArgumentError(f"Money amounts must be Decimal, int or str, got {type(value).__name__}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, str)):
        try:
            result = Decimal(value)
        except InvalidOperation:
            raise InvalidArgumentError(f"Not a decimal amount: {value!r}")
    else:
        raise InvalidArgumentError(f"Money amounts must be Decimal, int or str, got {type(value).__name__}")
    if not result.is_finite():
        raise InvalidArgumentError(f"Money amount must be finite: {value!r}")
    return result


@total_ordering
@dataclass(frozen=True)
class Money:
    """
    A decimal amount in a specific currency.

    The amount is stored at the currency's minor-unit precision; values with
    more precision than the currency allows are rejected rather than rounded,
    so rounding only ever happens where a calculator asks for it.
    """

    amount: Decimal
    currency: str

    def __post_init__(self) -> None:
        currency = self.currency.upper() if isinstance(self.currency, str) else self.currency
        exponent = minor_unit_exponent(currency)
        amount = _to_decimal(self.amount)
        try:
            quantized = amount.quantize(exponent)
        except InvalidOperation:
            raise InvalidArgumentError(f"Amount out of range: {amount}")
        if quantized != amount:
            raise InvalidArgumentError(
                f"{amount} has more precision than {currency} allows ({exponent})"
            )
        object.__setattr__(self, "amount", quantized)
        object.__setattr__(self, "currency", currency)

    @classmethod
    def of(cls, amount: AmountLike, currency: str) -> "Money":
        return cls(amount=amount, currency=currency)

    @classmethod
    def zero(cls, currency: str) -> "Money":
        return cls(amount=Decimal(0), currency=currency)

    @classmethod
    def from_minor_units(cls, minor_units: int, currency: str) -> "Money":
        """Build from an integer count of the smallest unit (pesewas, cents)"""
        if isinstance(minor_units, bool) or not isinstance(minor_units, int):
            raise InvalidArgumentError("Minor units must be an integer")
        exponent = minor_unit_exponent(currency.upper())
        return cls(amount=Decimal(minor_units) * exponent, currency=currency)

    @property
    def minor_units(self) -> int:
        return int(self.amount.scaleb(CURRENCY_MINOR_UNITS[self.currency]))

    def is_negative(self) -> bool:
        return self.amount < 0

    def _check_currency(self, other: "Money") -> None:
        if not isinstance(other, Money):
            raise TypeError(f"Cannot combine Money with {type(other).__name__}")
        if other.currency != self.currency:
            raise CurrencyMismatchError(
                f"Currency mismatch: {self.currency} vs {other.currency}"
            )

    def __add__(self, other: "Money") -> "Money":
        self._check_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: "Money") -> "Money":
        self._check_currency(other)
        return Money(self.amount - other.amount, self.currency)

    def __lt__(self, other: "Money") -> bool:
        self._check_currency(other)
        return self.amount < other.amount

    def __str__(self) -> str:
        return f"{self.currency} {self.amount}"
