"""Fixed point monetary amounts."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Union

from .exceptions import InvalidAmountError

CENT = Decimal("0.01")

MoneyLike = Union["Money", Decimal, int, str]


@dataclass(frozen=True, slots=True, order=True)
class Money:
    """A decimal amount with cent precision.

    Binary floats are refused outright; amounts carrying more precision than
    a cent raise ``InvalidAmountError`` instead of being rounded.
    """

    amount: Decimal

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", _to_decimal(self.amount))

    @classmethod
    def of(cls, value: MoneyLike) -> "Money":
        if isinstance(value, Money):
            return value
        return cls(value)

    @classmethod
    def zero(cls) -> "Money":
        return cls(Decimal("0.00"))

    def __add__(self, other: "Money") -> "Money":
        if not isinstance(other, Money):
            return NotImplemented
        return Money(self.amount + other.amount)

    def __sub__(self, other: "Money") -> "Money":
        if not isinstance(other, Money):
            return NotImplemented
        return Money(self.amount - other.amount)

    def __neg__(self) -> "Money":
        return Money(-self.amount)

    def __str__(self) -> str:
        return str(self.amount)

    @property
    def is_positive(self) -> bool:
        return self.amount > 0

    @property
    def is_negative(self) -> bool:
        return self.amount < 0

    def require_positive(self, what: str = "Amount") -> "Money":
        if not self.is_positive:
            raise InvalidAmountError(f"{what} must be positive")
        return self

    def require_non_negative(self, what: str = "Amount") -> "Money":
        if self.is_negative:
            raise InvalidAmountError(f"{what} must not be negative")
        return self


def _to_decimal(value: object) -> Decimal:
    if isinstance(value, bool) or isinstance(value, float):
        raise TypeError(f"Money cannot be built from {type(value).__name__}; use Decimal or str")
    if not isinstance(value, Decimal):
        try:
            value = Decimal(str(value).strip())
        except InvalidOperation as exc:
            raise InvalidAmountError(f"Invalid amount: {value!r}") from exc
    if not value.is_finite():
        raise InvalidAmountError(f"Invalid amount: {value!r}")
    try:
        quantized = value.quantize(CENT)
    except InvalidOperation as exc:
        raise InvalidAmountError(f"Amount {value} is out of range") from exc
    if quantized != value:
        raise InvalidAmountError(f"Amount {value} has more precision than a cent")
    return quantized


__all__ = ["CENT", "Money", "MoneyLike"]
