"""
Values -- Immutable, self-validating money value objects.

Responsibility:
    Provides Currency and Money, the only representation of monetary
    amounts in the kernel. Money pairs an exact Decimal with its currency
    and is always held at the currency's canonical scale.

Architecture position:
    Kernel > Domain -- pure, zero I/O. Depends only on
    ledger_kernel.domain.currency and ledger_kernel.exceptions.

Invariants enforced:
    - Amounts are Decimal, never float.
    - An amount never carries more precision than its currency allows
      (USD 2, JPY 0, KWD 3). Excess precision is rejected, never rounded.
    - At most MAX_AMOUNT_DIGITS significant digits. Sums and differences
      are computed exactly; a result past that bound raises, never rounds.
    - Arithmetic is defined only between values of the same currency.

Failure modes:
    - InvalidCurrencyError for unknown ISO 4217 codes.
    - InvalidAmountError for float, non-finite or over-precise amounts.
    - CurrencyMismatchError for cross-currency arithmetic.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Context, Decimal, Inexact, InvalidOperation, localcontext

from ledger_kernel.domain.currency import CurrencyRegistry
from ledger_kernel.exceptions import (
    CurrencyMismatchError,
    InvalidAmountError,
    InvalidCurrencyError,
)

MAX_AMOUNT_DIGITS = 38
"""Significant digits an amount may carry at its currency's scale."""

# Arithmetic and rescaling under this context either stay exact or raise.
_EXACT = Context(prec=MAX_AMOUNT_DIGITS, traps=[InvalidOperation, Inexact])


@dataclass(frozen=True, slots=True)
class Currency:
    """
    ISO 4217 currency code value object.

    Guarantees:
        - code is uppercase, stripped and registered in CurrencyRegistry.
    """

    code: str

    def __post_init__(self) -> None:
        normalized = CurrencyRegistry.normalize(self.code)
        if not CurrencyRegistry.is_valid(normalized):
            raise InvalidCurrencyError(str(self.code))
        object.__setattr__(self, "code", normalized)

    @property
    def fraction_digits(self) -> int:
        return CurrencyRegistry.get_fraction_digits(self.code)

    @property
    def minor_unit(self) -> Decimal:
        """Smallest representable amount, e.g. ``0.01`` for USD."""
        return CurrencyRegistry.get_info(self.code).minor_unit

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"Currency({self.code!r})"


def _as_currency(currency: str | Currency) -> Currency:
    if isinstance(currency, Currency):
        return currency
    return Currency(currency)


@dataclass(frozen=True, slots=True)
class Money:
    """
    Monetary amount value object.

    Contract:
        Pairs a Decimal amount with its Currency. Construction rescales the
        amount to the currency's fraction digits when that is exact
        (``10.5`` USD becomes ``10.50``) and raises InvalidAmountError when
        it is not (``10.555`` USD).

    Guarantees:
        - Immutable and hashable.
        - Equal only when amount and currency are both equal.
        - Every arithmetic result is a new Money.
    """

    amount: Decimal
    currency: Currency

    def __post_init__(self) -> None:
        currency = _as_currency(self.currency)
        object.__setattr__(self, "currency", currency)
        object.__setattr__(self, "amount", _canonical_amount(self.amount, currency))

    @classmethod
    def of(cls, amount: Decimal | str | int, currency: str | Currency) -> Money:
        """Create Money from a Decimal, a decimal string or an int."""
        return cls(amount=amount, currency=_as_currency(currency))

    @classmethod
    def zero(cls, currency: str | Currency) -> Money:
        """Additive identity in the given currency, at its canonical scale."""
        return cls(amount=Decimal(0), currency=_as_currency(currency))

    @property
    def is_zero(self) -> bool:
        return self.amount.is_zero()

    @property
    def is_positive(self) -> bool:
        return self.amount > 0

    @property
    def is_negative(self) -> bool:
        return self.amount < 0

    def add(self, other: Money) -> Money:
        """Return the sum. Raises CurrencyMismatchError across currencies."""
        self._require_same_currency(other)
        return Money(
            amount=_exact_sum(self.amount, other.amount, self.currency),
            currency=self.currency,
        )

    def subtract(self, other: Money) -> Money:
        self._require_same_currency(other)
        return Money(
            amount=_exact_sum(self.amount, other.amount.copy_negate(), self.currency),
            currency=self.currency,
        )

    def negate(self) -> Money:
        return Money(amount=self.amount.copy_negate(), currency=self.currency)

    def _require_same_currency(self, other: Money) -> None:
        if not isinstance(other, Money):
            raise TypeError(f"Expected Money, got {type(other).__name__}")
        if self.currency != other.currency:
            raise CurrencyMismatchError(self.currency.code, other.currency.code)

    def __add__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return self.subtract(other)

    def __neg__(self) -> Money:
        return self.negate()

    def __str__(self) -> str:
        return f"{self.amount} {self.currency.code}"

    def __repr__(self) -> str:
        return f"Money({str(self.amount)!r}, {self.currency.code!r})"


def _canonical_amount(raw: object, currency: Currency) -> Decimal:
    """Convert ``raw`` to a Decimal at the currency's scale without rounding."""
    if isinstance(raw, bool) or isinstance(raw, float):
        # floats cannot represent most decimal fractions exactly
        raise InvalidAmountError(repr(raw), currency.code, "must be Decimal, str or int")
    if isinstance(raw, int):
        amount = Decimal(raw)
    elif isinstance(raw, str):
        try:
            amount = Decimal(raw.strip())
        except InvalidOperation:
            raise InvalidAmountError(repr(raw), currency.code, "not a decimal number") from None
    elif isinstance(raw, Decimal):
        amount = raw
    else:
        raise InvalidAmountError(repr(raw), currency.code, "must be Decimal, str or int")

    if not amount.is_finite():
        raise InvalidAmountError(str(amount), currency.code, "must be finite")

    try:
        with localcontext(_EXACT):
            scaled = amount.quantize(currency.minor_unit)
    except Inexact:
        raise InvalidAmountError(
            str(amount),
            currency.code,
            f"more than {currency.fraction_digits} fraction digits",
        ) from None
    except InvalidOperation:
        raise InvalidAmountError(
            str(amount), currency.code, f"more than {MAX_AMOUNT_DIGITS} significant digits"
        ) from None
    if scaled.is_zero():
        # -0.00 and 0.00 are the same amount; keep a single representation
        scaled = scaled.copy_abs()
    return scaled


def _exact_sum(a: Decimal, b: Decimal, currency: Currency) -> Decimal:
    try:
        with localcontext(_EXACT):
            return a + b
    except Inexact:
        raise InvalidAmountError(
            f"{a} + {b}", currency.code, f"more than {MAX_AMOUNT_DIGITS} significant digits"
        ) from None
