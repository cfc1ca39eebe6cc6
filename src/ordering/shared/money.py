"""Money value object for monetary amounts with currency.

Amounts are stored as floats but every arithmetic operation is carried out
in ``Decimal`` so that sums and products of prices stay exact to the cent.
"""

from decimal import Decimal

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Float, String

from ordering.domain import ordering
from ordering.errors import CurrencyMismatchError, InvalidArgumentError

DEFAULT_CURRENCY = "USD"

VALID_CURRENCIES = frozenset(
    {
        "USD",
        "EUR",
        "GBP",
        "JPY",
        "CAD",
        "AUD",
        "CHF",
        "CNY",
        "INR",
        "MXN",
        "BRL",
        "KRW",
        "SGD",
        "HKD",
        "NOK",
        "SEK",
        "DKK",
        "NZD",
        "ZAR",
        "TWD",
    }
)


def _dec(value) -> Decimal:
    return Decimal(str(value))


@ordering.value_object
class Money:
    """Value object representing a monetary amount with currency."""

    amount: Float(default=0.0)
    currency: String(max_length=3, default=DEFAULT_CURRENCY)

    @invariant.post
    def currency_must_be_valid_iso_4217(self):
        if self.currency not in VALID_CURRENCIES:
            raise ValidationError({"currency": [f"Unsupported currency: {self.currency}"]})

    # -------------------------------------------------------------------
    # Factories
    # -------------------------------------------------------------------
    @classmethod
    def of(cls, amount, currency: str = DEFAULT_CURRENCY) -> "Money":
        """Build a Money, reporting bad input as an ``InvalidArgumentError``."""
        try:
            return cls(amount=float(_dec(amount)), currency=currency)
        except (ValidationError, ArithmeticError, ValueError) as exc:
            messages = exc.messages if isinstance(exc, ValidationError) else {"amount": [str(exc)]}
            raise InvalidArgumentError(messages) from exc

    @classmethod
    def zero(cls, currency: str = DEFAULT_CURRENCY) -> "Money":
        return cls(amount=0.0, currency=currency)

    # -------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------
    def _assert_same_currency(self, other: "Money") -> None:
        if self.currency != other.currency:
            raise CurrencyMismatchError(
                {"currency": [f"Cannot combine {self.currency} with {other.currency}"]}
            )

    def add(self, other: "Money") -> "Money":
        self._assert_same_currency(other)
        return Money(amount=float(_dec(self.amount) + _dec(other.amount)), currency=self.currency)

    def subtract(self, other: "Money") -> "Money":
        self._assert_same_currency(other)
        return Money(amount=float(_dec(self.amount) - _dec(other.amount)), currency=self.currency)

    def multiply(self, factor) -> "Money":
        return Money(amount=float(_dec(self.amount) * _dec(factor)), currency=self.currency)

    # -------------------------------------------------------------------
    # Predicates
    # -------------------------------------------------------------------
    def is_zero(self) -> bool:
        return _dec(self.amount) == 0

    def is_positive(self) -> bool:
        return _dec(self.amount) > 0

    def __str__(self) -> str:
        return f"{_dec(self.amount).quantize(Decimal('0.01'))} {self.currency}"
