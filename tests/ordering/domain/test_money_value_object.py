"""Tests for the Money value object."""

import pytest
from ordering.errors import CurrencyMismatchError, InvalidArgumentError
from ordering.shared.money import VALID_CURRENCIES, Money
from protean.exceptions import ValidationError
from protean.utils.reflection import declared_fields


class TestMoneyConstruction:
    def test_element_type(self):
        from protean.utils import DomainObjects

        assert Money.element_type == DomainObjects.VALUE_OBJECT

    def test_declared_fields(self):
        fields = declared_fields(Money)
        assert "amount" in fields
        assert "currency" in fields

    def test_valid_money_with_defaults(self):
        money = Money(amount=10.0)
        assert money.amount == 10.0
        assert money.currency == "USD"

    def test_zero_factory(self):
        money = Money.zero("EUR")
        assert money.amount == 0.0
        assert money.currency == "EUR"
        assert money.is_zero()

    def test_of_factory_accepts_strings_and_ints(self):
        assert Money.of("19.99").amount == 19.99
        assert Money.of(5, "GBP") == Money(amount=5.0, currency="GBP")

    def test_unsupported_currency_rejected(self):
        with pytest.raises(ValidationError) as exc:
            Money(amount=10.0, currency="XYZ")
        assert "Unsupported currency" in str(exc.value)

    def test_of_reports_bad_currency_as_invalid_argument(self):
        with pytest.raises(InvalidArgumentError):
            Money.of(10, "XYZ")

    def test_of_reports_bad_amount_as_invalid_argument(self):
        with pytest.raises(InvalidArgumentError):
            Money.of("ten dollars")

    @pytest.mark.parametrize("currency", sorted(VALID_CURRENCIES))
    def test_all_valid_currencies_accepted(self, currency):
        assert Money(amount=1.0, currency=currency).currency == currency


class TestMoneyArithmetic:
    def test_add(self):
        assert Money.of(0.1).add(Money.of(0.2)) == Money.of(0.3)

    def test_subtract(self):
        assert Money.of(10).subtract(Money.of(2.5)).amount == 7.5

    def test_subtract_can_go_negative(self):
        assert Money.of(1).subtract(Money.of(3)).amount == -2.0

    def test_multiply_is_exact_to_the_cent(self):
        assert Money.of(19.99).multiply(3).amount == 59.97

    def test_operations_return_new_values(self):
        price = Money.of(10)
        price.add(Money.of(5))
        assert price.amount == 10.0

    def test_add_with_different_currency_fails(self):
        with pytest.raises(CurrencyMismatchError):
            Money.of(10, "USD").add(Money.of(10, "EUR"))

    def test_subtract_with_different_currency_fails(self):
        with pytest.raises(CurrencyMismatchError):
            Money.of(10, "USD").subtract(Money.of(1, "GBP"))

    def test_currency_mismatch_is_a_validation_error(self):
        with pytest.raises(ValidationError):
            Money.of(10, "USD").add(Money.of(10, "EUR"))


class TestMoneyPredicates:
    def test_is_positive(self):
        assert Money.of(0.01).is_positive()
        assert not Money.zero().is_positive()
        assert not Money.of(-1).is_positive()

    def test_is_zero(self):
        assert Money.zero().is_zero()
        assert not Money.of(0.01).is_zero()

    def test_str(self):
        assert str(Money.of(5)) == "5.00 USD"
