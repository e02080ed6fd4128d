"""
Test suite for currency module

Tests Money rounding and arithmetic, exchange rates and currency conversion.
All monetary calculations must use Decimal precision.
"""

import pytest
from decimal import Decimal
from datetime import datetime, timezone

from ledger_core.currency import Money, Currency, ExchangeRate, CurrencyConverter


class TestMoney:
    """Test Money class operations"""

    def test_money_creation(self):
        """Test Money object creation and rounding to currency precision"""
        money = Money(Decimal('100.50'), Currency.USD)
        assert money.amount == Decimal('100.50')
        assert money.currency == Currency.USD

        assert Money(Decimal('100.555'), Currency.USD).amount == Decimal('100.56')
        assert Money(Decimal('100.7'), Currency.JPY).amount == Decimal('101')

    def test_non_decimal_amount_is_converted(self):
        """Test that int and str amounts become Decimal"""
        assert Money(100, Currency.USD).amount == Decimal('100.00')
        assert Money("12.3", Currency.EUR).amount == Decimal('12.30')

    def test_money_is_immutable(self):
        """Test that Money cannot be changed in place"""
        money = Money(Decimal('10'), Currency.USD)
        with pytest.raises(AttributeError):
            money.amount = Decimal('20')

    def test_money_arithmetic(self):
        """Test Money arithmetic operations"""
        money1 = Money(Decimal('100.50'), Currency.USD)
        money2 = Money(Decimal('50.25'), Currency.USD)

        assert (money1 + money2).amount == Decimal('150.75')
        assert (money1 - money2).amount == Decimal('50.25')
        assert (money1 * Decimal('2')).amount == Decimal('201.00')

    def test_money_currency_mismatch(self):
        """Test that operations with different currencies raise errors"""
        usd_money = Money(Decimal('100.00'), Currency.USD)
        eur_money = Money(Decimal('100.00'), Currency.EUR)

        with pytest.raises(ValueError, match="Cannot add USD and EUR"):
            usd_money + eur_money

        with pytest.raises(ValueError, match="Cannot subtract EUR from USD"):
            usd_money - eur_money

    def test_money_state_checks(self):
        """Test Money state checking methods"""
        assert Money.zero(Currency.USD) == Money(Decimal('0.00'), Currency.USD)
        assert not Money(Decimal('1'), Currency.USD).is_negative()
        assert Money(Decimal('-1'), Currency.USD).is_negative()

    def test_money_string_formatting(self):
        """Test Money string representation"""
        assert Money(Decimal('1234.56'), Currency.USD).to_string() == "USD 1,234.56"
        assert Money(Decimal('1234'), Currency.JPY).to_string() == "JPY 1,234"


class TestCurrencyConverter:
    """Test CurrencyConverter functionality"""

    def setup_method(self):
        """Set up test fixtures"""
        self.converter = CurrencyConverter()
        self.converter.set_rate(ExchangeRate(
            from_currency=Currency.USD,
            to_currency=Currency.EUR,
            mid=Decimal('0.86'),
            timestamp=datetime.now(timezone.utc)
        ))

    def test_same_currency_conversion(self):
        """Test conversion between same currency returns the input"""
        usd_money = Money(Decimal('100.00'), Currency.USD)
        assert self.converter.convert(usd_money, Currency.USD) == usd_money

    def test_currency_conversion_with_mid_rate(self):
        """Test currency conversion using mid rate"""
        result = self.converter.convert(Money(Decimal('100.00'), Currency.USD), Currency.EUR)
        assert result.amount == Decimal('86.00')
        assert result.currency == Currency.EUR

    def test_reverse_rate_creation(self):
        """Test that reverse rates are automatically created"""
        usd_result = self.converter.convert(Money(Decimal('86.00'), Currency.EUR), Currency.USD)
        assert usd_result.amount == Decimal('100.00')
        assert usd_result.currency == Currency.USD

    def test_rates_hold_mid_only(self):
        """Test that stored and reverse rates carry a single mid rate"""
        rate = self.converter.get_rate(Currency.USD, Currency.EUR)
        reverse = self.converter.get_rate(Currency.EUR, Currency.USD)

        assert rate.mid == Decimal('0.86')
        assert reverse.mid == Decimal('1') / Decimal('0.86')
        assert self.converter.get_rate(Currency.GBP, Currency.GBP).mid == Decimal('1')
        assert ExchangeRate(Currency.EUR, Currency.CHF, "0.95").mid == Decimal('0.95')

    def test_conversion_with_no_rate(self):
        """Test conversion when no exchange rate is available"""
        with pytest.raises(ValueError, match="No exchange rate available"):
            self.converter.convert(Money(Decimal('100.00'), Currency.GBP), Currency.USD)

    def test_conversion_does_not_change_input(self):
        """Test that converting leaves the original Money untouched"""
        usd_money = Money(Decimal('10.00'), Currency.USD)
        self.converter.convert(usd_money, Currency.EUR)
        assert usd_money == Money(Decimal('10.00'), Currency.USD)


class TestConverterFromMapping:
    """Test building a converter from configured rates"""

    def test_from_mapping(self):
        """Test that "FROM/TO" entries seed mid rates and reverses"""
        converter = CurrencyConverter.from_mapping({"EUR/USD": "1.10", "usd/ron": "4.5"})

        assert converter.convert(Money(Decimal('10'), Currency.EUR), Currency.USD).amount == Decimal('11.00')
        assert converter.convert(Money(Decimal('2'), Currency.USD), Currency.RON).amount == Decimal('9.00')
        assert converter.convert(Money(Decimal('11'), Currency.USD), Currency.EUR).amount == Decimal('10.00')

    def test_from_mapping_invalid_pair(self):
        """Test that malformed pairs are rejected"""
        with pytest.raises(ValueError, match="Invalid currency pair"):
            CurrencyConverter.from_mapping({"EURUSD": "1.10"})

        with pytest.raises(ValueError, match="Invalid currency pair"):
            CurrencyConverter.from_mapping({"EUR/XXX": "1.10"})
