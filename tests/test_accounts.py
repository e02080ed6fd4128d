"""
Test suite for account model

Tests account kinds, capitalization periods and balance updates.
"""

import pytest
from decimal import Decimal
from datetime import date

from ledger_core.currency import Money, Currency
from ledger_core.accounts import Account, SavingsAccount, AccountKind, CapitalizationFrequency


class TestCapitalizationFrequency:
    """Test accrual period lengths"""

    def test_period_months(self):
        """Test that monthly is one month and quarterly is three"""
        assert CapitalizationFrequency.MONTHLY.period_months == 1
        assert CapitalizationFrequency.QUARTERLY.period_months == 3

    def test_every_frequency_has_a_period(self):
        """Test that no frequency is missing a period length"""
        for frequency in CapitalizationFrequency:
            assert frequency.period_months >= 1


class TestAccount:
    """Test checking account behaviour"""

    def test_defaults(self):
        """Test that a plain account is a checking account with no history"""
        account = Account(id="CHK001", balance=Money(Decimal('50'), Currency.USD))

        assert account.kind == AccountKind.CHECKING
        assert account.currency == Currency.USD
        assert account.transactions == []
        assert account.can_be_transfer_source()
        assert not account.is_savings

    def test_credit_and_debit_replace_balance(self):
        """Test that credit/debit produce new Money values"""
        account = Account(id="CHK001", balance=Money(Decimal('50'), Currency.USD))
        original = account.balance

        account.credit(Money(Decimal('25'), Currency.USD))
        account.debit(Money(Decimal('5'), Currency.USD))

        assert account.balance == Money(Decimal('70'), Currency.USD)
        assert original == Money(Decimal('50'), Currency.USD)

    def test_credit_in_other_currency_fails(self):
        """Test that balance updates must be in account currency"""
        account = Account(id="CHK001", balance=Money(Decimal('50'), Currency.USD))
        with pytest.raises(ValueError):
            account.credit(Money(Decimal('1'), Currency.EUR))


class TestSavingsAccount:
    """Test savings account behaviour"""

    def setup_method(self):
        """Set up test fixtures"""
        self.account = SavingsAccount(
            id="SAV001",
            balance=Money(Decimal('100'), Currency.USD),
            interest_rate=Decimal('0.05'),
            capitalization_frequency=CapitalizationFrequency.QUARTERLY,
            last_interest_applied_date=date(2024, 1, 15)
        )

    def test_kind_is_savings(self):
        """Test that savings accounts cannot be a transfer source"""
        assert self.account.kind == AccountKind.SAVINGS
        assert self.account.is_savings
        assert not self.account.can_be_transfer_source()

    def test_rate_is_coerced_to_decimal(self):
        """Test that a string or float rate becomes Decimal"""
        account = SavingsAccount(id="SAV002", balance=Money(Decimal('1'), Currency.USD), interest_rate="0.01")
        assert account.interest_rate == Decimal('0.01')

    def test_period_months(self):
        """Test period lookup and unknown frequencies"""
        assert self.account.period_months == 3

        self.account.capitalization_frequency = "weekly"
        assert self.account.period_months is None

    def test_apply_interest(self):
        """Test interest capitalization updates balance and date"""
        interest = self.account.interest_for_period()
        self.account.apply_interest(interest, date(2024, 4, 15))

        assert interest == Money(Decimal('5'), Currency.USD)
        assert self.account.balance.amount == Decimal('105.0')
        assert self.account.last_interest_applied_date == date(2024, 4, 15)
        assert self.account.transactions == []
