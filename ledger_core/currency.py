"""
Money and Currency Conversion Module

ISO 4217 currencies with their minor-unit precision, an immutable Money value
and the reference currency converter used by the settlement engine.
Monetary values are always Decimal, never float.
"""

from decimal import Decimal, ROUND_HALF_UP, getcontext
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Mapping, Optional, Tuple
from enum import Enum

getcontext().prec = 28


class Currency(Enum):
    """ISO 4217 Currency Codes with precision info"""
    USD = ("USD", 2)  # US Dollar
    EUR = ("EUR", 2)  # Euro
    GBP = ("GBP", 2)  # British Pound
    JPY = ("JPY", 0)  # Japanese Yen
    CAD = ("CAD", 2)  # Canadian Dollar
    CHF = ("CHF", 2)  # Swiss Franc
    RON = ("RON", 2)  # Romanian Leu

    def __init__(self, code: str, precision: int):
        self.code = code
        self.precision = precision


@dataclass(frozen=True)
class Money:
    """
    Immutable money representation with currency and proper precision.

    Amounts are signed and rounded half-up to the currency's minor unit.
    """
    amount: Decimal
    currency: Currency

    def __post_init__(self):
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, 'amount', Decimal(str(self.amount)))

        rounded = self.amount.quantize(
            Decimal('0.1') ** self.currency.precision,
            rounding=ROUND_HALF_UP
        )
        object.__setattr__(self, 'amount', rounded)

    def __add__(self, other: 'Money') -> 'Money':
        if self.currency != other.currency:
            raise ValueError(f"Cannot add {self.currency.code} and {other.currency.code}")
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: 'Money') -> 'Money':
        if self.currency != other.currency:
            raise ValueError(f"Cannot subtract {other.currency.code} from {self.currency.code}")
        return Money(self.amount - other.amount, self.currency)

    def __mul__(self, multiplier: Decimal) -> 'Money':
        if not isinstance(multiplier, Decimal):
            multiplier = Decimal(str(multiplier))
        return Money(self.amount * multiplier, self.currency)

    @classmethod
    def zero(cls, currency: Currency) -> 'Money':
        """Zero amount in the given currency"""
        return cls(Decimal('0'), currency)

    def is_negative(self) -> bool:
        return self.amount < Decimal('0')

    def to_string(self) -> str:
        """Format for display"""
        if self.currency.precision == 0:
            return f"{self.currency.code} {self.amount:,.0f}"
        return f"{self.currency.code} {self.amount:,.{self.currency.precision}f}"


@dataclass
class ExchangeRate:
    """Mid-market exchange rate for a currency pair"""
    from_currency: Currency
    to_currency: Currency
    mid: Decimal
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        if not isinstance(self.mid, Decimal):
            self.mid = Decimal(str(self.mid))


class CurrencyConverter:
    """
    Converts Money between currencies from a table of exchange rates.

    Conversion is pure: it never changes the rate table or its input, and the
    same input always produces the same output.
    """

    def __init__(self):
        self._rates: Dict[Tuple[Currency, Currency], ExchangeRate] = {}

    def set_rate(self, rate: ExchangeRate) -> None:
        """Set exchange rate for currency pair, and its reverse"""
        self._rates[(rate.from_currency, rate.to_currency)] = rate

        if rate.mid > Decimal('0'):
            reverse_rate = ExchangeRate(
                from_currency=rate.to_currency,
                to_currency=rate.from_currency,
                mid=Decimal('1') / rate.mid,
                timestamp=rate.timestamp
            )
            self._rates[(rate.to_currency, rate.from_currency)] = reverse_rate

    def get_rate(self, from_currency: Currency, to_currency: Currency) -> Optional[ExchangeRate]:
        """Get exchange rate for currency pair"""
        if from_currency == to_currency:
            return ExchangeRate(from_currency, to_currency, Decimal('1'))
        return self._rates.get((from_currency, to_currency))

    def convert(self, money: Money, to_currency: Currency) -> Money:
        """
        Convert money from one currency to another at the mid rate

        Args:
            money: Money to convert
            to_currency: Target currency

        Returns:
            Converted Money object

        Raises:
            ValueError: If no exchange rate available
        """
        if money.currency == to_currency:
            return money

        rate = self.get_rate(money.currency, to_currency)
        if not rate:
            raise ValueError(f"No exchange rate available for {money.currency.code} -> {to_currency.code}")

        return Money(money.amount * rate.mid, to_currency)

    @classmethod
    def from_mapping(cls, rates: Mapping[str, str]) -> 'CurrencyConverter':
        """
        Build a converter from "FROM/TO" -> mid rate entries, e.g.
        {"EUR/USD": "1.10"}.

        Raises:
            ValueError: If a key is malformed or names an unknown currency
        """
        converter = cls()
        for pair, mid in rates.items():
            try:
                from_code, to_code = pair.split("/")
                from_currency = Currency[from_code.strip().upper()]
                to_currency = Currency[to_code.strip().upper()]
            except (ValueError, KeyError):
                raise ValueError(f"Invalid currency pair '{pair}', expected FROM/TO")
            converter.set_rate(ExchangeRate(from_currency, to_currency, Decimal(str(mid))))
        return converter
