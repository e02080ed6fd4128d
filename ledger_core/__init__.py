"""
Savings Ledger Core

An in-memory ledger with a simulated-time interest scheduler for savings
accounts and a settlement engine for transfers and withdrawals, using
Decimal money with currency conversion.
"""

__version__ = "1.0.0"
