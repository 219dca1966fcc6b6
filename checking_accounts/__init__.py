"""Checking accounts service: balances, ledger and withdrawal authorization."""

__version__ = "0.1.0"
