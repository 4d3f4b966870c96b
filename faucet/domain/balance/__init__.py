"""Faucet balance exports"""

from .cache import BALANCE_CACHE_WINDOW, BalanceCache, BalanceReading

__all__ = ["BALANCE_CACHE_WINDOW", "BalanceCache", "BalanceReading"]
