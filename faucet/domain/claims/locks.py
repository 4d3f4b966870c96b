"""Per-wallet serialization of claim admission."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator


class WalletLockRegistry:
    """Hands out one ``asyncio.Lock`` per wallet address.

    Locks are created on first use and kept for the process lifetime; the key
    space is bounded by the number of distinct wallets served.
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}

    def lock_for(self, wallet_address: str) -> asyncio.Lock:
        lock = self._locks.get(wallet_address)
        if lock is None:
            lock = self._locks[wallet_address] = asyncio.Lock()
        return lock

    @asynccontextmanager
    async def hold(self, wallet_address: str) -> AsyncIterator[None]:
        async with self.lock_for(wallet_address):
            yield

    def __len__(self) -> int:
        return len(self._locks)
