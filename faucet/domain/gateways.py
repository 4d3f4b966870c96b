"""Capability boundaries to the external systems the faucet depends on."""

from __future__ import annotations

from typing import Protocol


class Distributor(Protocol):
    """Moves funds out of the faucet wallet and reports what is left."""

    def is_valid_address(self, address: str) -> bool:
        ...

    async def transfer(self, address: str, amount: float) -> str:
        """Send ``amount`` (display units) and return the transaction reference.

        Raises ``InvalidAddressError`` when the recipient does not parse and
        ``DistributorError`` on RPC failure or timeout.
        """
        ...

    async def query_balance(self) -> float:
        """Return the faucet wallet balance in display units."""
        ...


class HumanVerifier(Protocol):
    async def verify(self, token: str, remote_ip: str | None = None) -> bool:
        """Return whether ``token`` proves a human; raise on transport failure."""
        ...
