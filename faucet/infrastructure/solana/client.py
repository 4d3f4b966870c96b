"""Solana RPC client used to pay out claims and read the faucet balance."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Awaitable, TypeVar

import httpx
from solana.exceptions import SolanaRpcException
from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Confirmed
from solana.rpc.core import RPCException
from solana.rpc.types import TxOpts
from solders.keypair import Keypair
from solders.message import Message
from solders.pubkey import Pubkey
from solders.system_program import TransferParams, transfer
from solders.transaction import Transaction

from faucet.core.config import SolanaSettings
from faucet.domain.claims.exceptions import DistributorError, InvalidAddressError

logger = logging.getLogger(__name__)

LAMPORTS_PER_SOL = 1_000_000_000

T = TypeVar("T")

_RPC_ERRORS = (SolanaRpcException, RPCException, httpx.HTTPError, asyncio.TimeoutError)


def sol_to_lamports(amount: float) -> int:
    return int(round(amount * LAMPORTS_PER_SOL))


def lamports_to_sol(lamports: int) -> float:
    return lamports / LAMPORTS_PER_SOL


def is_valid_solana_address(address: str) -> bool:
    """A valid address is base58 text decoding to a 32-byte public key."""
    try:
        Pubkey.from_string(address)
    except ValueError:
        return False
    return True


def load_keypair(path: Path) -> Keypair:
    """Load a keypair stored as a JSON array of 64 secret-key bytes."""
    try:
        data = json.loads(Path(path).read_text())
        return Keypair.from_bytes(bytes(data))
    except (OSError, ValueError, TypeError) as exc:
        raise DistributorError(f"failed to load faucet wallet from {path}: {exc}") from exc


class SolanaDistributor:
    """Sends SOL from the faucet wallet over JSON-RPC.

    Every RPC round trip is bounded by ``timeout`` seconds. A timeout is
    reported like any other failure; the caller cannot tell whether a
    transfer that timed out reached the network.
    """

    def __init__(self, client: AsyncClient, keypair: Keypair, timeout: float = 30) -> None:
        self._client = client
        self._keypair = keypair
        self._timeout = timeout

    @classmethod
    def from_settings(cls, settings: SolanaSettings) -> "SolanaDistributor":
        keypair = load_keypair(settings.wallet_path)
        client = AsyncClient(settings.rpc_url, commitment=Confirmed, timeout=settings.transaction_timeout)
        logger.info("Faucet wallet %s on %s (%s)", keypair.pubkey(), settings.network, settings.rpc_url)
        return cls(client, keypair, timeout=settings.transaction_timeout)

    @property
    def public_key(self) -> Pubkey:
        return self._keypair.pubkey()

    def is_valid_address(self, address: str) -> bool:
        return is_valid_solana_address(address)

    async def _call(self, what: str, awaitable: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(awaitable, timeout=self._timeout)
        except _RPC_ERRORS as exc:
            raise DistributorError(f"{what} failed: {str(exc) or type(exc).__name__}") from exc

    async def query_balance(self) -> float:
        resp = await self._call("get balance", self._client.get_balance(self.public_key, commitment=Confirmed))
        lamports = _value_of(resp, "get balance")
        logger.debug("Faucet balance: %d lamports", lamports)
        return lamports_to_sol(lamports)

    async def transfer(self, address: str, amount: float) -> str:
        try:
            recipient = Pubkey.from_string(address)
        except ValueError as exc:
            raise InvalidAddressError(f"invalid recipient address: {address}") from exc

        instruction = transfer(
            TransferParams(from_pubkey=self.public_key, to_pubkey=recipient, lamports=sol_to_lamports(amount))
        )
        latest = await self._call("get latest blockhash", self._client.get_latest_blockhash(Confirmed))
        blockhash = _value_of(latest, "get latest blockhash").blockhash

        message = Message.new_with_blockhash([instruction], self.public_key, blockhash)
        tx = Transaction([self._keypair], message, blockhash)

        resp = await self._call(
            "send transaction",
            self._client.send_transaction(tx, opts=TxOpts(skip_preflight=False, preflight_commitment=Confirmed)),
        )
        signature = str(_value_of(resp, "send transaction"))
        logger.info("Transaction sent: %s", signature)
        return signature

    async def close(self) -> None:
        await self._client.close()


def _value_of(resp: Any, what: str) -> Any:
    value = getattr(resp, "value", None)
    if value is None:
        raise DistributorError(f"{what} returned no value: {resp}")
    return value
