"""Solana ledger access."""

from .client import LAMPORTS_PER_SOL, SolanaDistributor, is_valid_solana_address, lamports_to_sol, sol_to_lamports

__all__ = [
    "LAMPORTS_PER_SOL",
    "SolanaDistributor",
    "is_valid_solana_address",
    "lamports_to_sol",
    "sol_to_lamports",
]
