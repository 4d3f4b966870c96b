"""Claim domain specific exceptions."""


class FaucetError(Exception):
    """Base class for faucet domain errors."""


class InvalidAddressError(FaucetError):
    """Raised when a wallet address does not parse as a ledger public key."""


class UpstreamUnavailableError(FaucetError):
    """Raised when an external collaborator cannot be reached or fails."""


class DistributorError(UpstreamUnavailableError):
    """Raised when the ledger RPC rejects or times out a request."""


class VerificationUnavailableError(UpstreamUnavailableError):
    """Raised when the human-verification service cannot give an answer."""


class LedgerError(FaucetError):
    """Raised when claim or transaction storage fails."""
