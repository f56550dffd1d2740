"""
Exceptions raised inside components.

The vote flow catches the protocol ones and turns them into a failed
VoteResult; only configuration and read-only query errors reach callers.
"""

from typing import Any, Optional


class Futarchy402Error(Exception):
    """Base class for everything this package raises."""


class MissingWalletKey(Futarchy402Error, RuntimeError):
    """No private key passed and WALLET_PRIVATE_KEY is not set."""


class InvalidKeyMaterial(Futarchy402Error, ValueError):
    """Private key string does not decode to a 64-byte Solana secret key."""


class SigningError(Futarchy402Error):
    """Unsigned transaction could not be decoded or signed."""


class FacilitatorError(Futarchy402Error):
    """Facilitator answered with something other than a ready-to-sign transaction."""

    def __init__(self, status_code: int, body: Any, message: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        super().__init__(message or f"Facilitator returned {status_code}: {body}")


class SettlementNetworkError(Futarchy402Error):
    """Facilitator could not be reached."""


class Futarchy402APIError(Futarchy402Error):
    """Read-only query failed (non-2xx or unreachable API)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class PollNotFoundError(Futarchy402APIError):
    pass


class PositionNotFoundError(Futarchy402APIError):
    pass
