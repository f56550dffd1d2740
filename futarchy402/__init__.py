"""
Futarchy402 — payment-gated governance voting for AI agents.

Enables agents to:
- Browse polls, positions and platform stats
- Vote via the x402 flow (402 → facilitator → sign locally → resubmit with proof)
- Expose all of the above as tools to OpenAI, Anthropic or MCP runtimes

No custody service: the wallet is a local Solana keypair from WALLET_PRIVATE_KEY.
"""

__version__ = "0.1.0"

from futarchy402.schema import PaymentRequirement, SignedTransaction, VoteErrorKind, VoteIntent, VoteResult
from futarchy402.errors import (
    FacilitatorError,
    Futarchy402APIError,
    Futarchy402Error,
    InvalidKeyMaterial,
    MissingWalletKey,
    PollNotFoundError,
    PositionNotFoundError,
    SettlementNetworkError,
    SigningError,
)
from futarchy402.wallet import (
    KeyMaterial,
    decode_key,
    derive_public_key,
    get_my_wallet,
    get_solana_rpc_url,
    validate_public_key,
)
from futarchy402.flow import execute_vote, negotiate, resubmit
from futarchy402.client import Futarchy402Client
from futarchy402.tools import ALL_TOOLS, ToolNames, execute_tool
from futarchy402.adapters import ToolFormat, get_tools, run_tool_call

__all__ = [
    "__version__",
    "VoteIntent",
    "VoteResult",
    "VoteErrorKind",
    "PaymentRequirement",
    "SignedTransaction",
    "Futarchy402Error",
    "Futarchy402APIError",
    "PollNotFoundError",
    "PositionNotFoundError",
    "MissingWalletKey",
    "InvalidKeyMaterial",
    "FacilitatorError",
    "SettlementNetworkError",
    "SigningError",
    "KeyMaterial",
    "decode_key",
    "derive_public_key",
    "get_my_wallet",
    "get_solana_rpc_url",
    "validate_public_key",
    "execute_vote",
    "negotiate",
    "resubmit",
    "Futarchy402Client",
    "ALL_TOOLS",
    "ToolNames",
    "execute_tool",
    "ToolFormat",
    "get_tools",
    "run_tool_call",
]
