"""
Vote and payment schema for the x402 flow.

Contract: Voter sends VoteIntent → API returns 402 + PaymentRequirement →
facilitator builds the transfer → voter signs it → voter resubmits with
X-Payment → API returns VoteResult.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, PrivateAttr

from futarchy402.config import DEFAULT_SLIPPAGE


class VoteIntent(BaseModel):
    """What the agent wants to vote. Slippage outside [0, 1) is rejected here, before any request."""

    model_config = ConfigDict(frozen=True)

    poll_id: str = Field(..., min_length=1, description="Poll to vote on")
    side: Literal["yes", "no"] = Field(..., description="Side to back")
    slippage: float = Field(
        DEFAULT_SLIPPAGE,
        ge=0,
        lt=1,
        description="Max accepted entry-fee movement between quote and settlement (0.05 = 5%)",
    )

    def to_query_params(self) -> Dict[str, Any]:
        """Query string for POST /poll/{id}/vote."""
        return {"side": self.side, "slippage": self.slippage}


class PaymentRequirement(BaseModel):
    """402 response: how much to pay, where, and until when."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    amount: Union[int, float] = Field(..., ge=0, description="Amount in `currency` units")
    currency: str = Field("USDC", description="Token symbol or mint")
    destination: str = Field(
        ...,
        validation_alias=AliasChoices("destination", "recipient", "pay_to", "payTo"),
        description="Address receiving the payment",
    )
    reference: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("reference", "memo"),
        description="Reference/memo tying the transfer to this vote",
    )
    expiry: Optional[Union[int, float, str]] = Field(
        None,
        validation_alias=AliasChoices("expiry", "expires_at", "expiresAt"),
        description="When the quote stops being honoured (enforced server-side)",
    )
    network: Optional[str] = Field(None, description="e.g. solana-devnet")
    slippage: Optional[float] = Field(None, description="Slippage the server quoted against")

    _raw: Dict[str, Any] = PrivateAttr(default_factory=dict)

    @classmethod
    def from_header(cls, value: Optional[str]) -> "PaymentRequirement":
        """Parse the X-Payment-Required header. Raises ValueError if absent or unusable."""
        if value is None or not value.strip():
            raise ValueError("header is empty")
        data = json.loads(value)
        if not isinstance(data, dict):
            raise ValueError("header is not a JSON object")
        requirement = cls.model_validate(data)
        requirement._raw = dict(data)
        return requirement

    def to_wire(self) -> Dict[str, Any]:
        """Requirement exactly as the server sent it (falls back to field names when built locally)."""
        if self._raw:
            return dict(self._raw)
        return self.model_dump(exclude_none=True)


class VoteErrorKind(str, Enum):
    INVALID_KEY_MATERIAL = "invalid_key_material"
    INVALID_VOTE_REQUEST = "invalid_vote_request"
    DUPLICATE_VOTE = "duplicate_vote"
    PROPOSAL_NOT_FOUND = "proposal_not_found"
    MISSING_PAYMENT_HEADER = "missing_payment_header"
    FACILITATOR_ERROR = "facilitator_error"
    SIGNING_ERROR = "signing_error"
    SLIPPAGE_EXCEEDED = "slippage_exceeded"
    NETWORK_ERROR = "network_error"
    UNEXPECTED_RESPONSE = "unexpected_response"


class VoteResult(BaseModel):
    """The single outcome of a vote attempt. Intermediate artifacts are never exposed."""

    success: bool
    vote_id: Optional[str] = None
    transaction_signature: Optional[str] = Field(None, description="On-chain payment signature")
    paid: bool = Field(False, description="True if the vote went through the payment handshake")
    error_kind: Optional[VoteErrorKind] = None
    error: Optional[str] = None
    status_code: Optional[int] = Field(None, description="HTTP status that caused the failure, if any")
    detail: Optional[Any] = Field(None, description="Remote error body, preserved verbatim")

    @classmethod
    def ok(cls, vote_id: Optional[str], transaction_signature: Optional[str], paid: bool) -> "VoteResult":
        return cls(success=True, vote_id=vote_id, transaction_signature=transaction_signature, paid=paid)

    @classmethod
    def failed(
        cls,
        kind: VoteErrorKind,
        error: str,
        status_code: Optional[int] = None,
        detail: Optional[Any] = None,
    ) -> "VoteResult":
        return cls(success=False, error_kind=kind, error=error, status_code=status_code, detail=detail)


@dataclass(frozen=True)
class SignedTransaction:
    """Wallet-signed payment transaction. Carries no key bytes."""

    transaction: str  # base64, sent as X-Payment
    signature: str  # base58 signature of the wallet's slot

    def __repr__(self) -> str:
        return f"SignedTransaction(signature={self.signature!r})"
