"""
402 vote flow: vote → 402 + requirement → facilitator → sign → resubmit with proof → result.

The API answers the first POST /poll/{id}/vote with 402 and an
X-Payment-Required header. The facilitator turns that requirement into an
unsigned Solana transfer, the voter signs it locally, and the vote is resent
with X-Payment: <signed tx>. The API settles it and returns the vote.

Each step runs at most once per execute_vote() call. Nothing is retried here:
re-voting after a 409 or a network error is the caller's decision, because a
blind retry could pay twice. If the resubmission was sent but no answer came
back, the vote's state is unknown; check get_position() before voting again
(a repeated successful vote comes back as 403 duplicate).
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple
from urllib.parse import quote

from futarchy402.config import get_api_base_url
from futarchy402.errors import FacilitatorError, InvalidKeyMaterial, SettlementNetworkError, SigningError
from futarchy402.payments import settle, sign_transaction
from futarchy402.schema import PaymentRequirement, SignedTransaction, VoteErrorKind, VoteIntent, VoteResult
from futarchy402.transport import TransportResult, send
from futarchy402.wallet import decode_key, derive_public_key, resolve_private_key

logger = logging.getLogger(__name__)

PAYMENT_REQUIRED_HEADER = "X-Payment-Required"
PAYMENT_HEADER = "X-Payment"


class VoteStep(str, Enum):
    NEGOTIATE = "negotiate"
    RESUBMIT = "resubmit"


_COMMON_STATUS: Dict[int, Tuple[VoteErrorKind, str]] = {
    400: (VoteErrorKind.INVALID_VOTE_REQUEST, "Invalid vote request"),
    403: (VoteErrorKind.DUPLICATE_VOTE, "Duplicate vote: this wallet already voted on this poll"),
    404: (VoteErrorKind.PROPOSAL_NOT_FOUND, "Poll not found"),
}

# 402 and 409 mean different things depending on which request got them.
STATUS_ERRORS: Dict[VoteStep, Dict[int, Tuple[VoteErrorKind, str]]] = {
    VoteStep.NEGOTIATE: dict(_COMMON_STATUS),
    VoteStep.RESUBMIT: {
        **_COMMON_STATUS,
        402: (VoteErrorKind.UNEXPECTED_RESPONSE, "Payment proof was not accepted"),
        409: (
            VoteErrorKind.SLIPPAGE_EXCEEDED,
            "Slippage exceeded: entry fee moved beyond tolerance; vote again with a fresh quote or wider slippage",
        ),
    },
}


@dataclass
class Negotiation:
    """First-round result: either a requirement to pay, or an outcome that ends the flow."""

    requirement: Optional[PaymentRequirement] = None
    outcome: Optional[VoteResult] = None


def vote_url(poll_id: str, api_base_url: Optional[str] = None) -> str:
    return f"{get_api_base_url(api_base_url)}/poll/{quote(poll_id, safe='')}/vote"


def error_detail(body: Any) -> Optional[str]:
    if isinstance(body, dict):
        detail = body.get("error") or body.get("message") or body.get("detail")
        return str(detail) if detail else None
    if isinstance(body, str) and body.strip():
        return body.strip()
    return None


def interpret_failure(step: VoteStep, r: TransportResult) -> VoteResult:
    """Map a non-success response (or network failure) to a VoteResult using `step`'s table."""
    if r.network_failure:
        return VoteResult.failed(VoteErrorKind.NETWORK_ERROR, f"Network error during {step.value}: {r.error}")
    kind, message = STATUS_ERRORS[step].get(
        r.status_code, (VoteErrorKind.UNEXPECTED_RESPONSE, f"Unexpected response {r.status_code} during {step.value}")
    )
    detail = error_detail(r.body)
    if detail:
        message = f"{message}: {detail}"
    return VoteResult.failed(kind, message, status_code=r.status_code, detail=r.body)


def _vote_from_response(
    step: VoteStep, r: TransportResult, paid: bool, fallback_signature: Optional[str] = None
) -> VoteResult:
    """A 2xx only counts as a recorded vote if the body carries a vote_id."""
    data = r.body if isinstance(r.body, dict) else {}
    vote_id = data.get("vote_id")
    if vote_id is None:
        message = f"Response {r.status_code} during {step.value} has no vote_id"
        if paid:
            message += "; the payment may already have settled, check get_position() before voting again"
        return VoteResult.failed(
            VoteErrorKind.UNEXPECTED_RESPONSE, message, status_code=r.status_code, detail=r.body
        )
    signature = data.get("transaction_signature") or fallback_signature
    return VoteResult.ok(
        vote_id=str(vote_id),
        transaction_signature=str(signature) if signature is not None else None,
        paid=paid,
    )


def negotiate(intent: VoteIntent, api_base_url: Optional[str] = None) -> Negotiation:
    """Send the vote without payment and read the 402 requirement."""
    r = send("POST", vote_url(intent.poll_id, api_base_url), params=intent.to_query_params())
    if r.is_success:
        # No payment asked for; the vote is already in.
        return Negotiation(outcome=_vote_from_response(VoteStep.NEGOTIATE, r, paid=False))
    if r.status_code != 402:
        return Negotiation(outcome=interpret_failure(VoteStep.NEGOTIATE, r))

    raw = r.header(PAYMENT_REQUIRED_HEADER)
    if raw is None:
        return Negotiation(
            outcome=VoteResult.failed(
                VoteErrorKind.MISSING_PAYMENT_HEADER,
                f"Missing {PAYMENT_REQUIRED_HEADER} header on 402 response",
                status_code=402,
            )
        )
    try:
        requirement = PaymentRequirement.from_header(raw)
    except ValueError as e:
        return Negotiation(
            outcome=VoteResult.failed(
                VoteErrorKind.MISSING_PAYMENT_HEADER,
                f"Missing {PAYMENT_REQUIRED_HEADER} header on 402 response (unparseable: {e})",
                status_code=402,
            )
        )
    return Negotiation(requirement=requirement)


def resubmit(intent: VoteIntent, signed: SignedTransaction, api_base_url: Optional[str] = None) -> VoteResult:
    """Resend the vote with the signed transaction as X-Payment."""
    r = send(
        "POST",
        vote_url(intent.poll_id, api_base_url),
        params=intent.to_query_params(),
        headers={PAYMENT_HEADER: signed.transaction},
    )
    if r.is_success:
        return _vote_from_response(VoteStep.RESUBMIT, r, paid=True, fallback_signature=signed.signature)
    return interpret_failure(VoteStep.RESUBMIT, r)


def execute_vote(
    intent: VoteIntent,
    private_key: Optional[str] = None,
    api_base_url: Optional[str] = None,
    facilitator_url: Optional[str] = None,
) -> VoteResult:
    """
    Execute the 402 vote flow once and return exactly one VoteResult.

    private_key: base58 Solana secret key; default WALLET_PRIVATE_KEY.
    Raises MissingWalletKey if no key is configured at all; every other
    failure (bad key, API, facilitator, signing, network) comes back as a
    failed VoteResult. The key is decoded before any request and released
    as soon as the payment is signed.
    """
    encoded = resolve_private_key(private_key)
    try:
        key = decode_key(encoded)
    except InvalidKeyMaterial as e:
        return VoteResult.failed(VoteErrorKind.INVALID_KEY_MATERIAL, f"Invalid wallet private key: {e}")

    with key:
        voter = derive_public_key(key)
        logger.info(
            "Voting %s on poll %s as %s (slippage %.2f%%)", intent.side, intent.poll_id, voter, intent.slippage * 100
        )

        # 1) Negotiate
        negotiation = negotiate(intent, api_base_url)
        if negotiation.outcome is not None:
            if negotiation.outcome.success:
                logger.info("Poll %s accepted the vote without payment", intent.poll_id)
            else:
                logger.warning("Vote on %s failed at negotiation: %s", intent.poll_id, negotiation.outcome.error)
            return negotiation.outcome
        requirement = negotiation.requirement

        # 2) Facilitator builds the transfer
        try:
            unsigned = settle(requirement, voter, facilitator_url=facilitator_url, api_base_url=api_base_url)
        except SettlementNetworkError as e:
            return VoteResult.failed(VoteErrorKind.NETWORK_ERROR, str(e))
        except FacilitatorError as e:
            return VoteResult.failed(VoteErrorKind.FACILITATOR_ERROR, str(e), status_code=e.status_code, detail=e.body)

        # 3) Sign locally; the key is released when this block exits
        try:
            signed = sign_transaction(unsigned, key)
        except SigningError as e:
            return VoteResult.failed(VoteErrorKind.SIGNING_ERROR, str(e))

    # 4) Resubmit with proof
    result = resubmit(intent, signed, api_base_url)
    if result.success:
        logger.info("Vote %s recorded on poll %s (tx %s)", result.vote_id, intent.poll_id, result.transaction_signature)
    else:
        logger.warning("Vote on %s failed at resubmission: %s", intent.poll_id, result.error)
    return result
