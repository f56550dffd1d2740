"""
Facilitator settlement: PaymentRequirement in, ready-to-sign transaction out.

The facilitator is a separate trust domain, so its error bodies are passed
back verbatim instead of being folded into the governance API's codes.
"""

import logging
from typing import Optional

from futarchy402.config import get_facilitator_url
from futarchy402.errors import FacilitatorError, SettlementNetworkError
from futarchy402.schema import PaymentRequirement
from futarchy402.transport import send

logger = logging.getLogger(__name__)

SETTLE_PATH = "/facilitator/settle"


def settle(
    requirement: PaymentRequirement,
    payer: str,
    facilitator_url: Optional[str] = None,
    api_base_url: Optional[str] = None,
) -> str:
    """
    POST the requirement (as the server sent it, plus `payer`) to the facilitator.
    Returns the base64 unsigned transaction.

    Raises FacilitatorError on a non-2xx or a 2xx without a transaction,
    SettlementNetworkError if the facilitator cannot be reached.
    """
    url = get_facilitator_url(facilitator_url, api_base_url=api_base_url) + SETTLE_PATH
    body = {**requirement.to_wire(), "payer": payer}
    logger.info(
        "Settling %s %s to %s via facilitator", requirement.amount, requirement.currency, requirement.destination
    )
    r = send("POST", url, json=body)
    if r.network_failure:
        raise SettlementNetworkError(f"Facilitator unreachable: {r.error}") from r.error
    if not r.is_success:
        raise FacilitatorError(r.status_code, r.body)
    tx = r.body.get("transaction") if isinstance(r.body, dict) else None
    if not isinstance(tx, str) or not tx.strip():
        raise FacilitatorError(r.status_code, r.body, "Facilitator response has no transaction")
    return tx
