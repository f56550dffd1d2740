"""
Futarchy402 API client: read-only queries plus the payment-gated vote.

Queries are plain JSON fetches and raise Futarchy402APIError on failure.
vote() never raises for protocol failures; it returns a VoteResult.
"""

from typing import Any, Dict, Optional
from urllib.parse import quote

from futarchy402.config import DEFAULT_SLIPPAGE, get_api_base_url, get_facilitator_url
from futarchy402.errors import Futarchy402APIError, PollNotFoundError, PositionNotFoundError
from futarchy402.flow import error_detail, execute_vote
from futarchy402.schema import VoteIntent, VoteResult
from futarchy402.transport import send
from futarchy402.wallet import get_my_wallet


class Futarchy402Client:
    """
    Client for one Futarchy402 deployment.

    api_base_url: default FUTARCHY_API_URL, else the public API.
    facilitator_url: default FUTARCHY_FACILITATOR_URL, else the API itself.
    """

    def __init__(self, api_base_url: Optional[str] = None, facilitator_url: Optional[str] = None):
        self._base_url = get_api_base_url(api_base_url)
        self._facilitator_url = get_facilitator_url(facilitator_url, api_base_url=self._base_url)

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def facilitator_url(self) -> str:
        return self._facilitator_url

    def _get(self, path: str, action: str, params: Optional[Dict[str, Any]] = None, not_found=None) -> Any:
        r = send("GET", self._base_url + path, params=params)
        if r.network_failure:
            raise Futarchy402APIError(f"Failed to {action}: {r.error}")
        if r.status_code == 404 and not_found is not None:
            raise not_found
        if not r.is_success:
            detail = error_detail(r.body)
            message = f"Failed to {action}: {r.status_code}"
            if detail:
                message = f"{message} {detail}"
            raise Futarchy402APIError(message, status_code=r.status_code)
        return r.body

    # ------------------------------------------------------------------
    # Read-only queries
    # ------------------------------------------------------------------

    def list_polls(
        self,
        status: Optional[str] = None,
        treasury_id: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Polls with liquidity, entry fee and vote counts. Returns {polls, pagination}."""
        params = {
            k: v
            for k, v in (("status", status), ("treasury_id", treasury_id), ("limit", limit), ("offset", offset))
            if v is not None
        }
        return self._get("/polls", "list polls", params=params or None)

    def get_poll(self, poll_id: str) -> Dict[str, Any]:
        """Full poll detail including every vote."""
        return self._get(
            f"/poll/{quote(poll_id, safe='')}",
            "get poll",
            not_found=PollNotFoundError(f"Poll not found: {poll_id}", status_code=404),
        )

    def get_position(self, poll_id: str, voter_pubkey: str) -> Dict[str, Any]:
        """A wallet's side, amount paid and projected payout in a poll."""
        return self._get(
            f"/poll/{quote(poll_id, safe='')}/position",
            "get position",
            params={"voter_pubkey": voter_pubkey},
            not_found=PositionNotFoundError(
                f"No position found for {voter_pubkey} in poll {poll_id}", status_code=404
            ),
        )

    def get_stats(self) -> Dict[str, Any]:
        """Platform totals: active polls, projects, proposals."""
        return self._get("/stats", "get stats")

    # ------------------------------------------------------------------
    # Wallet / vote
    # ------------------------------------------------------------------

    def get_my_wallet(self, wallet_private_key: Optional[str] = None) -> str:
        """Public key of the wallet that vote() would pay from."""
        return get_my_wallet(wallet_private_key)

    def vote(
        self,
        poll_id: str,
        side: str,
        slippage: float = DEFAULT_SLIPPAGE,
        wallet_private_key: Optional[str] = None,
    ) -> VoteResult:
        """
        Vote with x402 payment. Executes a real on-chain transfer.

        Raises pydantic.ValidationError for a bad side/slippage and
        MissingWalletKey if no key is available; both happen before any request.
        """
        intent = VoteIntent(poll_id=poll_id, side=side, slippage=slippage)
        return execute_vote(
            intent,
            private_key=wallet_private_key,
            api_base_url=self._base_url,
            facilitator_url=self._facilitator_url,
        )
