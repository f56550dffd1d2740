"""
Agent tools: one canonical definition per operation, plus the handler that runs it.

Definitions are framework-neutral; futarchy402.adapters renders them for
OpenAI, Anthropic and MCP. execute_tool() is the single entry point every
adapter calls, so bots don't need to know the client API.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from futarchy402.client import Futarchy402Client
from futarchy402.config import DEFAULT_SLIPPAGE, get_network


@dataclass(frozen=True)
class ToolParameter:
    type: str
    description: str
    enum: Optional[Sequence[str]] = None
    default: Any = None


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    description: str
    parameters: Dict[str, ToolParameter] = field(default_factory=dict)
    required: Sequence[str] = ()


class ToolNames:
    LIST_POLLS = "futarchy_list_polls"
    GET_POLL = "futarchy_get_poll"
    GET_POSITION = "futarchy_get_position"
    VOTE = "futarchy_vote"
    GET_STATS = "futarchy_get_stats"
    GET_MY_WALLET = "futarchy_get_my_wallet"


LIST_POLLS_TOOL = ToolDefinition(
    name=ToolNames.LIST_POLLS,
    description=(
        "List governance polls from Futarchy402. Can filter by status (open/resolved) or treasury. "
        "Returns liquidity, entry fee, implied probability and vote counts for each poll."
    ),
    parameters={
        "status": ToolParameter("string", "Filter by poll status", enum=("open", "resolved")),
        "treasury_id": ToolParameter("string", "Filter by treasury ID"),
        "limit": ToolParameter("number", "Maximum number of polls to return", default=20),
        "offset": ToolParameter("number", "Pagination offset", default=0),
    },
)

GET_POLL_TOOL = ToolDefinition(
    name=ToolNames.GET_POLL,
    description=(
        "Get full detail for one poll: every vote, the proposal, current liquidity, entry fee and "
        "voting statistics."
    ),
    parameters={"poll_id": ToolParameter("string", "The unique identifier of the poll")},
    required=("poll_id",),
)

GET_POSITION_TOOL = ToolDefinition(
    name=ToolNames.GET_POSITION,
    description=(
        "Get a wallet's position in a poll: side, amount paid, projected payout, profit/loss and ROI, "
        "and the actual result once the poll is resolved. Use this to check whether a vote landed."
    ),
    parameters={
        "poll_id": ToolParameter("string", "The poll ID"),
        "voter_pubkey": ToolParameter("string", "The Solana wallet public key of the voter"),
    },
    required=("poll_id", "voter_pubkey"),
)

VOTE_TOOL = ToolDefinition(
    name=ToolNames.VOTE,
    description=(
        "Vote on a governance poll using the x402 payment-gated protocol. Voting pays USDC into the "
        "poll's liquidity pool; the amount paid sets your share of the winning side. If WALLET_PRIVATE_KEY "
        "is configured you can call this directly; otherwise ask the user for wallet_private_key. "
        "This executes a real on-chain transaction."
    ),
    parameters={
        "poll_id": ToolParameter("string", "The poll ID to vote on"),
        "side": ToolParameter("string", "Which side to vote for", enum=("yes", "no")),
        "wallet_private_key": ToolParameter(
            "string",
            "Base58 encoded Solana wallet private key used to sign the payment. "
            "Optional if WALLET_PRIVATE_KEY is set.",
        ),
        "slippage": ToolParameter(
            "number", "Maximum allowed entry fee change (0.05 = 5%)", default=DEFAULT_SLIPPAGE
        ),
    },
    required=("poll_id", "side"),
)

GET_STATS_TOOL = ToolDefinition(
    name=ToolNames.GET_STATS,
    description="Get platform-wide statistics: number of active polls, projects and proposals.",
)

GET_MY_WALLET_TOOL = ToolDefinition(
    name=ToolNames.GET_MY_WALLET,
    description=(
        "Get the public key of the configured wallet (WALLET_PRIVATE_KEY). Use it to look up your "
        "position or see which wallet will pay for votes. Errors if no wallet is configured."
    ),
)

ALL_TOOLS: List[ToolDefinition] = [
    LIST_POLLS_TOOL,
    GET_POLL_TOOL,
    GET_POSITION_TOOL,
    VOTE_TOOL,
    GET_STATS_TOOL,
    GET_MY_WALLET_TOOL,
]


def _require(args: Dict[str, Any], name: str) -> Any:
    value = args.get(name)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError(f"Missing required parameter: {name}")
    if not isinstance(value, str):
        raise ValueError(f"Parameter {name} must be a string, got {type(value).__name__}")
    return value


def _list_polls(client: Futarchy402Client, args: Dict[str, Any]) -> Any:
    return client.list_polls(
        status=args.get("status"),
        treasury_id=args.get("treasury_id"),
        limit=args.get("limit", 20),
        offset=args.get("offset", 0),
    )


def _get_poll(client: Futarchy402Client, args: Dict[str, Any]) -> Any:
    return client.get_poll(_require(args, "poll_id"))


def _get_position(client: Futarchy402Client, args: Dict[str, Any]) -> Any:
    return client.get_position(_require(args, "poll_id"), _require(args, "voter_pubkey"))


def _vote(client: Futarchy402Client, args: Dict[str, Any]) -> Any:
    slippage = args.get("slippage")
    result = client.vote(
        _require(args, "poll_id"),
        _require(args, "side"),
        slippage=DEFAULT_SLIPPAGE if slippage is None else slippage,
        wallet_private_key=args.get("wallet_private_key"),
    )
    return result.model_dump(mode="json", exclude_none=True)


def _get_stats(client: Futarchy402Client, args: Dict[str, Any]) -> Any:
    return client.get_stats()


def _get_my_wallet(client: Futarchy402Client, args: Dict[str, Any]) -> Any:
    return {"public_key": client.get_my_wallet(), "network": get_network()}


HANDLERS: Dict[str, Callable[[Futarchy402Client, Dict[str, Any]], Any]] = {
    ToolNames.LIST_POLLS: _list_polls,
    ToolNames.GET_POLL: _get_poll,
    ToolNames.GET_POSITION: _get_position,
    ToolNames.VOTE: _vote,
    ToolNames.GET_STATS: _get_stats,
    ToolNames.GET_MY_WALLET: _get_my_wallet,
}


def execute_tool(
    name: str,
    args: Optional[Dict[str, Any]] = None,
    client: Optional[Futarchy402Client] = None,
) -> Any:
    """
    Run one tool call and return its JSON-serialisable result.

    Raises ValueError for an unknown tool or missing parameter; client errors
    (Futarchy402APIError, MissingWalletKey, ...) propagate for the adapter to report.
    """
    handler = HANDLERS.get(name)
    if handler is None:
        raise ValueError(f"Unknown tool: {name}")
    return handler(client or Futarchy402Client(), dict(args or {}))
