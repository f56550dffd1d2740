"""
Futarchy402 CLI: browse polls and vote from the terminal.

Commands:
  futarchy402 polls      — List polls (--status open|resolved, --treasury, --limit, --offset)
  futarchy402 poll       — Show one poll
  futarchy402 position   — Show a wallet's position (default: your wallet)
  futarchy402 stats      — Platform statistics
  futarchy402 wallet     — Show the configured wallet's public key
  futarchy402 vote       — Vote with x402 payment (real on-chain transfer)
  futarchy402 tools      — Print tool schemas for openai | anthropic | mcp
"""

import argparse
import json
import logging
import sys
from typing import Any, List, Optional

from futarchy402.adapters import ToolFormat, get_tools
from futarchy402.client import Futarchy402Client
from futarchy402.config import DEFAULT_SLIPPAGE, get_log_level, get_network, load_env
from futarchy402.errors import Futarchy402Error
from futarchy402.wallet import get_solana_rpc_url

USAGE = """Futarchy402 CLI

Commands:
  futarchy402 polls [--status open|resolved] [--treasury ID] [--limit N] [--offset N]
  futarchy402 poll <poll_id>
  futarchy402 position <poll_id> [voter_pubkey]
  futarchy402 stats
  futarchy402 wallet
  futarchy402 vote <poll_id> <yes|no> [--slippage 0.05]
  futarchy402 tools <openai|anthropic|mcp>

Env: FUTARCHY_API_URL, WALLET_PRIVATE_KEY (from .env if present)."""


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str))


def polls_command(args: List[str], client: Futarchy402Client) -> int:
    parser = argparse.ArgumentParser(prog="futarchy402 polls")
    parser.add_argument("--status", choices=["open", "resolved"])
    parser.add_argument("--treasury", dest="treasury_id")
    parser.add_argument("--limit", type=int)
    parser.add_argument("--offset", type=int)
    ns = parser.parse_args(args)
    _print_json(client.list_polls(status=ns.status, treasury_id=ns.treasury_id, limit=ns.limit, offset=ns.offset))
    return 0


def poll_command(args: List[str], client: Futarchy402Client) -> int:
    parser = argparse.ArgumentParser(prog="futarchy402 poll")
    parser.add_argument("poll_id")
    ns = parser.parse_args(args)
    _print_json(client.get_poll(ns.poll_id))
    return 0


def position_command(args: List[str], client: Futarchy402Client) -> int:
    parser = argparse.ArgumentParser(prog="futarchy402 position")
    parser.add_argument("poll_id")
    parser.add_argument("voter_pubkey", nargs="?")
    ns = parser.parse_args(args)
    voter = ns.voter_pubkey or client.get_my_wallet()
    _print_json(client.get_position(ns.poll_id, voter))
    return 0


def stats_command(args: List[str], client: Futarchy402Client) -> int:
    _print_json(client.get_stats())
    return 0


def wallet_command(args: List[str], client: Futarchy402Client) -> int:
    network = get_network()
    print(f"Wallet:  {client.get_my_wallet()}")
    print(f"Network: {network}")
    print(f"RPC:     {get_solana_rpc_url(network)}")
    return 0


def vote_command(args: List[str], client: Futarchy402Client) -> int:
    parser = argparse.ArgumentParser(prog="futarchy402 vote")
    parser.add_argument("poll_id")
    parser.add_argument("side", choices=["yes", "no"])
    parser.add_argument("--slippage", type=float, default=DEFAULT_SLIPPAGE)
    ns = parser.parse_args(args)
    try:
        result = client.vote(ns.poll_id, ns.side, slippage=ns.slippage)
    except ValueError as e:
        print(f"❌ Invalid vote: {e}")
        return 2
    if result.success:
        print(f"✅ Vote recorded on {ns.poll_id} ({ns.side})")
        print(f"   Vote ID: {result.vote_id}")
        if result.transaction_signature:
            print(f"   Tx: {result.transaction_signature}")
        return 0
    print(f"❌ Vote failed [{result.error_kind.value}]: {result.error}")
    return 1


def tools_command(args: List[str], client: Futarchy402Client) -> int:
    parser = argparse.ArgumentParser(prog="futarchy402 tools")
    parser.add_argument("format", choices=[f.value for f in ToolFormat])
    ns = parser.parse_args(args)
    _print_json(get_tools(ns.format))
    return 0


COMMANDS = {
    "polls": polls_command,
    "poll": poll_command,
    "position": position_command,
    "stats": stats_command,
    "wallet": wallet_command,
    "vote": vote_command,
    "tools": tools_command,
}


def main(argv: Optional[List[str]] = None) -> None:
    """CLI entry point."""
    load_env()
    logging.basicConfig(level=get_log_level(), format="%(levelname)s %(name)s: %(message)s")
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        print(USAGE)
        sys.exit(1)

    command, rest = argv[0], argv[1:]
    handler = COMMANDS.get(command)
    if handler is None:
        print(f"Unknown command: {command}")
        print(USAGE)
        sys.exit(1)

    try:
        code = handler(rest, Futarchy402Client())
    except (Futarchy402Error, ValueError) as e:
        print(f"❌ {e}")
        code = 1
    if code:
        sys.exit(code)


if __name__ == "__main__":
    main()
