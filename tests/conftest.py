"""Shared fixtures: clean env, scripted HTTP, throwaway Solana keypairs and transactions."""

import base64
import json
from types import SimpleNamespace
from unittest.mock import Mock

import base58
import pytest
from requests.structures import CaseInsensitiveDict
from solders.hash import Hash
from solders.keypair import Keypair
from solders.message import Message, MessageV0
from solders.signature import Signature
from solders.system_program import TransferParams, transfer
from solders.transaction import Transaction, VersionedTransaction

API_URL = "https://test-api.example.com"

_ENV_VARS = [
    "FUTARCHY_API_URL",
    "FUTARCHY_FACILITATOR_URL",
    "FUTARCHY_HTTP_TIMEOUT",
    "FUTARCHY_NETWORK",
    "FUTARCHY_LOG_LEVEL",
    "WALLET_PRIVATE_KEY",
    "SOLANA_RPC_DEVNET",
    "SOLANA_RPC_MAINNET",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """No ambient config: unset every variable we read and skip .env loading."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("futarchy402.config._env_loaded", True)


def make_response(status_code, body=None, headers=None):
    r = Mock()
    r.status_code = status_code
    r.headers = CaseInsensitiveDict(headers or {})
    if body is None:
        r.text = ""
        r.json.side_effect = ValueError("empty body")
    elif isinstance(body, str):
        r.text = body
        r.json.side_effect = ValueError("not json")
    else:
        r.text = json.dumps(body)
        r.json.return_value = body
    return r


class FakeHTTP:
    """Stands in for requests.request: replays queued responses in order and records each call."""

    def __init__(self):
        self.queue = []
        self.calls = []

    def respond(self, status_code, body=None, headers=None):
        self.queue.append(make_response(status_code, body, headers))
        return self

    def fail(self, exc):
        self.queue.append(exc)
        return self

    def __call__(self, method, url, params=None, json=None, headers=None, timeout=None):
        self.calls.append(
            SimpleNamespace(method=method, url=url, params=params, json=json, headers=headers or {}, timeout=timeout)
        )
        if not self.queue:
            raise AssertionError(f"Unexpected request: {method} {url}")
        item = self.queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture
def http(monkeypatch):
    fake = FakeHTTP()
    monkeypatch.setattr("futarchy402.transport.requests.request", fake)
    return fake


@pytest.fixture
def voter():
    return Keypair()


@pytest.fixture
def fee_payer():
    return Keypair()


@pytest.fixture
def private_key(voter):
    """Base58 64-byte secret key, as exported by Phantom / bs58.encode(secretKey)."""
    return base58.b58encode(bytes(voter)).decode()


def _transfer_ix(voter):
    return transfer(TransferParams(from_pubkey=voter.pubkey(), to_pubkey=Keypair().pubkey(), lamports=1_000))


@pytest.fixture
def unsigned_tx(voter, fee_payer):
    """Legacy transfer built the way a facilitator would: facilitator pays fees, voter signs second."""
    message = Message.new_with_blockhash([_transfer_ix(voter)], fee_payer.pubkey(), Hash.default())
    tx = Transaction.new_unsigned(message)
    return base64.b64encode(bytes(tx)).decode()


@pytest.fixture
def unsigned_v0_tx(voter, fee_payer):
    message = MessageV0.try_compile(fee_payer.pubkey(), [_transfer_ix(voter)], [], Hash.default())
    tx = VersionedTransaction.populate(message, [Signature.default(), Signature.default()])
    return base64.b64encode(bytes(tx)).decode()


@pytest.fixture
def requirement_header():
    return {"amount": 1, "currency": "USDC", "destination": "D", "expiry": 1767225600}
