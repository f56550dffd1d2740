"""
Voter wallet: local Solana keypair, no custody service.

Key comes from the explicit call argument or WALLET_PRIVATE_KEY (env or .env).
Never read/write a key file. Decoded key bytes live only inside a
`with KeyMaterial` block and are zeroed when it exits, on every path.
"""

import json
import os
from typing import Optional

import base58
from solders.keypair import Keypair

from futarchy402.config import get_configured_private_key, get_network, load_env
from futarchy402.errors import InvalidKeyMaterial, MissingWalletKey

SECRET_KEY_LENGTH = 64
SEED_LENGTH = 32
PUBKEY_LENGTH = 32

SOLANA_RPC_URLS = {
    "solana-devnet": ("SOLANA_RPC_DEVNET", "https://api.devnet.solana.com"),
    "solana-mainnet": ("SOLANA_RPC_MAINNET", "https://api.mainnet-beta.solana.com"),
}


def _zero(buf: bytearray) -> None:
    for i in range(len(buf)):
        buf[i] = 0


class KeyMaterial:
    """
    Decoded secret key plus its keypair, scoped to one vote.

    Use as a context manager; release() wipes the secret buffer and drops the
    keypair, after which `keypair` raises. The public key stays readable.
    """

    def __init__(self, secret: bytearray):
        self._secret = secret
        self._keypair: Optional[Keypair] = Keypair.from_seed(bytes(secret[:SEED_LENGTH]))
        if bytes(self._keypair.pubkey()) != bytes(secret[SEED_LENGTH:]):
            self.release()
            raise InvalidKeyMaterial("Private key's embedded public key does not match its seed")
        self.public_key = str(self._keypair.pubkey())

    @property
    def keypair(self) -> Keypair:
        if self._keypair is None:
            raise RuntimeError("Key material has already been released")
        return self._keypair

    @property
    def released(self) -> bool:
        return self._keypair is None

    def release(self) -> None:
        _zero(self._secret)
        self._keypair = None

    def __enter__(self) -> "KeyMaterial":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def __repr__(self) -> str:
        state = "released" if self.released else "live"
        return f"KeyMaterial(public_key={self.public_key!r}, {state})"


def decode_key(encoded: str) -> KeyMaterial:
    """
    Decode a private key string into KeyMaterial.

    Accepts base58 (Phantom export, bs58.encode(secretKey)) or a JSON byte
    array (solana-keygen id.json). Must decode to exactly 64 bytes:
    32-byte seed followed by its public key. Raises InvalidKeyMaterial.
    """
    text = (encoded or "").strip()
    if not text:
        raise InvalidKeyMaterial("Private key is empty")
    if text.startswith("["):
        try:
            values = json.loads(text)
            if not isinstance(values, list):
                raise ValueError("not a list")
            secret = bytearray(values)
        except (ValueError, TypeError) as e:
            raise InvalidKeyMaterial(f"Private key is not a valid JSON byte array: {e}") from e
    else:
        try:
            secret = bytearray(base58.b58decode(text))
        except ValueError as e:
            raise InvalidKeyMaterial("Private key is not valid base58") from e

    if len(secret) != SECRET_KEY_LENGTH:
        n = len(secret)
        _zero(secret)
        raise InvalidKeyMaterial(f"Private key must decode to {SECRET_KEY_LENGTH} bytes, got {n}")
    try:
        return KeyMaterial(secret)
    except InvalidKeyMaterial:
        raise
    except Exception as e:
        _zero(secret)
        raise InvalidKeyMaterial(f"Private key rejected: {e}") from e


def derive_public_key(key: KeyMaterial) -> str:
    """Base58 public key (the voter identity the API knows this wallet by)."""
    return key.public_key


def resolve_private_key(private_key: Optional[str] = None) -> str:
    """
    Explicit key wins; else WALLET_PRIVATE_KEY.
    Raises MissingWalletKey if neither is set, before anything touches the network.
    """
    if private_key is not None and private_key.strip():
        return private_key.strip()
    pk = get_configured_private_key()
    if pk is None:
        raise MissingWalletKey(
            "No wallet key: pass wallet_private_key or set WALLET_PRIVATE_KEY in the environment "
            "(never commit it). Value is the base58 secret key exported from your Solana wallet."
        )
    return pk


def load_key_material(private_key: Optional[str] = None) -> KeyMaterial:
    """resolve_private_key + decode_key. Use the result in a `with` block."""
    return decode_key(resolve_private_key(private_key))


def get_my_wallet(private_key: Optional[str] = None) -> str:
    """Public key of the configured (or given) wallet."""
    with load_key_material(private_key) as key:
        return derive_public_key(key)


def validate_public_key(public_key: str) -> bool:
    """True if `public_key` is a base58 string decoding to 32 bytes."""
    if not public_key:
        return False
    try:
        return len(base58.b58decode(public_key)) == PUBKEY_LENGTH
    except ValueError:
        return False


def get_solana_rpc_url(network: Optional[str] = None) -> str:
    """RPC URL for a network name; SOLANA_RPC_DEVNET / SOLANA_RPC_MAINNET override the public ones."""
    network = network or get_network()
    if network not in SOLANA_RPC_URLS:
        raise ValueError(f"Unsupported network: {network}")
    env_name, default = SOLANA_RPC_URLS[network]
    load_env()
    return (os.getenv(env_name) or "").strip() or default
