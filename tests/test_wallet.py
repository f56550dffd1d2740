import json

import base58
import pytest
from solders.keypair import Keypair

from futarchy402.errors import InvalidKeyMaterial, MissingWalletKey
from futarchy402.wallet import (
    decode_key,
    derive_public_key,
    get_my_wallet,
    get_solana_rpc_url,
    resolve_private_key,
    validate_public_key,
)


class TestDecodeKey:
    def test_base58_secret_key(self, voter, private_key):
        with decode_key(private_key) as key:
            assert derive_public_key(key) == str(voter.pubkey())
            assert key.keypair.pubkey() == voter.pubkey()

    def test_json_byte_array(self, voter):
        encoded = json.dumps(list(bytes(voter)))
        with decode_key(encoded) as key:
            assert key.public_key == str(voter.pubkey())

    def test_surrounding_whitespace_is_ignored(self, voter, private_key):
        with decode_key(f"  {private_key}\n") as key:
            assert key.public_key == str(voter.pubkey())

    @pytest.mark.parametrize("encoded", ["", "   ", "invalid-key", "0OIl", "[1, 2, 999]", "[not json"])
    def test_garbage_is_rejected(self, encoded):
        with pytest.raises(InvalidKeyMaterial):
            decode_key(encoded)

    def test_wrong_length_is_rejected(self, voter):
        # a 32-byte public key is not a secret key
        with pytest.raises(InvalidKeyMaterial, match="64 bytes"):
            decode_key(str(voter.pubkey()))

    def test_mismatched_public_half_is_rejected(self, voter):
        other = Keypair()
        forged = bytes(voter)[:32] + bytes(other.pubkey())
        with pytest.raises(InvalidKeyMaterial, match="does not match"):
            decode_key(base58.b58encode(forged).decode())


class TestKeyMaterialScope:
    def test_secret_is_zeroed_on_exit(self, private_key):
        with decode_key(private_key) as key:
            assert any(key._secret)
        assert key.released
        assert not any(key._secret)
        with pytest.raises(RuntimeError):
            key.keypair

    def test_secret_is_zeroed_when_block_raises(self, private_key):
        with pytest.raises(KeyError):
            with decode_key(private_key) as key:
                raise KeyError("boom")
        assert key.released
        assert not any(key._secret)

    def test_public_key_survives_release(self, voter, private_key):
        key = decode_key(private_key)
        key.release()
        assert key.public_key == str(voter.pubkey())

    def test_repr_has_no_secret(self, private_key):
        key = decode_key(private_key)
        assert private_key not in repr(key)
        assert "live" in repr(key)
        key.release()
        assert "released" in repr(key)


class TestResolvePrivateKey:
    def test_explicit_key_wins_over_env(self, monkeypatch):
        monkeypatch.setenv("WALLET_PRIVATE_KEY", "from-env")
        assert resolve_private_key("explicit") == "explicit"

    def test_env_fallback(self, monkeypatch):
        monkeypatch.setenv("WALLET_PRIVATE_KEY", "  from-env  ")
        assert resolve_private_key() == "from-env"
        assert resolve_private_key("   ") == "from-env"

    def test_missing_key_raises(self):
        with pytest.raises(MissingWalletKey, match="WALLET_PRIVATE_KEY"):
            resolve_private_key()

    def test_blank_env_counts_as_missing(self, monkeypatch):
        monkeypatch.setenv("WALLET_PRIVATE_KEY", "   ")
        with pytest.raises(MissingWalletKey):
            resolve_private_key()


def test_get_my_wallet(monkeypatch, voter, private_key):
    assert get_my_wallet(private_key) == str(voter.pubkey())
    monkeypatch.setenv("WALLET_PRIVATE_KEY", private_key)
    assert get_my_wallet() == str(voter.pubkey())


class TestValidatePublicKey:
    def test_real_pubkeys(self, voter):
        assert validate_public_key(str(voter.pubkey()))
        assert validate_public_key("11111111111111111111111111111111")

    @pytest.mark.parametrize("value", ["", "invalid", "0OIl", "abc", None])
    def test_invalid(self, value):
        assert validate_public_key(value) is False

    def test_secret_key_is_not_a_pubkey(self, private_key):
        assert validate_public_key(private_key) is False


class TestSolanaRpcUrl:
    def test_defaults(self):
        assert get_solana_rpc_url("solana-devnet") == "https://api.devnet.solana.com"
        assert get_solana_rpc_url("solana-mainnet") == "https://api.mainnet-beta.solana.com"

    def test_network_from_env(self, monkeypatch):
        monkeypatch.setenv("FUTARCHY_NETWORK", "solana-mainnet")
        assert get_solana_rpc_url() == "https://api.mainnet-beta.solana.com"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("SOLANA_RPC_DEVNET", "https://rpc.example.com")
        assert get_solana_rpc_url("solana-devnet") == "https://rpc.example.com"

    def test_unsupported_network(self):
        with pytest.raises(ValueError, match="Unsupported network: ethereum"):
            get_solana_rpc_url("ethereum")
