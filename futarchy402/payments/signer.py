"""
Local transaction signing. No I/O.

The facilitator builds the transfer with itself as fee payer and leaves the
voter's signature slot empty; we fill only that slot and leave the others
as received so the facilitator can co-sign on submission.
"""

import base64

from solders.message import to_bytes_versioned
from solders.signature import Signature
from solders.transaction import VersionedTransaction

from futarchy402.errors import SigningError
from futarchy402.schema import SignedTransaction
from futarchy402.wallet import KeyMaterial


def _decode(unsigned: str) -> VersionedTransaction:
    try:
        raw = base64.b64decode(unsigned, validate=True)
        return VersionedTransaction.from_bytes(raw)
    except Exception as e:
        raise SigningError(f"Unsigned transaction could not be decoded: {e}") from e


def sign_transaction(unsigned: str, key: KeyMaterial) -> SignedTransaction:
    """
    Sign a base64 transaction (legacy or v0 message) with the wallet key.

    Fails closed: any decode or crypto problem raises SigningError and no
    partially signed artifact is returned.
    """
    tx = _decode(unsigned)
    message = tx.message
    signer = key.keypair.pubkey()
    num_signers = message.header.num_required_signatures
    account_keys = list(message.account_keys)
    if signer not in account_keys[:num_signers]:
        raise SigningError(f"Wallet {signer} is not a required signer of this transaction")
    index = account_keys.index(signer)

    try:
        signature = key.keypair.sign_message(to_bytes_versioned(message))
        signatures = list(tx.signatures)
        if len(signatures) < num_signers:
            signatures.extend([Signature.default()] * (num_signers - len(signatures)))
        signatures[index] = signature
        signed = VersionedTransaction.populate(message, signatures)
        encoded = base64.b64encode(bytes(signed)).decode("utf-8")
    except Exception as e:
        raise SigningError(f"Signing failed: {e}") from e
    return SignedTransaction(transaction=encoded, signature=str(signature))
