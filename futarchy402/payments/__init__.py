"""
Payment backends for the vote flow: facilitator settlement and local signing.
"""

from futarchy402.payments.facilitator import SETTLE_PATH, settle
from futarchy402.payments.signer import sign_transaction

__all__ = [
    "SETTLE_PATH",
    "settle",
    "sign_transaction",
]
