"""
Transaction signing: the chained-sighash signer and multi-sig key ordering.
"""

from .signer import SigningState, TransactionSigner, condition_state
from .multisig import sign_append_multisig, sort_public_keys_for_address

__all__ = [
    "SigningState",
    "TransactionSigner",
    "condition_state",
    "sign_append_multisig",
    "sort_public_keys_for_address",
]
