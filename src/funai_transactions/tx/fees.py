"""
Fee and nonce collaborator contracts.

The engine never talks to a node itself. Builders receive a fee estimator
and a nonce lookup as plain callables; ``client.node.FunaiNodeClient``
provides requests-based implementations.
"""

from __future__ import annotations
from typing import Callable

from .authorization import AUTH_FIELD_SIGNATURE_LENGTH, MultiSigSpendingCondition
from .payload import serialize_payload_bytes
from .transaction import Transaction

# (estimated transaction byte length, serialized payload) -> fee
FeeEstimator = Callable[[int, bytes], int]

# c32 address -> next nonce
NonceLookup = Callable[[str], int]


def estimate_transaction_byte_length(transaction: Transaction) -> int:
    """
    Estimate the size of the transaction once fully signed.

    Unsigned multi-sig origins are short one signature field per missing
    signature, so those are added to the serialized length.

    Args:
        transaction: Transaction to measure

    Returns:
        Estimated byte length
    """
    length = len(transaction.serialize())
    condition = transaction.auth.spending_condition
    if isinstance(condition, MultiSigSpendingCondition):
        missing = max(condition.signatures_required - condition.signature_count, 0)
        length += missing * AUTH_FIELD_SIGNATURE_LENGTH
    return length


def estimate_fee(transaction: Transaction, estimator: FeeEstimator) -> int:
    """Ask ``estimator`` for a fee covering ``transaction``."""
    return estimator(estimate_transaction_byte_length(transaction), serialize_payload_bytes(transaction.payload))
