"""
Token transfer builders.
"""

from __future__ import annotations
from typing import Optional

from pydantic import Field

from ...network import FUNAI_MAINNET, NetworkLike
from ..fees import FeeEstimator, NonceLookup
from ..payload import create_token_transfer_payload
from ..transaction import Transaction
from .base import SignerOrigin, TransactionOptions, UnsignedOrigin, assemble_transaction, sign_with


class TokenTransferOptions(TransactionOptions):
    """Options for a native token transfer."""

    recipient: str = Field(..., description="Recipient principal, standard or contract")
    amount: int = Field(..., ge=0, le=0xFFFFFFFFFFFFFFFF)
    memo: str = Field(default="", description="At most 34 UTF-8 bytes")


def make_unsigned_token_transfer(options: TokenTransferOptions, origin: UnsignedOrigin,
                                 network: NetworkLike = FUNAI_MAINNET,
                                 fee_estimator: Optional[FeeEstimator] = None,
                                 nonce_lookup: Optional[NonceLookup] = None) -> Transaction:
    """
    Build an unsigned token transfer.

    Args:
        options: Recipient, amount, memo plus the common fee/nonce options
        origin: ``SingleSigOrigin`` or ``MultiSigOrigin``
        network: Network preset or name
        fee_estimator: Used only when ``options.fee`` is None
        nonce_lookup: Used only when ``options.nonce`` is None

    Returns:
        Unsigned Transaction
    """
    payload = create_token_transfer_payload(options.recipient, options.amount, options.memo)
    return assemble_transaction(payload, origin, options, network, fee_estimator, nonce_lookup)


def make_token_transfer(options: TokenTransferOptions, signer: SignerOrigin,
                        network: NetworkLike = FUNAI_MAINNET,
                        fee_estimator: Optional[FeeEstimator] = None,
                        nonce_lookup: Optional[NonceLookup] = None) -> Transaction:
    """Build and sign a token transfer."""
    transaction = make_unsigned_token_transfer(options, signer.to_origin(), network, fee_estimator, nonce_lookup)
    return sign_with(transaction, signer)
