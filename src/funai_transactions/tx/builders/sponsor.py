"""
Sponsoring: a second account pays the fee of an origin-signed transaction.
"""

from __future__ import annotations
import copy
import logging
from typing import Any, Optional

from pydantic import BaseModel, Field

from ...client.node import FunaiNodeClient
from ...codec.c32 import c32_address
from ...codec.hashes import hash160
from ...crypto.secp256k1 import Secp256k1PrivateKey
from ...enums import AddressHashMode
from ...network import FunaiNetwork, NetworkLike, network_from, network_from_transaction
from ...runtime.errors import ErrorCode, FunaiError
from ...signers.signer import TransactionSigner
from ..authorization import create_single_sig_spending_condition
from ..fees import FeeEstimator, NonceLookup, estimate_fee
from ..payload import (
    ContractCallPayload,
    SmartContractPayload,
    TokenTransferPayload,
    VersionedSmartContractPayload,
)
from ..transaction import Transaction

logger = logging.getLogger(__name__)

# Payloads the node can price; anything else needs an explicit sponsor fee.
FEE_ESTIMABLE_PAYLOADS = (
    TokenTransferPayload,
    SmartContractPayload,
    VersionedSmartContractPayload,
    ContractCallPayload,
)


class SponsorOptions(BaseModel):
    """Options for sponsoring an origin-signed transaction."""

    transaction: Any = Field(..., description="Origin-signed sponsored Transaction")
    sponsor_private_key: Any = Field(..., alias="sponsorPrivateKey")
    fee: Optional[int] = Field(default=None, ge=0)
    sponsor_nonce: Optional[int] = Field(default=None, ge=0, alias="sponsorNonce")
    sponsor_address_hash_mode: AddressHashMode = Field(default=AddressHashMode.P2PKH,
                                                       alias="sponsorAddressHashmode")

    model_config = {"populate_by_name": True}


def sponsor_transaction(options: SponsorOptions, network: Optional[NetworkLike] = None,
                        fee_estimator: Optional[FeeEstimator] = None,
                        nonce_lookup: Optional[NonceLookup] = None) -> Transaction:
    """
    Attach and sign a sponsor spending condition.

    The input transaction is left untouched; a sponsored copy is returned.

    Args:
        options: Transaction, sponsor key, and optional fee and sponsor nonce
        network: Network preset or name, selects the sponsor address version.
            Defaults to the network named by the transaction's version and chain id
        fee_estimator: Used only when ``options.fee`` is None
        nonce_lookup: Used only when ``options.sponsor_nonce`` is None

    Returns:
        Transaction signed by both origin and sponsor

    Raises:
        FunaiError: If a fee must be estimated for a payload the node cannot price
        SigningError: If the transaction is not sponsored
        VerificationError: If the origin signatures do not verify
    """
    transaction: Transaction = copy.deepcopy(options.transaction)
    if network is None:
        net = network_from_transaction(transaction.version, transaction.chain_id)
    else:
        net = network_from(network)
    sponsor_key = Secp256k1PrivateKey.parse(options.sponsor_private_key)
    sponsor_public_key = sponsor_key.public_key_bytes

    fee = options.fee
    if fee is None:
        if not isinstance(transaction.payload, FEE_ESTIMABLE_PAYLOADS):
            raise FunaiError(
                f"Sponsored transactions with {type(transaction.payload).__name__} need an explicit fee",
                ErrorCode.UNSUPPORTED_PAYLOAD,
            )
        fee = _estimate(transaction, net, fee_estimator)

    sponsor_nonce = options.sponsor_nonce
    if sponsor_nonce is None:
        sponsor_nonce = _lookup_sponsor_nonce(sponsor_public_key, net, nonce_lookup)

    sponsor_condition = create_single_sig_spending_condition(options.sponsor_address_hash_mode,
                                                             sponsor_public_key, sponsor_nonce, fee)
    signer = TransactionSigner.create_sponsor_signer(transaction, sponsor_condition)
    signer.sign_sponsor(sponsor_key)
    logger.debug(f"Sponsored transaction {transaction.txid()} with fee {fee}")
    return signer.get_tx_in_complete()


def _estimate(transaction: Transaction, network: FunaiNetwork, fee_estimator: Optional[FeeEstimator]) -> int:
    if fee_estimator is not None:
        return estimate_fee(transaction, fee_estimator)
    with FunaiNodeClient.from_network(network) as client:
        return estimate_fee(transaction, client.estimate_fee)


def _lookup_sponsor_nonce(public_key: bytes, network: FunaiNetwork, nonce_lookup: Optional[NonceLookup]) -> int:
    address = c32_address(network.address_version.single_sig, hash160(public_key))
    if nonce_lookup is not None:
        return nonce_lookup(address)
    with FunaiNodeClient.from_network(network) as client:
        return client.get_nonce(address)
