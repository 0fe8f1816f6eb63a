"""
Shared machinery for the transaction builders.

The caller picks the origin explicitly: ``SingleSigOrigin`` or
``MultiSigOrigin`` for unsigned transactions, ``SingleSigSigner`` or
``MultiSigSigner`` for signed ones. Fee and nonce are ``Optional[int]``:
``None`` asks the collaborator, any integer (including 0) is used as given.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Union

from pydantic import BaseModel, Field

from ...client.node import FunaiNodeClient
from ...codec.c32 import c32_address
from ...crypto.secp256k1 import KeyLike, Secp256k1PrivateKey, private_key_to_public
from ...enums import AddressHashMode, AnchorMode, PostConditionMode
from ...network import FUNAI_MAINNET, FunaiNetwork, NetworkLike, network_from
from ...runtime.errors import SigningError
from ...signers.multisig import sign_append_multisig, sort_public_keys_for_address
from ...signers.signer import TransactionSigner
from ...wire.types import Address
from ..authorization import (
    SpendingCondition,
    create_multi_sig_spending_condition,
    create_single_sig_spending_condition,
    create_sponsored_auth,
    create_standard_auth,
    is_single_sig,
)
from ..fees import FeeEstimator, NonceLookup, estimate_fee
from ..payload import Payload
from ..postconditions import PostCondition
from ..transaction import Transaction

logger = logging.getLogger(__name__)


# =============================================================================
# Origins
# =============================================================================

@dataclass(frozen=True)
class SingleSigOrigin:
    """Unsigned single-sig origin, identified by its public key."""

    public_key: KeyLike
    hash_mode: AddressHashMode = AddressHashMode.P2PKH


@dataclass(frozen=True)
class MultiSigOrigin:
    """
    Unsigned multi-sig origin.

    When ``address`` is given the keys are reordered (as given, else sorted)
    to reproduce it.
    """

    public_keys: Sequence[KeyLike]
    signatures_required: int
    address: Optional[str] = None
    use_non_sequential: bool = False

    @property
    def hash_mode(self) -> AddressHashMode:
        return AddressHashMode.P2SH_NON_SEQUENTIAL if self.use_non_sequential else AddressHashMode.P2SH


@dataclass(frozen=True)
class SingleSigSigner:
    """Signed single-sig origin, identified by its private key."""

    private_key: KeyLike
    hash_mode: AddressHashMode = AddressHashMode.P2PKH

    def to_origin(self) -> SingleSigOrigin:
        return SingleSigOrigin(private_key_to_public(self.private_key), self.hash_mode)


@dataclass(frozen=True)
class MultiSigSigner:
    """Signed multi-sig origin: all member public keys plus the keys that sign."""

    public_keys: Sequence[KeyLike]
    signatures_required: int
    signer_keys: Sequence[KeyLike]
    address: Optional[str] = None
    use_non_sequential: bool = False

    def to_origin(self) -> MultiSigOrigin:
        return MultiSigOrigin(self.public_keys, self.signatures_required, self.address, self.use_non_sequential)


UnsignedOrigin = Union[SingleSigOrigin, MultiSigOrigin]
SignerOrigin = Union[SingleSigSigner, MultiSigSigner]


# =============================================================================
# Options
# =============================================================================

class TransactionOptions(BaseModel):
    """Options common to every builder."""

    fee: Optional[int] = Field(default=None, ge=0, description="Fee in micro-units; None asks the estimator")
    nonce: Optional[int] = Field(default=None, ge=0, description="Origin nonce; None asks the nonce lookup")
    sponsored: bool = Field(default=False, description="Another account pays the fee")
    anchor_mode: AnchorMode = Field(default=AnchorMode.ANY, alias="anchorMode")

    model_config = {"populate_by_name": True}


class PostConditionOptions(TransactionOptions):
    post_condition_mode: PostConditionMode = Field(default=PostConditionMode.DENY, alias="postConditionMode")
    post_conditions: List[Any] = Field(default_factory=list, alias="postConditions")


# =============================================================================
# Assembly
# =============================================================================

def _key_bytes(key: KeyLike) -> bytes:
    return bytes.fromhex(key) if isinstance(key, str) else bytes(key)


def create_origin_condition(origin: UnsignedOrigin, nonce: int, fee: int) -> SpendingCondition:
    """Build the origin spending condition for an explicit origin variant."""
    if isinstance(origin, SingleSigOrigin):
        return create_single_sig_spending_condition(origin.hash_mode, origin.public_key, nonce, fee)

    public_keys = [_key_bytes(k) for k in origin.public_keys]
    if origin.address:
        public_keys = sort_public_keys_for_address(public_keys, origin.signatures_required, origin.hash_mode,
                                                   Address.from_string(origin.address).hash160)
    return create_multi_sig_spending_condition(origin.hash_mode, origin.signatures_required, public_keys,
                                               nonce, fee)


def origin_address(transaction: Transaction, network: FunaiNetwork) -> str:
    """c32 address of the origin account on ``network``."""
    condition = transaction.auth.spending_condition
    if is_single_sig(condition):
        version = network.address_version.single_sig
    else:
        version = network.address_version.multi_sig
    return c32_address(version, condition.signer)


def assemble_transaction(payload: Payload, origin: UnsignedOrigin, options: TransactionOptions,
                         network: NetworkLike = FUNAI_MAINNET,
                         fee_estimator: Optional[FeeEstimator] = None,
                         nonce_lookup: Optional[NonceLookup] = None,
                         post_conditions: Sequence[PostCondition] = (),
                         post_condition_mode: PostConditionMode = PostConditionMode.DENY) -> Transaction:
    """
    Build an unsigned transaction and fill in any omitted fee or nonce.

    Args:
        payload: What the transaction does
        origin: Explicit single- or multi-sig origin
        options: Fee, nonce, sponsorship and anchor mode
        network: Network preset or name
        fee_estimator: Consulted only when ``options.fee`` is None
        nonce_lookup: Consulted only when ``options.nonce`` is None
        post_conditions: Asset movement assertions
        post_condition_mode: ALLOW or DENY

    Returns:
        Unsigned Transaction

    Raises:
        AddressKeyMismatchError: If a multi-sig origin's keys cannot reproduce its address
    """
    net = network_from(network)
    condition = create_origin_condition(origin, options.nonce or 0, options.fee or 0)
    auth = create_sponsored_auth(condition) if options.sponsored else create_standard_auth(condition)

    transaction = Transaction(
        version=net.transaction_version,
        chain_id=net.chain_id,
        auth=auth,
        payload=payload,
        post_conditions=post_conditions,
        post_condition_mode=post_condition_mode,
        anchor_mode=options.anchor_mode,
    )

    if options.fee is None or options.nonce is None:
        fill_fee_and_nonce(transaction, options.fee, options.nonce, net, fee_estimator, nonce_lookup)
    return transaction


def fill_fee_and_nonce(transaction: Transaction, fee: Optional[int], nonce: Optional[int], network: FunaiNetwork,
                       fee_estimator: Optional[FeeEstimator] = None,
                       nonce_lookup: Optional[NonceLookup] = None) -> None:
    """Ask the collaborators for whichever of fee and nonce is None."""
    client = None
    if (fee is None and fee_estimator is None) or (nonce is None and nonce_lookup is None):
        client = FunaiNodeClient.from_network(network)
        fee_estimator = fee_estimator or client.estimate_fee
        nonce_lookup = nonce_lookup or client.get_nonce

    try:
        if fee is None:
            estimated = estimate_fee(transaction, fee_estimator)
            transaction.set_fee(estimated)
            logger.debug(f"Estimated fee {estimated}")
        if nonce is None:
            address = origin_address(transaction, network)
            fetched = nonce_lookup(address)
            transaction.set_nonce(fetched)
            logger.debug(f"Fetched nonce {fetched} for {address}")
    finally:
        if client is not None:
            client.close()


def sign_with(transaction: Transaction, signer: SignerOrigin) -> Transaction:
    """Sign the origin of ``transaction`` with the keys held by ``signer``."""
    if isinstance(signer, SingleSigSigner):
        TransactionSigner(transaction).sign_origin(Secp256k1PrivateKey.parse(signer.private_key))
        return transaction
    if isinstance(signer, MultiSigSigner):
        sign_append_multisig(transaction, signer.public_keys, signer.signer_keys)
        return transaction
    raise SigningError(f"Unknown signer origin: {type(signer).__name__}")
