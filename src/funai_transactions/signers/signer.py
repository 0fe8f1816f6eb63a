"""
Transaction signer.

Drives the chained-sighash signing protocol over a ``Transaction`` as an
explicit state machine::

    UNSIGNED -> PARTIALLY_SIGNED (k of n) -> FULLY_SIGNED

Guards reject signing twice with the same key, signing past the required
threshold, origin signing after the sponsor has signed, and sponsor
signing on a transaction that is not sponsored.
"""

from __future__ import annotations
import logging
from enum import Enum
from typing import Optional, Set, Union

from ..crypto.secp256k1 import KeyLike, Secp256k1PrivateKey, compress_public_key
from ..enums import AuthType
from ..runtime.errors import ErrorCode, SigningError
from ..tx.authorization import (
    MultiSigSpendingCondition,
    SingleSigSpendingCondition,
    SpendingCondition,
    SponsoredAuthorization,
    next_verification,
)
from ..tx.transaction import Transaction
from ..wire.types import PublicKey

logger = logging.getLogger(__name__)

PrivateKeyLike = Union[KeyLike, Secp256k1PrivateKey]


class SigningState(Enum):
    """Signing progress of one spending condition."""

    UNSIGNED = "unsigned"
    PARTIALLY_SIGNED = "partially_signed"
    FULLY_SIGNED = "fully_signed"


def condition_state(condition: SpendingCondition) -> SigningState:
    if isinstance(condition, SingleSigSpendingCondition):
        return SigningState.UNSIGNED if condition.signature.is_empty else SigningState.FULLY_SIGNED
    count = condition.signature_count
    if count == 0:
        return SigningState.UNSIGNED
    if count < condition.signatures_required:
        return SigningState.PARTIALLY_SIGNED
    return SigningState.FULLY_SIGNED


class TransactionSigner:
    """
    Incremental signer for one transaction.

    Construct it over an unsigned or partially signed transaction; existing
    origin signatures are replayed so signing resumes at the right point of
    the sighash chain.
    """

    def __init__(self, transaction: Transaction):
        """
        Initialize signer.

        Args:
            transaction: Transaction whose authorization will be mutated
        """
        self.transaction = transaction
        self.sig_hash = transaction.sign_begin()
        self.origin_done = False
        self.check_oversign = True
        self.check_overlap = True
        self._origin_keys: Set[bytes] = set()
        self._sponsor_keys: Set[bytes] = set()
        self._sponsor_sig_hash: Optional[str] = None

        condition = transaction.auth.spending_condition
        if isinstance(condition, MultiSigSpendingCondition) and condition.fields:
            self._replay_origin(condition)
        elif isinstance(condition, SingleSigSpendingCondition) and not condition.signature.is_empty:
            key, _ = next_verification(bytes.fromhex(self.sig_hash), AuthType.STANDARD, condition.fee,
                                       condition.nonce, condition.key_encoding, condition.signature)
            self._origin_keys.add(compress_public_key(key))

    def _replay_origin(self, condition: MultiSigSpendingCondition) -> None:
        cur = bytes.fromhex(self.sig_hash)
        for auth_field in condition.fields:
            if not auth_field.is_signature:
                self._origin_keys.add(compress_public_key(auth_field.contents.data))
                continue
            key, next_hash = next_verification(cur, AuthType.STANDARD, condition.fee, condition.nonce,
                                               auth_field.pub_key_encoding, auth_field.contents)
            self._origin_keys.add(compress_public_key(key))
            if condition.is_sequential:
                cur = next_hash
        self.sig_hash = cur.hex()
        logger.debug(f"Resumed signer with {condition.signature_count}/{condition.signatures_required} signatures")

    @classmethod
    def create_sponsor_signer(cls, transaction: Transaction,
                              sponsor_spending_condition: SpendingCondition) -> TransactionSigner:
        """
        Attach a sponsor to an origin-signed transaction and return a signer
        that only accepts sponsor signatures.

        Raises:
            SigningError: If the transaction is not sponsored
        """
        if not isinstance(transaction.auth, SponsoredAuthorization):
            raise SigningError("Cannot add sponsor to a non-sponsored transaction")
        transaction.set_sponsor(sponsor_spending_condition)
        signer = cls(transaction)
        signer.origin_done = True
        return signer

    @property
    def state(self) -> SigningState:
        """Origin signing state."""
        return condition_state(self.transaction.auth.spending_condition)

    @property
    def sponsor_state(self) -> Optional[SigningState]:
        auth = self.transaction.auth
        if not isinstance(auth, SponsoredAuthorization):
            return None
        return condition_state(auth.sponsor_spending_condition)

    def _check_can_sign(self, condition: SpendingCondition, key: Secp256k1PrivateKey, seen: Set[bytes]) -> None:
        if self.check_oversign and condition_state(condition) == SigningState.FULLY_SIGNED:
            raise SigningError("Condition already has all required signatures", ErrorCode.TOO_MANY_SIGNATURES)
        if self.check_overlap and key.public_key().compressed() in seen:
            raise SigningError("Key has already signed this condition", ErrorCode.DUPLICATE_SIGNER,
                               {"public_key": key.public_key_bytes.hex()})

    def sign_origin(self, private_key: PrivateKeyLike) -> None:
        """
        Sign the origin condition and advance the sighash.

        Raises:
            SigningError: After sponsor signing, on over-signing, or on a
                key that already signed
        """
        if self.origin_done:
            raise SigningError("Cannot sign origin after sponsor key")
        key = Secp256k1PrivateKey.parse(private_key)
        condition = self.transaction.auth.spending_condition
        self._check_can_sign(condition, key, self._origin_keys)

        next_hash = self.transaction.sign_next_origin(self.sig_hash, key)
        self._origin_keys.add(key.public_key().compressed())
        if isinstance(condition, SingleSigSpendingCondition) or condition.is_sequential:
            self.sig_hash = next_hash
        logger.debug(f"Origin signing state: {self.state.value}")

    def append_origin(self, public_key: Union[KeyLike, PublicKey]) -> None:
        """Record a non-signing multi-sig member by its public key."""
        if self.origin_done:
            raise SigningError("Cannot append public key to origin after sponsor key")
        key = public_key if isinstance(public_key, PublicKey) else PublicKey(public_key)
        self.transaction.append_pubkey(key)
        self._origin_keys.add(compress_public_key(key.data))

    def sign_sponsor(self, private_key: PrivateKeyLike) -> None:
        """
        Sign as sponsor, starting from the fully verified origin sighash.

        Raises:
            SigningError: If the transaction is not sponsored or the sponsor
                condition is already fully signed
            VerificationError: If the origin signatures do not verify
        """
        auth = self.transaction.auth
        if not isinstance(auth, SponsoredAuthorization):
            raise SigningError("Cannot sign sponsor on a non-sponsored transaction")
        key = Secp256k1PrivateKey.parse(private_key)
        condition = auth.sponsor_spending_condition
        self._check_can_sign(condition, key, self._sponsor_keys)

        if self._sponsor_sig_hash is None:
            self._sponsor_sig_hash = self.transaction.verify_origin()
        next_hash = self.transaction.sign_next_sponsor(self._sponsor_sig_hash, key)
        self._sponsor_keys.add(key.public_key().compressed())
        if isinstance(condition, SingleSigSpendingCondition) or condition.is_sequential:
            self._sponsor_sig_hash = next_hash
        self.origin_done = True
        logger.debug(f"Sponsor signing state: {self.sponsor_state.value}")

    def get_tx_in_complete(self) -> Transaction:
        """The transaction as signed so far."""
        return self.transaction

