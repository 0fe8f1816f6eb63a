"""
Multi-sig key ordering and signing.

A multi-sig address commits to its public keys in one specific order, but
callers usually hold the keys as an unordered set. The address is tried
against the keys as given and then in ascending byte order; whichever
reproduces the signer hash is the order signatures must be appended in.
"""

from __future__ import annotations
import logging
from typing import Dict, List, Sequence, Union

from ..crypto.secp256k1 import KeyLike, Secp256k1PrivateKey
from ..enums import AddressHashMode
from ..runtime.errors import AddressKeyMismatchError, SigningError
from ..tx.authorization import MultiSigSpendingCondition, address_hash_from_public_keys
from ..tx.transaction import Transaction
from .signer import PrivateKeyLike, TransactionSigner

logger = logging.getLogger(__name__)


def _as_bytes(key: KeyLike) -> bytes:
    return bytes.fromhex(key) if isinstance(key, str) else bytes(key)


def sort_public_keys_for_address(public_keys: Sequence[KeyLike], signatures_required: int,
                                 hash_mode: AddressHashMode, address_hash: bytes) -> List[bytes]:
    """
    Find the key order that reproduces a multi-sig address.

    Args:
        public_keys: Keys of the multi-sig members, in any order
        signatures_required: Threshold of the account
        hash_mode: Hash mode of the account
        address_hash: 20-byte signer hash the order must reproduce

    Returns:
        The keys in commitment order (as given, or ascending byte order)

    Raises:
        AddressKeyMismatchError: If neither order reproduces ``address_hash``
    """
    keys = [_as_bytes(k) for k in public_keys]

    if address_hash_from_public_keys(hash_mode, signatures_required, keys) == address_hash:
        return keys

    sorted_keys = sorted(keys)
    if address_hash_from_public_keys(hash_mode, signatures_required, sorted_keys) == address_hash:
        logger.debug("Multi-sig address matches sorted key order")
        return sorted_keys

    raise AddressKeyMismatchError(details={"address_hash": address_hash.hex()})


def sign_append_multisig(transaction: Transaction, public_keys: Sequence[KeyLike],
                         signer_keys: Sequence[PrivateKeyLike],
                         address_hash: Union[bytes, None] = None) -> TransactionSigner:
    """
    Sign a multi-sig origin in the order its address commits to.

    Each member whose public key matches one of ``signer_keys`` signs; every
    other member's raw public key is appended instead.

    Args:
        transaction: Transaction with an unsigned multi-sig origin
        public_keys: All member public keys, in any order
        signer_keys: Private keys of the members that sign
        address_hash: Signer hash to match (defaults to the condition's)

    Returns:
        The signer used, for further inspection

    Raises:
        AddressKeyMismatchError: If the keys cannot reproduce the address
        SigningError: If the origin is not multi-sig
    """
    condition = transaction.auth.spending_condition
    if not isinstance(condition, MultiSigSpendingCondition):
        raise SigningError("Origin spending condition is not multi-sig")

    ordered = sort_public_keys_for_address(public_keys, condition.signatures_required, condition.hash_mode,
                                           address_hash if address_hash is not None else condition.signer)

    by_public_key: Dict[bytes, Secp256k1PrivateKey] = {}
    for key in signer_keys:
        parsed = Secp256k1PrivateKey.parse(key)
        by_public_key[parsed.public_key_bytes] = parsed

    signer = TransactionSigner(transaction)
    for public_key in ordered:
        private_key = by_public_key.get(public_key)
        if private_key is None:
            signer.append_origin(public_key)
        else:
            signer.sign_origin(private_key)
    logger.debug(f"Signed multi-sig origin with {len(by_public_key)} of {len(ordered)} keys")
    return signer
