"""
Transaction assembly and serialization.

Wire layout::

    version u8 | chain_id u32 | authorization | anchor_mode u8 |
    post_condition_mode u8 | post_conditions (u32 count) | payload

The transaction id is the SHA-512/256 of the serialized bytes.
"""

from __future__ import annotations
import copy
import logging
from typing import List, Optional, Sequence, Union

from ..codec.hashes import txid_from_data
from ..codec.reader import BinaryReader
from ..codec.writer import BinaryWriter
from ..crypto.secp256k1 import KeyLike, Secp256k1PrivateKey
from ..enums import (
    AnchorMode,
    AuthType,
    PostConditionMode,
    PubKeyEncoding,
    TransactionVersion,
    WireType,
)
from ..runtime.errors import DecodeError, SigningError
from ..wire.codec import deserialize_lp_list, serialize_lp_list
from ..wire.types import LengthPrefixedList, PublicKey
from .authorization import (
    Authorization,
    MultiSigSpendingCondition,
    SingleSigSpendingCondition,
    SpendingCondition,
    SponsoredAuthorization,
    StandardAuthorization,
    check_u64,
    deserialize_authorization,
    into_initial_sighash_auth,
    next_signature,
    public_key_auth_field,
    serialize_authorization,
    signature_auth_field,
    verify_spending_condition,
)
from .payload import Payload, deserialize_payload, serialize_payload
from .postconditions import PostCondition

logger = logging.getLogger(__name__)


class Transaction:
    """
    A transaction under construction or ready for broadcast.

    The authorization is mutated in place while fees, nonces, the sponsor
    and signatures are filled in. A Transaction must not be signed from
    more than one thread at a time.
    """

    def __init__(self, version: TransactionVersion, chain_id: int, auth: Authorization, payload: Payload,
                 post_conditions: Optional[Sequence[PostCondition]] = None,
                 post_condition_mode: PostConditionMode = PostConditionMode.DENY,
                 anchor_mode: AnchorMode = AnchorMode.ANY):
        """
        Initialize a transaction.

        Args:
            version: Mainnet or testnet transaction version
            chain_id: 32-bit chain identifier
            auth: Standard or sponsored authorization
            payload: What the transaction does
            post_conditions: Asset movement assertions
            post_condition_mode: ALLOW or DENY transfers not covered by post-conditions
            anchor_mode: Block anchoring preference
        """
        self.version = TransactionVersion(version)
        self.chain_id = chain_id
        self.auth = auth
        self.payload = payload
        self.post_conditions: List[PostCondition] = list(post_conditions or [])
        self.post_condition_mode = PostConditionMode(post_condition_mode)
        self.anchor_mode = AnchorMode(anchor_mode)

    @property
    def is_sponsored(self) -> bool:
        return isinstance(self.auth, SponsoredAuthorization)

    # Serialization

    def serialize(self) -> bytes:
        writer = BinaryWriter()
        writer.u8(self.version)
        writer.u32be(self.chain_id)
        serialize_authorization(writer, self.auth)
        writer.u8(self.anchor_mode)
        writer.u8(self.post_condition_mode)
        serialize_lp_list(writer, LengthPrefixedList(tuple(self.post_conditions)))
        serialize_payload(writer, self.payload)
        return writer.to_bytes()

    def serialize_hex(self) -> str:
        return self.serialize().hex()

    @classmethod
    def deserialize(cls, data: Union[bytes, str, BinaryReader]) -> Transaction:
        """
        Parse a serialized transaction.

        Args:
            data: Bytes, hex string, or a reader positioned at the version byte

        Raises:
            DecodeError: If a tag is unknown or trailing bytes remain
            MalformedLengthError: If the buffer ends inside the transaction
        """
        if isinstance(data, str):
            data = bytes.fromhex(data[2:] if data.startswith("0x") else data)
        reader = data if isinstance(data, BinaryReader) else BinaryReader(data)

        version_byte = reader.u8()
        try:
            version = TransactionVersion(version_byte)
        except ValueError:
            raise DecodeError(f"Unknown transaction version: 0x{version_byte:02x}")
        chain_id = reader.u32be()
        auth = deserialize_authorization(reader)
        anchor_byte = reader.u8()
        mode_byte = reader.u8()
        try:
            anchor_mode = AnchorMode(anchor_byte)
            post_condition_mode = PostConditionMode(mode_byte)
        except ValueError as e:
            raise DecodeError("Unknown anchor or post-condition mode", cause=e)
        post_conditions = deserialize_lp_list(reader, WireType.POST_CONDITION)
        payload = deserialize_payload(reader)

        if not isinstance(data, BinaryReader) and not reader.eof:
            raise DecodeError(f"{reader.remaining} trailing bytes after transaction")

        return cls(version, chain_id, auth, payload, list(post_conditions), post_condition_mode, anchor_mode)

    def txid(self) -> str:
        """Hex transaction id."""
        return txid_from_data(self.serialize()).hex()

    # Sighash entry points

    def _initial_sighash(self) -> str:
        tx = copy.deepcopy(self)
        tx.auth = into_initial_sighash_auth(tx.auth)
        return tx.txid()

    def sign_begin(self) -> str:
        """Sighash the first origin signer signs from."""
        return self._initial_sighash()

    def verify_begin(self) -> str:
        return self._initial_sighash()

    def verify_origin(self) -> str:
        """
        Verify the origin signatures.

        Returns:
            Hex sighash after the last origin signature, the starting point
            for the sponsor

        Raises:
            VerificationError: If the origin condition does not verify
        """
        sighash, _ = verify_spending_condition(self.auth.spending_condition,
                                               bytes.fromhex(self.verify_begin()), AuthType.STANDARD)
        return sighash.hex()

    def verify_sponsor(self) -> str:
        if not isinstance(self.auth, SponsoredAuthorization):
            raise SigningError("Transaction is not sponsored")
        sighash, _ = verify_spending_condition(self.auth.sponsor_spending_condition,
                                               bytes.fromhex(self.verify_origin()), AuthType.SPONSORED)
        return sighash.hex()

    # Signing

    def _sign_and_append(self, condition: SpendingCondition, cur_sighash: str, auth_type: AuthType,
                         private_key: Union[KeyLike, Secp256k1PrivateKey]) -> str:
        key = Secp256k1PrivateKey.parse(private_key)
        signature, next_sighash = next_signature(bytes.fromhex(cur_sighash), auth_type,
                                                 condition.fee, condition.nonce, key)
        encoding = PubKeyEncoding.COMPRESSED if key.compressed else PubKeyEncoding.UNCOMPRESSED
        if isinstance(condition, SingleSigSpendingCondition):
            condition.signature = signature
        else:
            condition.fields.append(signature_auth_field(signature, encoding))
        logger.debug(f"Appended {auth_type.name.lower()} signature from {key.public_key_bytes.hex()[:16]}...")
        return next_sighash.hex()

    def sign_next_origin(self, cur_sighash: str, private_key: Union[KeyLike, Secp256k1PrivateKey]) -> str:
        """
        Sign the origin condition at ``cur_sighash`` and record the signature.

        Returns:
            Hex sighash for the next signer
        """
        return self._sign_and_append(self.auth.spending_condition, cur_sighash, AuthType.STANDARD, private_key)

    def sign_next_sponsor(self, cur_sighash: str, private_key: Union[KeyLike, Secp256k1PrivateKey]) -> str:
        if not isinstance(self.auth, SponsoredAuthorization):
            raise SigningError("Cannot sign sponsor on a non-sponsored transaction")
        return self._sign_and_append(self.auth.sponsor_spending_condition, cur_sighash,
                                     AuthType.SPONSORED, private_key)

    def append_pubkey(self, public_key: Union[KeyLike, PublicKey]) -> None:
        """Append a non-signing member's public key to the origin multi-sig condition."""
        condition = self.auth.spending_condition
        if not isinstance(condition, MultiSigSpendingCondition):
            raise SigningError("Can only append public keys to a multi-sig condition")
        condition.fields.append(public_key_auth_field(public_key))

    # Mutation

    def set_sponsor(self, sponsor_spending_condition: SpendingCondition) -> None:
        if not isinstance(self.auth, SponsoredAuthorization):
            raise SigningError("Cannot set sponsor on a non-sponsored transaction")
        self.auth.sponsor_spending_condition = sponsor_spending_condition

    def set_fee(self, amount: int) -> None:
        """Set the fee; on a sponsored transaction the sponsor pays it."""
        check_u64(amount, "Fee")
        if isinstance(self.auth, SponsoredAuthorization):
            self.auth.sponsor_spending_condition.fee = amount
        else:
            self.auth.spending_condition.fee = amount

    def set_nonce(self, nonce: int) -> None:
        check_u64(nonce, "Nonce")
        self.auth.spending_condition.nonce = nonce

    def set_sponsor_nonce(self, nonce: int) -> None:
        if not isinstance(self.auth, SponsoredAuthorization):
            raise SigningError("Cannot set sponsor nonce on a non-sponsored transaction")
        check_u64(nonce, "Nonce")
        self.auth.sponsor_spending_condition.nonce = nonce

    def __repr__(self) -> str:
        return (f"Transaction(version={self.version.name}, payload={type(self.payload).__name__}, "
                f"auth={type(self.auth).__name__})")


__all__ = ["Transaction", "StandardAuthorization", "SponsoredAuthorization"]
