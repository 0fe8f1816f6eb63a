"""
Spending conditions and transaction authorization.

A spending condition identifies the paying account (by hash mode and the
hash160 of its public key or redeem script), carries its nonce and fee, and
holds the signature(s). A standard authorization has one condition; a
sponsored authorization adds the sponsor's condition, which pays the fee.

Signatures are chained: each signer signs a "presign" hash derived from the
running sighash, the auth type, fee and nonce, and the running sighash then
advances over the appended signature.
"""

from __future__ import annotations
import copy
import logging
from dataclasses import dataclass, field
from typing import ClassVar, List, Optional, Sequence, Tuple, Union

from ..codec.hashes import hash160, sha256_bytes, sha512_256
from ..codec.reader import BinaryReader
from ..codec.writer import BinaryWriter
from ..crypto.secp256k1 import (
    KeyLike,
    Secp256k1Error,
    Secp256k1PrivateKey,
    recover_public_key,
)
from ..enums import (
    ADDRESS_HASH_LENGTH,
    MAX_U64,
    MULTI_SIG_HASH_MODES,
    NON_SEQUENTIAL_HASH_MODES,
    SINGLE_SIG_HASH_MODES,
    AddressHashMode,
    AuthType,
    PubKeyEncoding,
)
from ..runtime.errors import (
    DecodeError,
    ErrorCode,
    InvalidValueError,
    ValidationError,
    VerificationError,
)
from ..wire.codec import (
    deserialize_message_signature,
    deserialize_transaction_auth_field,
    serialize_message_signature,
    serialize_transaction_auth_field,
)
from ..wire.types import (
    Address,
    MessageSignature,
    PublicKey,
    TransactionAuthField,
    create_transaction_auth_field,
)

logger = logging.getLogger(__name__)

# Width of one appended signature field: type byte plus 65-byte signature
AUTH_FIELD_SIGNATURE_LENGTH = 66

SEGWIT_HASH_MODES = frozenset({
    AddressHashMode.P2WPKH,
    AddressHashMode.P2WSH,
    AddressHashMode.P2WSH_NON_SEQUENTIAL,
})

PLACEHOLDER_PUBLIC_KEY = "00" * 33

OP_CHECKMULTISIG = 0xAE


def check_u64(value: int, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= MAX_U64:
        raise InvalidValueError(f"{what} must be an unsigned 64-bit integer, got {value!r}")
    return value


def _public_key(key: Union[KeyLike, PublicKey]) -> PublicKey:
    return key if isinstance(key, PublicKey) else PublicKey(key)


@dataclass
class SingleSigSpendingCondition:
    hash_mode: AddressHashMode
    signer: bytes
    nonce: int
    fee: int
    key_encoding: PubKeyEncoding
    signature: MessageSignature = field(default_factory=MessageSignature.empty)

    def __post_init__(self):
        if self.hash_mode not in SINGLE_SIG_HASH_MODES:
            raise ValidationError(f"Hash mode {self.hash_mode!r} is not a single-sig mode",
                                  ErrorCode.INVALID_HASH_MODE)
        self.hash_mode = AddressHashMode(self.hash_mode)
        self.key_encoding = PubKeyEncoding(self.key_encoding)
        if len(self.signer) != ADDRESS_HASH_LENGTH:
            raise InvalidValueError(f"Signer hash must be 20 bytes, got {len(self.signer)}")
        check_u64(self.nonce, "Nonce")
        check_u64(self.fee, "Fee")


@dataclass
class MultiSigSpendingCondition:
    hash_mode: AddressHashMode
    signer: bytes
    nonce: int
    fee: int
    fields: List[TransactionAuthField]
    signatures_required: int

    def __post_init__(self):
        if self.hash_mode not in MULTI_SIG_HASH_MODES:
            raise ValidationError(f"Hash mode {self.hash_mode!r} is not a multi-sig mode",
                                  ErrorCode.INVALID_HASH_MODE)
        self.hash_mode = AddressHashMode(self.hash_mode)
        self.fields = list(self.fields)
        if len(self.signer) != ADDRESS_HASH_LENGTH:
            raise InvalidValueError(f"Signer hash must be 20 bytes, got {len(self.signer)}")
        if not 0 < self.signatures_required <= 0xFFFF:
            raise InvalidValueError(f"signatures_required must be between 1 and 65535, got {self.signatures_required}")
        check_u64(self.nonce, "Nonce")
        check_u64(self.fee, "Fee")

    @property
    def signature_count(self) -> int:
        return sum(1 for f in self.fields if f.is_signature)

    @property
    def is_sequential(self) -> bool:
        return self.hash_mode not in NON_SEQUENTIAL_HASH_MODES


SpendingCondition = Union[SingleSigSpendingCondition, MultiSigSpendingCondition]


@dataclass
class StandardAuthorization:
    spending_condition: SpendingCondition

    auth_type: ClassVar[AuthType] = AuthType.STANDARD


@dataclass
class SponsoredAuthorization:
    spending_condition: SpendingCondition
    sponsor_spending_condition: SpendingCondition

    auth_type: ClassVar[AuthType] = AuthType.SPONSORED


Authorization = Union[StandardAuthorization, SponsoredAuthorization]


# Address hashing

def multisig_redeem_script(signatures_required: int, public_keys: Sequence[bytes]) -> bytes:
    """``OP_m <pk1> ... <pkn> OP_n OP_CHECKMULTISIG``"""
    if not 0 < signatures_required <= len(public_keys) <= 16:
        raise InvalidValueError(
            f"Cannot build a {signatures_required}-of-{len(public_keys)} redeem script"
        )
    script = bytearray([0x50 + signatures_required])
    for key in public_keys:
        script.append(len(key))
        script.extend(key)
    script.extend([0x50 + len(public_keys), OP_CHECKMULTISIG])
    return bytes(script)


def address_hash_from_public_keys(hash_mode: AddressHashMode, signatures_required: int,
                                  public_keys: Sequence[Union[bytes, PublicKey]]) -> bytes:
    """
    Derive the 20-byte signer hash for a set of public keys.

    Args:
        hash_mode: How the keys are committed to
        signatures_required: Threshold (1 for single-sig modes)
        public_keys: Keys in commitment order

    Returns:
        hash160 identifying the account

    Raises:
        ValidationError: If the key count does not suit the hash mode, or a
            segwit mode is given an uncompressed key
    """
    keys = [k.data if isinstance(k, PublicKey) else bytes(k) for k in public_keys]
    if hash_mode in SEGWIT_HASH_MODES and any(len(k) != 33 for k in keys):
        raise ValidationError("Segwit hash modes require compressed public keys", ErrorCode.INVALID_HASH_MODE)

    if hash_mode in SINGLE_SIG_HASH_MODES:
        if len(keys) != 1:
            raise ValidationError(f"Single-sig hash mode needs exactly one key, got {len(keys)}",
                                  ErrorCode.INVALID_HASH_MODE)
        if hash_mode == AddressHashMode.P2PKH:
            return hash160(keys[0])
        return hash160(b"\x00\x14" + hash160(keys[0]))

    if hash_mode in (AddressHashMode.P2SH, AddressHashMode.P2SH_NON_SEQUENTIAL):
        return hash160(multisig_redeem_script(signatures_required, keys))
    if hash_mode in (AddressHashMode.P2WSH, AddressHashMode.P2WSH_NON_SEQUENTIAL):
        return hash160(b"\x00\x20" + sha256_bytes(multisig_redeem_script(signatures_required, keys)))

    raise ValidationError(f"Unknown hash mode: {hash_mode!r}", ErrorCode.INVALID_HASH_MODE)


def address_from_public_keys(version: int, hash_mode: AddressHashMode, signatures_required: int,
                             public_keys: Sequence[Union[bytes, PublicKey]]) -> Address:
    return Address(version, address_hash_from_public_keys(hash_mode, signatures_required, public_keys))


# Construction

def create_single_sig_spending_condition(hash_mode: AddressHashMode, public_key: Union[KeyLike, PublicKey],
                                         nonce: int, fee: int) -> SingleSigSpendingCondition:
    """
    Create a single-sig spending condition with an empty signature.

    Args:
        hash_mode: P2PKH or P2WPKH
        public_key: 33- or 65-byte public key (bytes or hex)
        nonce: Account nonce
        fee: Fee in micro-units
    """
    key = _public_key(public_key)
    signer = address_hash_from_public_keys(hash_mode, 1, [key])
    return SingleSigSpendingCondition(hash_mode, signer, nonce, fee, key.encoding)


def create_multi_sig_spending_condition(hash_mode: AddressHashMode, signatures_required: int,
                                        public_keys: Sequence[Union[KeyLike, PublicKey]],
                                        nonce: int, fee: int) -> MultiSigSpendingCondition:
    """
    Create a multi-sig spending condition with no auth fields yet.

    The signer hash commits to ``public_keys`` in the order given.
    """
    keys = [_public_key(k) for k in public_keys]
    signer = address_hash_from_public_keys(hash_mode, signatures_required, keys)
    return MultiSigSpendingCondition(hash_mode, signer, nonce, fee, [], signatures_required)


def is_single_sig(condition: SpendingCondition) -> bool:
    return condition.hash_mode in SINGLE_SIG_HASH_MODES


def create_standard_auth(spending_condition: SpendingCondition) -> StandardAuthorization:
    return StandardAuthorization(spending_condition)


def create_sponsored_auth(spending_condition: SpendingCondition,
                          sponsor_spending_condition: Optional[SpendingCondition] = None) -> SponsoredAuthorization:
    """
    Create a sponsored authorization.

    Without an explicit sponsor condition a placeholder (P2PKH over 33 zero
    bytes, nonce and fee 0) is used until the sponsor is attached.
    """
    if sponsor_spending_condition is None:
        sponsor_spending_condition = create_single_sig_spending_condition(
            AddressHashMode.P2PKH, PLACEHOLDER_PUBLIC_KEY, 0, 0
        )
    return SponsoredAuthorization(spending_condition, sponsor_spending_condition)


def clear_spending_condition(condition: SpendingCondition) -> SpendingCondition:
    """Copy with nonce and fee zeroed and no signatures."""
    cleared = copy.deepcopy(condition)
    cleared.nonce = 0
    cleared.fee = 0
    if isinstance(cleared, SingleSigSpendingCondition):
        cleared.signature = MessageSignature.empty()
    else:
        cleared.fields = []
    return cleared


def into_initial_sighash_auth(auth: Authorization) -> Authorization:
    """The authorization as it is hashed to produce the initial sighash."""
    origin = clear_spending_condition(auth.spending_condition)
    if isinstance(auth, SponsoredAuthorization):
        return create_sponsored_auth(origin)
    return StandardAuthorization(origin)


# Sighash chain

def make_sighash_presign(cur_sighash: bytes, auth_type: AuthType, fee: int, nonce: int) -> bytes:
    writer = BinaryWriter()
    writer.bytes(cur_sighash)
    writer.u8(auth_type)
    writer.u64be(fee)
    writer.u64be(nonce)
    return sha512_256(writer.to_bytes())


def make_sighash_postsign(cur_sighash: bytes, pub_key_encoding: PubKeyEncoding,
                          signature: MessageSignature) -> bytes:
    return sha512_256(cur_sighash + bytes([pub_key_encoding]) + signature.data)


def next_signature(cur_sighash: bytes, auth_type: AuthType, fee: int, nonce: int,
                   private_key: Union[KeyLike, Secp256k1PrivateKey]) -> Tuple[MessageSignature, bytes]:
    """
    Sign at the current point of the sighash chain.

    Returns:
        Tuple of (signature, next sighash)
    """
    key = Secp256k1PrivateKey.parse(private_key)
    presign = make_sighash_presign(cur_sighash, auth_type, fee, nonce)
    signature = MessageSignature(key.sign_recoverable(presign))
    encoding = PubKeyEncoding.COMPRESSED if key.compressed else PubKeyEncoding.UNCOMPRESSED
    return signature, make_sighash_postsign(presign, encoding, signature)


def next_verification(cur_sighash: bytes, auth_type: AuthType, fee: int, nonce: int,
                      pub_key_encoding: PubKeyEncoding, signature: MessageSignature) -> Tuple[bytes, bytes]:
    """
    Recover the signer of one chained signature.

    Returns:
        Tuple of (recovered public key, next sighash)
    """
    presign = make_sighash_presign(cur_sighash, auth_type, fee, nonce)
    try:
        public_key = recover_public_key(presign, signature.data,
                                        compressed=pub_key_encoding == PubKeyEncoding.COMPRESSED)
    except Secp256k1Error as e:
        raise VerificationError("Could not recover public key from signature", cause=e)
    return public_key, make_sighash_postsign(presign, pub_key_encoding, signature)


def _verify_single_sig(condition: SingleSigSpendingCondition, initial_sighash: bytes,
                       auth_type: AuthType) -> Tuple[bytes, List[bytes]]:
    if condition.signature.is_empty:
        raise VerificationError("Single-sig condition has no signature")
    if condition.hash_mode == AddressHashMode.P2WPKH and condition.key_encoding != PubKeyEncoding.COMPRESSED:
        raise VerificationError("P2WPKH requires a compressed public key")

    public_key, next_sighash = next_verification(initial_sighash, auth_type, condition.fee, condition.nonce,
                                                 condition.key_encoding, condition.signature)
    if address_hash_from_public_keys(condition.hash_mode, 1, [public_key]) != condition.signer:
        raise VerificationError("Signature does not match the signer hash",
                                {"signer": condition.signer.hex()})
    return next_sighash, [public_key]


def _verify_multi_sig(condition: MultiSigSpendingCondition, initial_sighash: bytes,
                      auth_type: AuthType) -> Tuple[bytes, List[bytes]]:
    cur_sighash = initial_sighash
    public_keys: List[bytes] = []
    num_sigs = 0
    uses_segwit = condition.hash_mode in SEGWIT_HASH_MODES

    for auth_field in condition.fields:
        if auth_field.is_signature:
            if uses_segwit and auth_field.pub_key_encoding != PubKeyEncoding.COMPRESSED:
                raise VerificationError("Uncompressed keys are not allowed in segwit multi-sig")
            public_key, next_sighash = next_verification(cur_sighash, auth_type, condition.fee, condition.nonce,
                                                         auth_field.pub_key_encoding, auth_field.contents)
            if condition.is_sequential:
                cur_sighash = next_sighash
            num_sigs += 1
        else:
            public_key = auth_field.contents.data
        public_keys.append(public_key)

    if condition.is_sequential and num_sigs != condition.signatures_required:
        raise VerificationError(
            f"Expected {condition.signatures_required} signatures, found {num_sigs}",
            {"required": condition.signatures_required, "found": num_sigs},
        )
    if not condition.is_sequential and num_sigs < condition.signatures_required:
        raise VerificationError(
            f"Expected at least {condition.signatures_required} signatures, found {num_sigs}",
            {"required": condition.signatures_required, "found": num_sigs},
        )

    try:
        signer = address_hash_from_public_keys(condition.hash_mode, condition.signatures_required, public_keys)
    except (ValidationError, InvalidValueError) as e:
        raise VerificationError("Auth fields do not form a valid multi-sig key set", cause=e)
    if signer != condition.signer:
        raise VerificationError("Auth fields do not reproduce the signer hash",
                                {"signer": condition.signer.hex(), "derived": signer.hex()})
    return cur_sighash, public_keys


def verify_spending_condition(condition: SpendingCondition, initial_sighash: bytes,
                              auth_type: AuthType) -> Tuple[bytes, List[bytes]]:
    """
    Verify the signatures of a spending condition.

    Args:
        condition: Condition to verify
        initial_sighash: Sighash the first signer signed from
        auth_type: STANDARD for the origin, SPONSORED for the sponsor

    Returns:
        Tuple of (sighash after the last signature, public keys in field order)

    Raises:
        VerificationError: If a signature does not recover, the count is
            wrong, or the recovered keys do not hash to the signer
    """
    if isinstance(condition, SingleSigSpendingCondition):
        return _verify_single_sig(condition, initial_sighash, auth_type)
    return _verify_multi_sig(condition, initial_sighash, auth_type)


# Codec

def serialize_spending_condition(writer: BinaryWriter, condition: SpendingCondition) -> None:
    writer.u8(condition.hash_mode)
    writer.bytes(condition.signer)
    writer.u64be(condition.nonce)
    writer.u64be(condition.fee)
    if isinstance(condition, SingleSigSpendingCondition):
        writer.u8(condition.key_encoding)
        serialize_message_signature(writer, condition.signature)
    else:
        writer.u32be(len(condition.fields))
        for auth_field in condition.fields:
            serialize_transaction_auth_field(writer, auth_field)
        writer.u16be(condition.signatures_required)


def deserialize_spending_condition(reader: BinaryReader) -> SpendingCondition:
    mode_byte = reader.u8()
    try:
        hash_mode = AddressHashMode(mode_byte)
    except ValueError:
        raise DecodeError(f"Unknown hash mode: 0x{mode_byte:02x}", ErrorCode.UNKNOWN_WIRE_TYPE)

    signer = reader.bytes(ADDRESS_HASH_LENGTH)
    nonce = reader.u64be()
    fee = reader.u64be()

    if hash_mode in SINGLE_SIG_HASH_MODES:
        encoding_byte = reader.u8()
        try:
            key_encoding = PubKeyEncoding(encoding_byte)
        except ValueError:
            raise DecodeError(f"Unknown public key encoding: 0x{encoding_byte:02x}")
        signature = deserialize_message_signature(reader)
        return SingleSigSpendingCondition(hash_mode, signer, nonce, fee, key_encoding, signature)

    count = reader.u32be()
    fields = [deserialize_transaction_auth_field(reader) for _ in range(count)]
    signatures_required = reader.u16be()
    return MultiSigSpendingCondition(hash_mode, signer, nonce, fee, fields, signatures_required)


def serialize_authorization(writer: BinaryWriter, auth: Authorization) -> None:
    writer.u8(auth.auth_type)
    serialize_spending_condition(writer, auth.spending_condition)
    if isinstance(auth, SponsoredAuthorization):
        serialize_spending_condition(writer, auth.sponsor_spending_condition)


def deserialize_authorization(reader: BinaryReader) -> Authorization:
    auth_type = reader.u8()
    if auth_type == AuthType.STANDARD:
        return StandardAuthorization(deserialize_spending_condition(reader))
    if auth_type == AuthType.SPONSORED:
        origin = deserialize_spending_condition(reader)
        return SponsoredAuthorization(origin, deserialize_spending_condition(reader))
    raise DecodeError(f"Unknown authorization type: 0x{auth_type:02x}", ErrorCode.UNKNOWN_WIRE_TYPE)


def signature_auth_field(signature: MessageSignature, pub_key_encoding: PubKeyEncoding) -> TransactionAuthField:
    return create_transaction_auth_field(pub_key_encoding, signature)


def public_key_auth_field(public_key: Union[KeyLike, PublicKey]) -> TransactionAuthField:
    key = _public_key(public_key)
    return create_transaction_auth_field(key.encoding, key)
