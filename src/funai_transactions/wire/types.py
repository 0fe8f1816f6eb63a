"""
Wire primitive types.

Immutable records for the fixed and length-prefixed structures of the
consensus format. Every constructor validates its limits so that an invalid
primitive never exists; the codec in ``wire.codec`` can therefore serialize
without re-checking.
"""

from __future__ import annotations
import re
from dataclasses import dataclass, field
from typing import ClassVar, Tuple, Union

from ..codec.c32 import c32_address, c32_address_decode
from ..enums import (
    ADDRESS_HASH_LENGTH,
    CLARITY_MAX_NAME_LENGTH,
    COMPRESSED_PUBKEY_LENGTH_BYTES,
    CONTRACT_MAX_NAME_LENGTH,
    MEMO_MAX_LENGTH_BYTES,
    RECOVERABLE_ECDSA_SIG_LENGTH_BYTES,
    UNCOMPRESSED_PUBKEY_LENGTH_BYTES,
    AuthFieldType,
    PostConditionPrincipalId,
    PubKeyEncoding,
    WireType,
)
from ..runtime.errors import (
    InvalidIdentifierError,
    InvalidValueError,
    ValueTooLongError,
)

CLARITY_NAME_REGEX = re.compile(r"^[a-zA-Z]([a-zA-Z0-9]|[-_!?+<>=/*])*$|^[-+=/*]$|^[<>]=?$")
CONTRACT_NAME_REGEX = re.compile(r"^[a-zA-Z]([a-zA-Z0-9]|[-_])*$")

LENGTH_PREFIX_WIDTHS = (1, 2, 4)


def validate_clarity_name(name: str, kind: str = "clarity name") -> str:
    """Check a function, asset or tuple-key name against the chain's grammar."""
    if not name or len(name) > CLARITY_MAX_NAME_LENGTH or not CLARITY_NAME_REGEX.match(name):
        raise InvalidIdentifierError(name, kind)
    return name


def validate_contract_name(name: str) -> str:
    if not name or len(name) > CONTRACT_MAX_NAME_LENGTH or not CONTRACT_NAME_REGEX.match(name):
        raise InvalidIdentifierError(name, "contract name")
    return name


def _hex_or_bytes(value: Union[str, bytes]) -> bytes:
    if isinstance(value, str):
        try:
            return bytes.fromhex(value)
        except ValueError as e:
            raise InvalidValueError(f"Invalid hex string: {value!r}", cause=e)
    return bytes(value)


@dataclass(frozen=True)
class Address:
    """Account address: version byte plus 20-byte hash160."""

    version: int
    hash160: bytes

    wire_type: ClassVar[WireType] = WireType.ADDRESS

    def __post_init__(self):
        if not 0 <= self.version <= 0xFF:
            raise InvalidValueError(f"Address version must fit in one byte, got {self.version}")
        if len(self.hash160) != ADDRESS_HASH_LENGTH:
            raise InvalidValueError(f"Address hash must be 20 bytes, got {len(self.hash160)}")

    @classmethod
    def from_string(cls, address: str) -> Address:
        """Parse a c32check address such as ``SP...``."""
        version, hash_bytes = c32_address_decode(address)
        return cls(version, hash_bytes)

    def to_string(self) -> str:
        return c32_address(self.version, self.hash160)

    def __str__(self) -> str:
        return self.to_string()


@dataclass(frozen=True)
class LengthPrefixedString:
    """
    UTF-8 string preceded by a big-endian byte length.

    The prefix width and the maximum content length are declared at the use
    site: contract and function names use a 1-byte prefix with a 128-byte
    cap, code bodies a 4-byte prefix with a 100 000-byte cap.
    """

    content: str
    length_prefix_bytes: int = 1
    max_length_bytes: int = CLARITY_MAX_NAME_LENGTH

    wire_type: ClassVar[WireType] = WireType.LENGTH_PREFIXED_STRING

    def __post_init__(self):
        if self.length_prefix_bytes not in LENGTH_PREFIX_WIDTHS:
            raise InvalidValueError(f"Unsupported length prefix width: {self.length_prefix_bytes}")
        size = len(self.content.encode("utf-8"))
        limit = min(self.max_length_bytes, (1 << (8 * self.length_prefix_bytes)) - 1)
        if size > limit:
            raise ValueTooLongError(size, limit, "string")

    def encoded(self) -> bytes:
        return self.content.encode("utf-8")


@dataclass(frozen=True)
class MemoString:
    """
    Fixed 34-byte memo, zero padded on the right.

    Trailing NUL characters are rejected: decoding strips the padding, so
    they could not be told apart from it.
    """

    content: str = ""

    wire_type: ClassVar[WireType] = WireType.MEMO_STRING

    def __post_init__(self):
        size = len(self.content.encode("utf-8"))
        if size > MEMO_MAX_LENGTH_BYTES:
            raise ValueTooLongError(size, MEMO_MAX_LENGTH_BYTES, "memo")
        if self.content.endswith("\x00"):
            raise InvalidValueError("Memo content must not end with a NUL character")


@dataclass(frozen=True)
class PublicKey:
    """secp256k1 public key, 33 bytes compressed or 65 bytes uncompressed."""

    data: bytes

    wire_type: ClassVar[WireType] = WireType.PUBLIC_KEY

    def __post_init__(self):
        object.__setattr__(self, "data", _hex_or_bytes(self.data))
        if len(self.data) == COMPRESSED_PUBKEY_LENGTH_BYTES:
            if self.data[0] not in (0x00, 0x02, 0x03):
                raise InvalidValueError(f"Invalid compressed public key prefix: 0x{self.data[0]:02x}")
        elif len(self.data) == UNCOMPRESSED_PUBKEY_LENGTH_BYTES:
            if self.data[0] != 0x04:
                raise InvalidValueError(f"Invalid uncompressed public key prefix: 0x{self.data[0]:02x}")
        else:
            raise InvalidValueError(f"Public key must be 33 or 65 bytes, got {len(self.data)}")

    @property
    def is_compressed(self) -> bool:
        return len(self.data) == COMPRESSED_PUBKEY_LENGTH_BYTES

    @property
    def encoding(self) -> PubKeyEncoding:
        return PubKeyEncoding.COMPRESSED if self.is_compressed else PubKeyEncoding.UNCOMPRESSED

    def hex(self) -> str:
        return self.data.hex()


@dataclass(frozen=True)
class MessageSignature:
    """65-byte recoverable signature: recovery id followed by r and s."""

    data: bytes = field(default=bytes(RECOVERABLE_ECDSA_SIG_LENGTH_BYTES))

    wire_type: ClassVar[WireType] = WireType.MESSAGE_SIGNATURE

    def __post_init__(self):
        object.__setattr__(self, "data", _hex_or_bytes(self.data))
        if len(self.data) != RECOVERABLE_ECDSA_SIG_LENGTH_BYTES:
            raise InvalidValueError(f"Message signature must be 65 bytes, got {len(self.data)}")

    @classmethod
    def empty(cls) -> MessageSignature:
        return cls(bytes(RECOVERABLE_ECDSA_SIG_LENGTH_BYTES))

    @property
    def is_empty(self) -> bool:
        return not any(self.data)

    def hex(self) -> str:
        return self.data.hex()


@dataclass(frozen=True)
class TransactionAuthField:
    """One entry of a multi-sig condition: a bare public key or a signature."""

    pub_key_encoding: PubKeyEncoding
    contents: Union[PublicKey, MessageSignature]

    wire_type: ClassVar[WireType] = WireType.TRANSACTION_AUTH_FIELD

    @property
    def is_signature(self) -> bool:
        return isinstance(self.contents, MessageSignature)

    @property
    def field_type(self) -> AuthFieldType:
        compressed = self.pub_key_encoding == PubKeyEncoding.COMPRESSED
        if self.is_signature:
            return AuthFieldType.SIGNATURE_COMPRESSED if compressed else AuthFieldType.SIGNATURE_UNCOMPRESSED
        return AuthFieldType.PUBLIC_KEY_COMPRESSED if compressed else AuthFieldType.PUBLIC_KEY_UNCOMPRESSED


@dataclass(frozen=True)
class AssetInfo:
    """Identifies a fungible or non-fungible asset class defined by a contract."""

    address: Address
    contract_name: LengthPrefixedString
    asset_name: LengthPrefixedString

    wire_type: ClassVar[WireType] = WireType.ASSET


@dataclass(frozen=True)
class OriginPrincipal:
    """Post-condition principal meaning "whoever signs as origin"."""

    prefix: ClassVar[PostConditionPrincipalId] = PostConditionPrincipalId.ORIGIN
    wire_type: ClassVar[WireType] = WireType.PRINCIPAL


@dataclass(frozen=True)
class StandardPrincipal:
    address: Address

    prefix: ClassVar[PostConditionPrincipalId] = PostConditionPrincipalId.STANDARD
    wire_type: ClassVar[WireType] = WireType.PRINCIPAL


@dataclass(frozen=True)
class ContractPrincipal:
    address: Address
    contract_name: LengthPrefixedString

    prefix: ClassVar[PostConditionPrincipalId] = PostConditionPrincipalId.CONTRACT
    wire_type: ClassVar[WireType] = WireType.PRINCIPAL


PostConditionPrincipal = Union[OriginPrincipal, StandardPrincipal, ContractPrincipal]


@dataclass(frozen=True)
class LengthPrefixedList:
    """Sequence of wire items preceded by a big-endian element count."""

    values: Tuple = ()
    length_prefix_bytes: int = 4

    wire_type: ClassVar[WireType] = WireType.LENGTH_PREFIXED_LIST

    def __post_init__(self):
        object.__setattr__(self, "values", tuple(self.values))
        if self.length_prefix_bytes not in LENGTH_PREFIX_WIDTHS:
            raise InvalidValueError(f"Unsupported length prefix width: {self.length_prefix_bytes}")
        if len(self.values) >= (1 << (8 * self.length_prefix_bytes)):
            raise ValueTooLongError(len(self.values), (1 << (8 * self.length_prefix_bytes)) - 1, "list")

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self):
        return iter(self.values)


def create_lp_string(content: str, length_prefix_bytes: int = 1,
                     max_length_bytes: int = CLARITY_MAX_NAME_LENGTH) -> LengthPrefixedString:
    return LengthPrefixedString(content, length_prefix_bytes, max_length_bytes)


def create_address(address: Union[str, Address]) -> Address:
    if isinstance(address, Address):
        return address
    return Address.from_string(address)


def create_asset_info(address: Union[str, Address], contract_name: str, asset_name: str) -> AssetInfo:
    return AssetInfo(
        create_address(address),
        create_lp_string(validate_contract_name(contract_name)),
        create_lp_string(validate_clarity_name(asset_name, "asset name")),
    )


def create_post_condition_principal(principal: str) -> PostConditionPrincipal:
    """
    Parse ``"origin"``, a standard address, or ``address.contract-name``.
    """
    if principal == "origin":
        return OriginPrincipal()
    if "." in principal:
        address, contract_name = principal.split(".", 1)
        return ContractPrincipal(create_address(address),
                                 create_lp_string(validate_contract_name(contract_name)))
    return StandardPrincipal(create_address(principal))


def create_transaction_auth_field(pub_key_encoding: PubKeyEncoding,
                                  contents: Union[PublicKey, MessageSignature]) -> TransactionAuthField:
    return TransactionAuthField(PubKeyEncoding(pub_key_encoding), contents)
