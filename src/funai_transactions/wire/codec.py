"""
Wire primitive codec.

Serializes and deserializes the primitives in ``wire.types``. Each kind has a
``serialize_*`` function writing into a ``BinaryWriter`` and a
``deserialize_*`` function reading from a ``BinaryReader``; ``encode_wire``
and ``decode_wire`` dispatch on the primitive kind for callers that work with
byte strings and explicit cursors.
"""

from __future__ import annotations
from typing import Any, Callable, Dict, Tuple

from ..codec.reader import BinaryReader
from ..codec.writer import BinaryWriter
from ..enums import (
    ADDRESS_HASH_LENGTH,
    CLARITY_MAX_NAME_LENGTH,
    COMPRESSED_PUBKEY_LENGTH_BYTES,
    MEMO_MAX_LENGTH_BYTES,
    RECOVERABLE_ECDSA_SIG_LENGTH_BYTES,
    UNCOMPRESSED_PUBKEY_LENGTH_BYTES,
    AuthFieldType,
    PostConditionPrincipalId,
    PubKeyEncoding,
    WireType,
)
from ..runtime.errors import DecodeError, ErrorCode
from .types import (
    Address,
    AssetInfo,
    ContractPrincipal,
    LengthPrefixedList,
    LengthPrefixedString,
    MemoString,
    MessageSignature,
    OriginPrincipal,
    PostConditionPrincipal,
    PublicKey,
    StandardPrincipal,
    TransactionAuthField,
)


def _decode_utf8(raw: bytes, what: str) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError(f"{what} is not valid UTF-8", cause=e)


# Address

def serialize_address(writer: BinaryWriter, address: Address) -> None:
    writer.u8(address.version)
    writer.bytes(address.hash160)


def deserialize_address(reader: BinaryReader) -> Address:
    version = reader.u8()
    return Address(version, reader.bytes(ADDRESS_HASH_LENGTH))


# Strings

def serialize_lp_string(writer: BinaryWriter, value: LengthPrefixedString) -> None:
    writer.len_prefixed_bytes(value.encoded(), value.length_prefix_bytes)


def deserialize_lp_string(reader: BinaryReader, length_prefix_bytes: int = 1,
                          max_length_bytes: int = CLARITY_MAX_NAME_LENGTH) -> LengthPrefixedString:
    """
    Read a length-prefixed string.

    The prefix width and limit must match the writer's; the decoded string is
    re-validated against ``max_length_bytes``.
    """
    raw = reader.len_prefixed_bytes(length_prefix_bytes)
    return LengthPrefixedString(_decode_utf8(raw, "string"), length_prefix_bytes, max_length_bytes)


def serialize_memo_string(writer: BinaryWriter, memo: MemoString) -> None:
    content = memo.content.encode("utf-8")
    writer.bytes(content + bytes(MEMO_MAX_LENGTH_BYTES - len(content)))


def deserialize_memo_string(reader: BinaryReader) -> MemoString:
    raw = reader.bytes(MEMO_MAX_LENGTH_BYTES)
    return MemoString(_decode_utf8(raw.rstrip(b"\x00"), "memo"))


# Keys and signatures

def serialize_public_key(writer: BinaryWriter, key: PublicKey) -> None:
    writer.bytes(key.data)


def deserialize_public_key(reader: BinaryReader) -> PublicKey:
    """Read a public key, sizing it from its prefix byte (0x04 is uncompressed)."""
    if reader.peek_u8() == 0x04:
        return PublicKey(reader.bytes(UNCOMPRESSED_PUBKEY_LENGTH_BYTES))
    return PublicKey(reader.bytes(COMPRESSED_PUBKEY_LENGTH_BYTES))


def serialize_message_signature(writer: BinaryWriter, signature: MessageSignature) -> None:
    writer.bytes(signature.data)


def deserialize_message_signature(reader: BinaryReader) -> MessageSignature:
    return MessageSignature(reader.bytes(RECOVERABLE_ECDSA_SIG_LENGTH_BYTES))


def serialize_transaction_auth_field(writer: BinaryWriter, auth_field: TransactionAuthField) -> None:
    writer.u8(auth_field.field_type)
    if auth_field.is_signature:
        serialize_message_signature(writer, auth_field.contents)
    else:
        serialize_public_key(writer, auth_field.contents)


def deserialize_transaction_auth_field(reader: BinaryReader) -> TransactionAuthField:
    type_byte = reader.u8()
    try:
        field_type = AuthFieldType(type_byte)
    except ValueError:
        raise DecodeError(f"Unknown auth field type: 0x{type_byte:02x}", ErrorCode.UNKNOWN_WIRE_TYPE)

    if field_type == AuthFieldType.PUBLIC_KEY_COMPRESSED:
        return TransactionAuthField(PubKeyEncoding.COMPRESSED,
                                    PublicKey(reader.bytes(COMPRESSED_PUBKEY_LENGTH_BYTES)))
    if field_type == AuthFieldType.PUBLIC_KEY_UNCOMPRESSED:
        return TransactionAuthField(PubKeyEncoding.UNCOMPRESSED,
                                    PublicKey(reader.bytes(UNCOMPRESSED_PUBKEY_LENGTH_BYTES)))
    if field_type == AuthFieldType.SIGNATURE_COMPRESSED:
        return TransactionAuthField(PubKeyEncoding.COMPRESSED, deserialize_message_signature(reader))
    return TransactionAuthField(PubKeyEncoding.UNCOMPRESSED, deserialize_message_signature(reader))


# Assets and principals

def serialize_asset_info(writer: BinaryWriter, asset: AssetInfo) -> None:
    serialize_address(writer, asset.address)
    serialize_lp_string(writer, asset.contract_name)
    serialize_lp_string(writer, asset.asset_name)


def deserialize_asset_info(reader: BinaryReader) -> AssetInfo:
    address = deserialize_address(reader)
    contract_name = deserialize_lp_string(reader)
    asset_name = deserialize_lp_string(reader)
    return AssetInfo(address, contract_name, asset_name)


def serialize_principal(writer: BinaryWriter, principal: PostConditionPrincipal) -> None:
    writer.u8(principal.prefix)
    if isinstance(principal, StandardPrincipal):
        serialize_address(writer, principal.address)
    elif isinstance(principal, ContractPrincipal):
        serialize_address(writer, principal.address)
        serialize_lp_string(writer, principal.contract_name)


def deserialize_principal(reader: BinaryReader) -> PostConditionPrincipal:
    prefix = reader.u8()
    if prefix == PostConditionPrincipalId.ORIGIN:
        return OriginPrincipal()
    if prefix == PostConditionPrincipalId.STANDARD:
        return StandardPrincipal(deserialize_address(reader))
    if prefix == PostConditionPrincipalId.CONTRACT:
        address = deserialize_address(reader)
        return ContractPrincipal(address, deserialize_lp_string(reader))
    raise DecodeError(f"Unknown post-condition principal prefix: 0x{prefix:02x}", ErrorCode.UNKNOWN_WIRE_TYPE)


# Lists

def serialize_lp_list(writer: BinaryWriter, lp_list: LengthPrefixedList) -> None:
    writer.uint_be(len(lp_list), lp_list.length_prefix_bytes)
    for item in lp_list:
        _serializer_for(item.wire_type)(writer, item)


def deserialize_lp_list(reader: BinaryReader, item_type: WireType,
                        length_prefix_bytes: int = 4) -> LengthPrefixedList:
    """
    Read a counted list whose items are all of ``item_type``.

    Args:
        reader: Source reader
        item_type: Wire kind of every element
        length_prefix_bytes: Width of the element count

    Returns:
        LengthPrefixedList of decoded items
    """
    count = reader.uint_be(length_prefix_bytes)
    read_item = _deserializer_for(item_type)
    return LengthPrefixedList(tuple(read_item(reader) for _ in range(count)), length_prefix_bytes)


# Dispatch

def _serialize_post_condition(writer: BinaryWriter, value: Any) -> None:
    # Import here to avoid circular imports
    from ..tx.postconditions import serialize_post_condition
    serialize_post_condition(writer, value)


def _deserialize_post_condition(reader: BinaryReader) -> Any:
    from ..tx.postconditions import deserialize_post_condition
    return deserialize_post_condition(reader)


def _serialize_payload(writer: BinaryWriter, value: Any) -> None:
    from ..tx.payload import serialize_payload
    serialize_payload(writer, value)


def _deserialize_payload(reader: BinaryReader) -> Any:
    from ..tx.payload import deserialize_payload
    return deserialize_payload(reader)


_SERIALIZERS: Dict[WireType, Callable[[BinaryWriter, Any], None]] = {
    WireType.ADDRESS: serialize_address,
    WireType.PRINCIPAL: serialize_principal,
    WireType.LENGTH_PREFIXED_STRING: serialize_lp_string,
    WireType.MEMO_STRING: serialize_memo_string,
    WireType.ASSET: serialize_asset_info,
    WireType.POST_CONDITION: _serialize_post_condition,
    WireType.PUBLIC_KEY: serialize_public_key,
    WireType.LENGTH_PREFIXED_LIST: serialize_lp_list,
    WireType.PAYLOAD: _serialize_payload,
    WireType.MESSAGE_SIGNATURE: serialize_message_signature,
    WireType.TRANSACTION_AUTH_FIELD: serialize_transaction_auth_field,
}

_DESERIALIZERS: Dict[WireType, Callable[..., Any]] = {
    WireType.ADDRESS: deserialize_address,
    WireType.PRINCIPAL: deserialize_principal,
    WireType.LENGTH_PREFIXED_STRING: deserialize_lp_string,
    WireType.MEMO_STRING: deserialize_memo_string,
    WireType.ASSET: deserialize_asset_info,
    WireType.POST_CONDITION: _deserialize_post_condition,
    WireType.PUBLIC_KEY: deserialize_public_key,
    WireType.LENGTH_PREFIXED_LIST: deserialize_lp_list,
    WireType.PAYLOAD: _deserialize_payload,
    WireType.MESSAGE_SIGNATURE: deserialize_message_signature,
    WireType.TRANSACTION_AUTH_FIELD: deserialize_transaction_auth_field,
}


def _serializer_for(wire_type: WireType) -> Callable[[BinaryWriter, Any], None]:
    try:
        return _SERIALIZERS[wire_type]
    except KeyError:
        raise DecodeError(f"Unknown wire type: {wire_type}", ErrorCode.UNKNOWN_WIRE_TYPE)


def _deserializer_for(wire_type: WireType) -> Callable[..., Any]:
    try:
        return _DESERIALIZERS[WireType(wire_type)]
    except (KeyError, ValueError):
        raise DecodeError(f"Unknown wire type: {wire_type}", ErrorCode.UNKNOWN_WIRE_TYPE)


def encode_wire(primitive: Any) -> bytes:
    """
    Serialize any wire primitive to bytes.

    Args:
        primitive: An object carrying a ``wire_type`` class attribute

    Returns:
        Encoded bytes
    """
    writer = BinaryWriter()
    _serializer_for(primitive.wire_type)(writer, primitive)
    return writer.to_bytes()


def decode_wire(wire_type: WireType, data: bytes, cursor: int = 0, **kwargs) -> Tuple[Any, int]:
    """
    Decode one wire primitive starting at ``cursor``.

    Keyword arguments are forwarded to the per-kind deserializer, e.g.
    ``length_prefix_bytes`` for strings or ``item_type`` for lists.

    Args:
        wire_type: Kind of primitive to decode
        data: Source buffer
        cursor: Starting offset

    Returns:
        Tuple of (primitive, cursor after the primitive)

    Raises:
        MalformedLengthError: If the buffer ends inside the primitive
    """
    reader = BinaryReader(data, cursor)
    value = _deserializer_for(wire_type)(reader, **kwargs)
    return value, reader.offset
