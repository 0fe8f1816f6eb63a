"""
Clarity value serialization.

Layout: one type-tag byte followed by the type's body. Integers are 16-byte
big-endian, buffers and strings carry a u32 byte length, lists a u32 element
count and tuples a u32 entry count followed by ``(name, value)`` pairs with
1-byte length-prefixed names. Decoding is the exact inverse. Both directions
refuse values nested more than ``MAX_VALUE_DEPTH`` levels below the
outermost value, the node's own limit.
"""

from __future__ import annotations
from typing import Union

from ..codec.reader import BinaryReader
from ..codec.writer import BinaryWriter
from ..enums import ClarityType
from ..runtime.errors import DecodeError, InvalidValueError, UnknownClarityTypeError
from ..wire.codec import (
    deserialize_address,
    deserialize_lp_string,
    serialize_address,
    serialize_lp_string,
)
from ..wire.types import LengthPrefixedString
from .values import (
    BooleanCV,
    BufferCV,
    ClarityValue,
    ContractPrincipalCV,
    IntCV,
    ListCV,
    NoneCV,
    ResponseErrCV,
    ResponseOkCV,
    SomeCV,
    StandardPrincipalCV,
    StringAsciiCV,
    StringUtf8CV,
    TupleCV,
    UIntCV,
)

MAX_VALUE_DEPTH = 32


def serialize_cv_into(writer: BinaryWriter, value: ClarityValue, depth: int = 0) -> None:
    """Append the encoding of ``value`` to ``writer``."""
    if depth > MAX_VALUE_DEPTH:
        raise InvalidValueError(f"Clarity value nested deeper than {MAX_VALUE_DEPTH} levels")
    try:
        type_id = value.type
    except AttributeError:
        raise InvalidValueError(f"Not a Clarity value: {value!r}")

    writer.u8(type_id)
    if isinstance(value, IntCV):
        writer.i128be(value.value)
    elif isinstance(value, UIntCV):
        writer.u128be(value.value)
    elif isinstance(value, BufferCV):
        writer.len_prefixed_bytes(value.buffer, 4)
    elif isinstance(value, BooleanCV):
        pass
    elif isinstance(value, StandardPrincipalCV):
        serialize_address(writer, value.address)
    elif isinstance(value, ContractPrincipalCV):
        serialize_address(writer, value.address)
        serialize_lp_string(writer, value.contract_name)
    elif isinstance(value, (ResponseOkCV, ResponseErrCV, SomeCV)):
        serialize_cv_into(writer, value.value, depth + 1)
    elif isinstance(value, NoneCV):
        pass
    elif isinstance(value, ListCV):
        writer.u32be(len(value))
        for item in value:
            serialize_cv_into(writer, item, depth + 1)
    elif isinstance(value, TupleCV):
        writer.u32be(len(value.entries))
        for name, item in value.entries:
            serialize_lp_string(writer, LengthPrefixedString(name))
            serialize_cv_into(writer, item, depth + 1)
    elif isinstance(value, StringAsciiCV):
        writer.len_prefixed_bytes(value.data.encode("ascii"), 4)
    elif isinstance(value, StringUtf8CV):
        writer.len_prefixed_bytes(value.data.encode("utf-8"), 4)
    else:
        raise InvalidValueError(f"Not a Clarity value: {value!r}")


def serialize_cv(value: ClarityValue) -> bytes:
    """
    Serialize a Clarity value.

    Args:
        value: Value to encode

    Returns:
        Encoded bytes, type tag first
    """
    writer = BinaryWriter()
    serialize_cv_into(writer, value)
    return writer.to_bytes()


def _decode_text(raw: bytes, encoding: str) -> str:
    try:
        return raw.decode(encoding)
    except UnicodeDecodeError as e:
        raise DecodeError(f"Invalid {encoding} string in Clarity value", cause=e)


def deserialize_cv_from(reader: BinaryReader, depth: int = 0) -> ClarityValue:
    """Read one Clarity value from the reader's cursor."""
    if depth > MAX_VALUE_DEPTH:
        raise DecodeError(f"Clarity value nested deeper than {MAX_VALUE_DEPTH} levels",
                          details={"offset": reader.offset})
    type_id = reader.u8()

    if type_id == ClarityType.INT:
        return IntCV(reader.i128be())
    if type_id == ClarityType.UINT:
        return UIntCV(reader.u128be())
    if type_id == ClarityType.BUFFER:
        return BufferCV(reader.len_prefixed_bytes(4))
    if type_id == ClarityType.BOOL_TRUE:
        return BooleanCV(True)
    if type_id == ClarityType.BOOL_FALSE:
        return BooleanCV(False)
    if type_id == ClarityType.PRINCIPAL_STANDARD:
        return StandardPrincipalCV(deserialize_address(reader))
    if type_id == ClarityType.PRINCIPAL_CONTRACT:
        address = deserialize_address(reader)
        return ContractPrincipalCV(address, deserialize_lp_string(reader))
    if type_id == ClarityType.RESPONSE_OK:
        return ResponseOkCV(deserialize_cv_from(reader, depth + 1))
    if type_id == ClarityType.RESPONSE_ERR:
        return ResponseErrCV(deserialize_cv_from(reader, depth + 1))
    if type_id == ClarityType.OPTIONAL_NONE:
        return NoneCV()
    if type_id == ClarityType.OPTIONAL_SOME:
        return SomeCV(deserialize_cv_from(reader, depth + 1))
    if type_id == ClarityType.LIST:
        count = reader.u32be()
        return ListCV(tuple(deserialize_cv_from(reader, depth + 1) for _ in range(count)))
    if type_id == ClarityType.TUPLE:
        count = reader.u32be()
        entries = []
        for _ in range(count):
            name = deserialize_lp_string(reader).content
            entries.append((name, deserialize_cv_from(reader, depth + 1)))
        return TupleCV(tuple(entries))
    if type_id == ClarityType.STRING_ASCII:
        return StringAsciiCV(_decode_text(reader.len_prefixed_bytes(4), "ascii"))
    if type_id == ClarityType.STRING_UTF8:
        return StringUtf8CV(_decode_text(reader.len_prefixed_bytes(4), "utf-8"))

    raise UnknownClarityTypeError(type_id, {"offset": reader.offset - 1})


def deserialize_cv(data: Union[bytes, str, BinaryReader]) -> ClarityValue:
    """
    Deserialize a Clarity value.

    Args:
        data: Encoded bytes, a hex string, or a reader positioned at the tag

    Returns:
        The decoded value

    Raises:
        UnknownClarityTypeError: If a type tag is not a Clarity type
        MalformedLengthError: If the buffer ends inside the value
    """
    if isinstance(data, BinaryReader):
        return deserialize_cv_from(data)
    if isinstance(data, str):
        data = bytes.fromhex(data[2:] if data.startswith("0x") else data)
    return deserialize_cv_from(BinaryReader(data))
