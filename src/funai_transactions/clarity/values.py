"""
Clarity value model.

A closed set of immutable records, one per Clarity type tag, plus helper
constructors that validate ranges and identifiers before a value exists.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Iterable, List, Mapping, Tuple, Union

from ..enums import ClarityType
from ..runtime.errors import InvalidValueError
from ..wire.types import (
    Address,
    LengthPrefixedString,
    create_address,
    create_lp_string,
    validate_clarity_name,
    validate_contract_name,
)

MIN_I128 = -(1 << 127)
MAX_I128 = (1 << 127) - 1
MAX_U128 = (1 << 128) - 1


def _coerce_int(value: Union[int, str, bytes]) -> int:
    if isinstance(value, bool):
        raise InvalidValueError("Booleans are not Clarity integers")
    if isinstance(value, int):
        return value
    if isinstance(value, bytes):
        return int.from_bytes(value, "big", signed=True)
    try:
        return int(value, 0) if value.lower().startswith("0x") else int(value)
    except (TypeError, ValueError) as e:
        raise InvalidValueError(f"Cannot convert {value!r} to an integer", cause=e)


@dataclass(frozen=True)
class IntCV:
    value: int

    type: ClassVar[ClarityType] = ClarityType.INT

    def __post_init__(self):
        if not MIN_I128 <= self.value <= MAX_I128:
            raise InvalidValueError(f"Value {self.value} is outside the signed 128-bit range")


@dataclass(frozen=True)
class UIntCV:
    value: int

    type: ClassVar[ClarityType] = ClarityType.UINT

    def __post_init__(self):
        if not 0 <= self.value <= MAX_U128:
            raise InvalidValueError(f"Value {self.value} is outside the unsigned 128-bit range")


@dataclass(frozen=True)
class BufferCV:
    buffer: bytes

    type: ClassVar[ClarityType] = ClarityType.BUFFER

    def __post_init__(self):
        object.__setattr__(self, "buffer", bytes(self.buffer))
        if len(self.buffer) > 0xFFFFFFFF:
            raise InvalidValueError("Buffer length does not fit in a u32")


@dataclass(frozen=True)
class BooleanCV:
    value: bool

    @property
    def type(self) -> ClarityType:
        return ClarityType.BOOL_TRUE if self.value else ClarityType.BOOL_FALSE


@dataclass(frozen=True)
class StandardPrincipalCV:
    address: Address

    type: ClassVar[ClarityType] = ClarityType.PRINCIPAL_STANDARD

    def __str__(self) -> str:
        return self.address.to_string()


@dataclass(frozen=True)
class ContractPrincipalCV:
    address: Address
    contract_name: LengthPrefixedString

    type: ClassVar[ClarityType] = ClarityType.PRINCIPAL_CONTRACT

    def __str__(self) -> str:
        return f"{self.address.to_string()}.{self.contract_name.content}"


@dataclass(frozen=True)
class ResponseOkCV:
    value: "ClarityValue"

    type: ClassVar[ClarityType] = ClarityType.RESPONSE_OK


@dataclass(frozen=True)
class ResponseErrCV:
    value: "ClarityValue"

    type: ClassVar[ClarityType] = ClarityType.RESPONSE_ERR


@dataclass(frozen=True)
class NoneCV:
    type: ClassVar[ClarityType] = ClarityType.OPTIONAL_NONE


@dataclass(frozen=True)
class SomeCV:
    value: "ClarityValue"

    type: ClassVar[ClarityType] = ClarityType.OPTIONAL_SOME


@dataclass(frozen=True)
class ListCV:
    items: Tuple["ClarityValue", ...] = ()

    type: ClassVar[ClarityType] = ClarityType.LIST

    def __post_init__(self):
        object.__setattr__(self, "items", tuple(self.items))

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)


@dataclass(frozen=True)
class TupleCV:
    """
    Named fields in insertion order.

    Entries are kept as ``(name, value)`` pairs so that the wire order is
    exactly the order the caller supplied.
    """

    entries: Tuple[Tuple[str, "ClarityValue"], ...] = ()

    type: ClassVar[ClarityType] = ClarityType.TUPLE

    def __post_init__(self):
        entries = tuple((name, value) for name, value in self.entries)
        seen = set()
        for name, _ in entries:
            validate_clarity_name(name, "tuple key")
            if name in seen:
                raise InvalidValueError(f"Duplicate tuple key: {name!r}")
            seen.add(name)
        object.__setattr__(self, "entries", entries)

    @property
    def data(self) -> Dict[str, "ClarityValue"]:
        return dict(self.entries)

    def __getitem__(self, name: str) -> "ClarityValue":
        return self.data[name]


@dataclass(frozen=True)
class StringAsciiCV:
    data: str

    type: ClassVar[ClarityType] = ClarityType.STRING_ASCII

    def __post_init__(self):
        if not self.data.isascii():
            raise InvalidValueError("string-ascii values may only contain ASCII characters")


@dataclass(frozen=True)
class StringUtf8CV:
    data: str

    type: ClassVar[ClarityType] = ClarityType.STRING_UTF8


ClarityValue = Union[
    IntCV,
    UIntCV,
    BufferCV,
    BooleanCV,
    StandardPrincipalCV,
    ContractPrincipalCV,
    ResponseOkCV,
    ResponseErrCV,
    NoneCV,
    SomeCV,
    ListCV,
    TupleCV,
    StringAsciiCV,
    StringUtf8CV,
]

PrincipalCV = Union[StandardPrincipalCV, ContractPrincipalCV]


# Constructors

def int_cv(value: Union[int, str, bytes]) -> IntCV:
    return IntCV(_coerce_int(value))


def uint_cv(value: Union[int, str, bytes]) -> UIntCV:
    if isinstance(value, bytes):
        return UIntCV(int.from_bytes(value, "big"))
    return UIntCV(_coerce_int(value))


def buffer_cv(buffer: bytes) -> BufferCV:
    return BufferCV(buffer)


def buffer_cv_from_string(text: str) -> BufferCV:
    return BufferCV(text.encode("utf-8"))


def true_cv() -> BooleanCV:
    return BooleanCV(True)


def false_cv() -> BooleanCV:
    return BooleanCV(False)


def bool_cv(value: bool) -> BooleanCV:
    return BooleanCV(bool(value))


def standard_principal_cv(address: Union[str, Address]) -> StandardPrincipalCV:
    return StandardPrincipalCV(create_address(address))


def contract_principal_cv(address: Union[str, Address], contract_name: str) -> ContractPrincipalCV:
    return ContractPrincipalCV(create_address(address),
                               create_lp_string(validate_contract_name(contract_name)))


def principal_cv(principal: str) -> PrincipalCV:
    """
    Parse ``SP...`` into a standard principal or ``SP....name`` into a
    contract principal.
    """
    if "." in principal:
        address, contract_name = principal.split(".", 1)
        return contract_principal_cv(address, contract_name)
    return standard_principal_cv(principal)


def response_ok_cv(value: ClarityValue) -> ResponseOkCV:
    return ResponseOkCV(value)


def response_error_cv(value: ClarityValue) -> ResponseErrCV:
    return ResponseErrCV(value)


def none_cv() -> NoneCV:
    return NoneCV()


def some_cv(value: ClarityValue) -> SomeCV:
    return SomeCV(value)


def optional_cv(value: ClarityValue = None) -> Union[NoneCV, SomeCV]:
    return NoneCV() if value is None else SomeCV(value)


def list_cv(items: Iterable[ClarityValue]) -> ListCV:
    return ListCV(tuple(items))


def tuple_cv(data: Union[Mapping[str, ClarityValue], Iterable[Tuple[str, ClarityValue]]]) -> TupleCV:
    """Build a tuple, preserving the mapping's (or pair sequence's) order."""
    entries = data.items() if isinstance(data, Mapping) else data
    return TupleCV(tuple(entries))


def string_ascii_cv(data: str) -> StringAsciiCV:
    return StringAsciiCV(data)


def string_utf8_cv(data: str) -> StringUtf8CV:
    return StringUtf8CV(data)


def cv_to_string(value: ClarityValue) -> str:
    """Render a value in Clarity literal syntax, e.g. ``(some u1)``."""
    if isinstance(value, IntCV):
        return str(value.value)
    if isinstance(value, UIntCV):
        return f"u{value.value}"
    if isinstance(value, BufferCV):
        return f"0x{value.buffer.hex()}"
    if isinstance(value, BooleanCV):
        return "true" if value.value else "false"
    if isinstance(value, (StandardPrincipalCV, ContractPrincipalCV)):
        return str(value)
    if isinstance(value, ResponseOkCV):
        return f"(ok {cv_to_string(value.value)})"
    if isinstance(value, ResponseErrCV):
        return f"(err {cv_to_string(value.value)})"
    if isinstance(value, NoneCV):
        return "none"
    if isinstance(value, SomeCV):
        return f"(some {cv_to_string(value.value)})"
    if isinstance(value, ListCV):
        return "(list " + " ".join(cv_to_string(item) for item in value) + ")"
    if isinstance(value, TupleCV):
        return "(tuple " + " ".join(f"({name} {cv_to_string(v)})" for name, v in value.entries) + ")"
    if isinstance(value, StringAsciiCV):
        return '"' + value.data.replace("\\", "\\\\").replace('"', '\\"') + '"'
    if isinstance(value, StringUtf8CV):
        return 'u"' + value.data.replace("\\", "\\\\").replace('"', '\\"') + '"'
    raise InvalidValueError(f"Not a Clarity value: {value!r}")


def cv_to_value(value: ClarityValue) -> Any:
    """
    Convert to plain Python data.

    Integers become ``int``, buffers ``bytes``, principals their string
    form, optionals ``None`` or the inner value, responses the inner value,
    lists ``list`` and tuples ``dict``.
    """
    if isinstance(value, (IntCV, UIntCV, BooleanCV)):
        return value.value
    if isinstance(value, BufferCV):
        return value.buffer
    if isinstance(value, (StandardPrincipalCV, ContractPrincipalCV)):
        return str(value)
    if isinstance(value, NoneCV):
        return None
    if isinstance(value, (SomeCV, ResponseOkCV, ResponseErrCV)):
        return cv_to_value(value.value)
    if isinstance(value, ListCV):
        result: List[Any] = [cv_to_value(item) for item in value]
        return result
    if isinstance(value, TupleCV):
        return {name: cv_to_value(v) for name, v in value.entries}
    if isinstance(value, (StringAsciiCV, StringUtf8CV)):
        return value.data
    raise InvalidValueError(f"Not a Clarity value: {value!r}")
