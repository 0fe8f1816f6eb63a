"""
Transaction payload model.

One immutable record per payload variant. Constructors validate every field
(names, lengths, fixed-size buffers) so a payload that exists can always be
serialized. Serialization writes the payload-type tag followed by the
variant's fields in fixed order.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import ClassVar, Iterable, Optional, Tuple, Union

from ..clarity.codec import deserialize_cv_from, serialize_cv_into
from ..clarity.values import (
    ClarityValue,
    ContractPrincipalCV,
    PrincipalCV,
    StandardPrincipalCV,
    principal_cv,
)
from ..codec.reader import BinaryReader
from ..codec.writer import BinaryWriter
from ..enums import (
    ADDRESS_HASH_LENGTH,
    CLARITY_MAX_NAME_LENGTH,
    CODE_BODY_MAX_LENGTH_BYTES,
    COINBASE_BYTES_LENGTH,
    MAX_U64,
    VRF_PROOF_BYTES_LENGTH,
    ClarityType,
    ClarityVersion,
    PayloadType,
    TenureChangeCause,
    WireType,
)
from ..runtime.errors import DecodeError, ErrorCode, InvalidValueError
from ..wire.codec import (
    deserialize_address,
    deserialize_lp_string,
    deserialize_memo_string,
    serialize_address,
    serialize_lp_string,
    serialize_memo_string,
)
from ..wire.types import (
    Address,
    LengthPrefixedString,
    MemoString,
    create_address,
    create_lp_string,
    validate_clarity_name,
    validate_contract_name,
)

# Placeholder node principal; the inference signer assigns the real node.
NULL_NODE_PRINCIPAL = "ST000000000000000000002AMW42H"

TENURE_HASH_LENGTH = 20
BLOCK_ID_LENGTH = 32


def _check_u64(value: int, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= MAX_U64:
        raise InvalidValueError(f"{what} must be an unsigned 64-bit integer, got {value!r}")
    return value


def _check_fixed(data: bytes, length: int, what: str) -> bytes:
    data = bytes(data)
    if len(data) != length:
        raise InvalidValueError(f"{what} must be exactly {length} bytes, got {len(data)}")
    return data


def _check_principal(value: ClarityValue, what: str) -> PrincipalCV:
    if not isinstance(value, (StandardPrincipalCV, ContractPrincipalCV)):
        raise InvalidValueError(f"{what} must be a principal, got {type(value).__name__}")
    return value


def _code_body(code: str) -> LengthPrefixedString:
    return create_lp_string(code, 4, CODE_BODY_MAX_LENGTH_BYTES)


@dataclass(frozen=True)
class TokenTransferPayload:
    recipient: PrincipalCV
    amount: int
    memo: MemoString = field(default_factory=MemoString)

    payload_type: ClassVar[PayloadType] = PayloadType.TOKEN_TRANSFER
    wire_type: ClassVar[WireType] = WireType.PAYLOAD

    def __post_init__(self):
        _check_principal(self.recipient, "Recipient")
        _check_u64(self.amount, "Amount")


@dataclass(frozen=True)
class ContractCallPayload:
    contract_address: Address
    contract_name: LengthPrefixedString
    function_name: LengthPrefixedString
    function_args: Tuple[ClarityValue, ...] = ()

    payload_type: ClassVar[PayloadType] = PayloadType.CONTRACT_CALL
    wire_type: ClassVar[WireType] = WireType.PAYLOAD

    def __post_init__(self):
        object.__setattr__(self, "function_args", tuple(self.function_args))
        validate_contract_name(self.contract_name.content)
        validate_clarity_name(self.function_name.content, "function name")


@dataclass(frozen=True)
class SmartContractPayload:
    contract_name: LengthPrefixedString
    code_body: LengthPrefixedString

    payload_type: ClassVar[PayloadType] = PayloadType.SMART_CONTRACT
    wire_type: ClassVar[WireType] = WireType.PAYLOAD

    def __post_init__(self):
        validate_contract_name(self.contract_name.content)


@dataclass(frozen=True)
class VersionedSmartContractPayload:
    clarity_version: ClarityVersion
    contract_name: LengthPrefixedString
    code_body: LengthPrefixedString

    payload_type: ClassVar[PayloadType] = PayloadType.VERSIONED_SMART_CONTRACT
    wire_type: ClassVar[WireType] = WireType.PAYLOAD

    def __post_init__(self):
        validate_contract_name(self.contract_name.content)


@dataclass(frozen=True)
class PoisonPayload:
    payload_type: ClassVar[PayloadType] = PayloadType.POISON_MICROBLOCK
    wire_type: ClassVar[WireType] = WireType.PAYLOAD


@dataclass(frozen=True)
class CoinbasePayload:
    coinbase_buffer: bytes

    payload_type: ClassVar[PayloadType] = PayloadType.COINBASE
    wire_type: ClassVar[WireType] = WireType.PAYLOAD

    def __post_init__(self):
        object.__setattr__(self, "coinbase_buffer",
                           _check_fixed(self.coinbase_buffer, COINBASE_BYTES_LENGTH, "Coinbase buffer"))


@dataclass(frozen=True)
class CoinbaseToAltRecipientPayload:
    coinbase_buffer: bytes
    recipient: PrincipalCV

    payload_type: ClassVar[PayloadType] = PayloadType.COINBASE_TO_ALT_RECIPIENT
    wire_type: ClassVar[WireType] = WireType.PAYLOAD

    def __post_init__(self):
        object.__setattr__(self, "coinbase_buffer",
                           _check_fixed(self.coinbase_buffer, COINBASE_BYTES_LENGTH, "Coinbase buffer"))
        _check_principal(self.recipient, "Recipient")


@dataclass(frozen=True)
class NakamotoCoinbasePayload:
    coinbase_buffer: bytes
    recipient: Optional[PrincipalCV]
    vrf_proof: bytes

    payload_type: ClassVar[PayloadType] = PayloadType.NAKAMOTO_COINBASE
    wire_type: ClassVar[WireType] = WireType.PAYLOAD

    def __post_init__(self):
        object.__setattr__(self, "coinbase_buffer",
                           _check_fixed(self.coinbase_buffer, COINBASE_BYTES_LENGTH, "Coinbase buffer"))
        object.__setattr__(self, "vrf_proof",
                           _check_fixed(self.vrf_proof, VRF_PROOF_BYTES_LENGTH, "VRF proof"))
        if self.recipient is not None:
            _check_principal(self.recipient, "Recipient")


@dataclass(frozen=True)
class TenureChangePayload:
    tenure_hash: bytes
    previous_tenure_hash: bytes
    burn_view_hash: bytes
    previous_tenure_end: bytes
    previous_tenure_blocks: int
    cause: TenureChangeCause
    pubkey_hash: bytes

    payload_type: ClassVar[PayloadType] = PayloadType.TENURE_CHANGE
    wire_type: ClassVar[WireType] = WireType.PAYLOAD

    def __post_init__(self):
        for name in ("tenure_hash", "previous_tenure_hash", "burn_view_hash"):
            object.__setattr__(self, name, _check_fixed(getattr(self, name), TENURE_HASH_LENGTH, name))
        object.__setattr__(self, "previous_tenure_end",
                           _check_fixed(self.previous_tenure_end, BLOCK_ID_LENGTH, "previous_tenure_end"))
        object.__setattr__(self, "pubkey_hash",
                           _check_fixed(self.pubkey_hash, ADDRESS_HASH_LENGTH, "pubkey_hash"))
        if not 0 <= self.previous_tenure_blocks <= 0xFFFFFFFF:
            raise InvalidValueError(f"previous_tenure_blocks must fit in a u32, got {self.previous_tenure_blocks}")
        object.__setattr__(self, "cause", TenureChangeCause(self.cause))


@dataclass(frozen=True)
class InferPayload:
    """
    Request an inference from a registered model.

    The user pays ``amount`` for the task; ``node_principal`` is the node
    assigned to run it (a null principal until a signer assigns one).
    """

    infer_user_address: PrincipalCV
    amount: int
    user_input: LengthPrefixedString
    context: LengthPrefixedString
    node_principal: PrincipalCV
    model_name: LengthPrefixedString

    payload_type: ClassVar[PayloadType] = PayloadType.INFER
    wire_type: ClassVar[WireType] = WireType.PAYLOAD

    def __post_init__(self):
        _check_principal(self.infer_user_address, "Infer user address")
        _check_principal(self.node_principal, "Node principal")
        _check_u64(self.amount, "Amount")


@dataclass(frozen=True)
class RegisterModelPayload:
    model_name: LengthPrefixedString
    model_params: LengthPrefixedString

    payload_type: ClassVar[PayloadType] = PayloadType.REGISTER_MODEL
    wire_type: ClassVar[WireType] = WireType.PAYLOAD


Payload = Union[
    TokenTransferPayload,
    ContractCallPayload,
    SmartContractPayload,
    VersionedSmartContractPayload,
    PoisonPayload,
    CoinbasePayload,
    CoinbaseToAltRecipientPayload,
    NakamotoCoinbasePayload,
    TenureChangePayload,
    InferPayload,
    RegisterModelPayload,
]


def _as_principal(value: Union[str, PrincipalCV]) -> PrincipalCV:
    return principal_cv(value) if isinstance(value, str) else value


# Constructors

def create_token_transfer_payload(recipient: Union[str, PrincipalCV], amount: int,
                                  memo: Union[str, MemoString] = "") -> TokenTransferPayload:
    """
    Create a token transfer payload.

    Args:
        recipient: Principal string (``SP...`` or ``SP....contract``) or principal value
        amount: Amount in micro-units
        memo: Memo of at most 34 UTF-8 bytes

    Returns:
        TokenTransferPayload
    """
    if isinstance(memo, str):
        memo = MemoString(memo)
    return TokenTransferPayload(_as_principal(recipient), amount, memo)


def create_contract_call_payload(contract_address: Union[str, Address], contract_name: str,
                                 function_name: str,
                                 function_args: Iterable[ClarityValue] = ()) -> ContractCallPayload:
    return ContractCallPayload(
        create_address(contract_address),
        create_lp_string(validate_contract_name(contract_name)),
        create_lp_string(validate_clarity_name(function_name, "function name")),
        tuple(function_args),
    )


def create_smart_contract_payload(contract_name: str, code_body: str,
                                  clarity_version: Optional[ClarityVersion] = None
                                  ) -> Union[SmartContractPayload, VersionedSmartContractPayload]:
    """
    Create a contract deploy payload.

    Without ``clarity_version`` the unversioned layout is used.
    """
    name = create_lp_string(validate_contract_name(contract_name))
    if clarity_version is None:
        return SmartContractPayload(name, _code_body(code_body))
    return VersionedSmartContractPayload(ClarityVersion(clarity_version), name, _code_body(code_body))


def create_poison_payload() -> PoisonPayload:
    return PoisonPayload()


def create_coinbase_payload(coinbase_buffer: bytes,
                            alt_recipient: Union[str, PrincipalCV, None] = None
                            ) -> Union[CoinbasePayload, CoinbaseToAltRecipientPayload]:
    if alt_recipient is None:
        return CoinbasePayload(coinbase_buffer)
    return CoinbaseToAltRecipientPayload(coinbase_buffer, _as_principal(alt_recipient))


def create_nakamoto_coinbase_payload(coinbase_buffer: bytes, recipient: Union[str, PrincipalCV, None],
                                     vrf_proof: bytes) -> NakamotoCoinbasePayload:
    recipient_cv = None if recipient is None else _as_principal(recipient)
    return NakamotoCoinbasePayload(coinbase_buffer, recipient_cv, vrf_proof)


def create_tenure_change_payload(tenure_hash: bytes, previous_tenure_hash: bytes, burn_view_hash: bytes,
                                 previous_tenure_end: bytes, previous_tenure_blocks: int,
                                 cause: TenureChangeCause, pubkey_hash: bytes) -> TenureChangePayload:
    return TenureChangePayload(tenure_hash, previous_tenure_hash, burn_view_hash, previous_tenure_end,
                               previous_tenure_blocks, cause, pubkey_hash)


def create_infer_payload(infer_user_address: Union[str, PrincipalCV], amount: int, user_input: str,
                         context: str, node_principal: Union[str, PrincipalCV],
                         model_name: str) -> InferPayload:
    """
    Create an infer payload.

    Args:
        infer_user_address: Principal of the user requesting inference
        amount: Amount paid for the task
        user_input: Prompt text (at most 100 000 UTF-8 bytes)
        context: Conversation context (at most 100 000 UTF-8 bytes)
        node_principal: Principal of the node that will run the task
        model_name: Registered model name (at most 128 UTF-8 bytes)

    Returns:
        InferPayload

    Raises:
        ValueTooLongError: If a text field exceeds its limit
    """
    return InferPayload(
        _as_principal(infer_user_address),
        amount,
        create_lp_string(user_input, 4, CODE_BODY_MAX_LENGTH_BYTES),
        create_lp_string(context, 4, CODE_BODY_MAX_LENGTH_BYTES),
        _as_principal(node_principal),
        create_lp_string(model_name, 1, CLARITY_MAX_NAME_LENGTH),
    )


def create_register_model_payload(model_name: str, model_params: str) -> RegisterModelPayload:
    return RegisterModelPayload(
        create_lp_string(model_name, 1, CLARITY_MAX_NAME_LENGTH),
        create_lp_string(model_params, 4, CODE_BODY_MAX_LENGTH_BYTES),
    )


# Codec

def serialize_payload(writer: BinaryWriter, payload: Payload) -> None:
    """Write the payload-type tag and the variant's fields."""
    writer.u8(payload.payload_type)

    if isinstance(payload, TokenTransferPayload):
        serialize_cv_into(writer, payload.recipient)
        writer.u64be(payload.amount)
        serialize_memo_string(writer, payload.memo)
    elif isinstance(payload, ContractCallPayload):
        serialize_address(writer, payload.contract_address)
        serialize_lp_string(writer, payload.contract_name)
        serialize_lp_string(writer, payload.function_name)
        writer.u32be(len(payload.function_args))
        for arg in payload.function_args:
            serialize_cv_into(writer, arg)
    elif isinstance(payload, SmartContractPayload):
        serialize_lp_string(writer, payload.contract_name)
        serialize_lp_string(writer, payload.code_body)
    elif isinstance(payload, VersionedSmartContractPayload):
        writer.u8(payload.clarity_version)
        serialize_lp_string(writer, payload.contract_name)
        serialize_lp_string(writer, payload.code_body)
    elif isinstance(payload, PoisonPayload):
        pass
    elif isinstance(payload, CoinbasePayload):
        writer.bytes(payload.coinbase_buffer)
    elif isinstance(payload, CoinbaseToAltRecipientPayload):
        writer.bytes(payload.coinbase_buffer)
        serialize_cv_into(writer, payload.recipient)
    elif isinstance(payload, NakamotoCoinbasePayload):
        writer.bytes(payload.coinbase_buffer)
        if payload.recipient is None:
            writer.u8(ClarityType.OPTIONAL_NONE)
        else:
            writer.u8(ClarityType.OPTIONAL_SOME)
            serialize_cv_into(writer, payload.recipient)
        writer.bytes(payload.vrf_proof)
    elif isinstance(payload, TenureChangePayload):
        writer.bytes(payload.tenure_hash)
        writer.bytes(payload.previous_tenure_hash)
        writer.bytes(payload.burn_view_hash)
        writer.bytes(payload.previous_tenure_end)
        writer.u32be(payload.previous_tenure_blocks)
        writer.u8(payload.cause)
        writer.bytes(payload.pubkey_hash)
    elif isinstance(payload, InferPayload):
        serialize_cv_into(writer, payload.infer_user_address)
        writer.u64be(payload.amount)
        serialize_lp_string(writer, payload.user_input)
        serialize_lp_string(writer, payload.context)
        serialize_cv_into(writer, payload.node_principal)
        serialize_lp_string(writer, payload.model_name)
    elif isinstance(payload, RegisterModelPayload):
        serialize_lp_string(writer, payload.model_name)
        serialize_lp_string(writer, payload.model_params)
    else:
        raise InvalidValueError(f"Not a payload: {payload!r}")


def serialize_payload_bytes(payload: Payload) -> bytes:
    writer = BinaryWriter()
    serialize_payload(writer, payload)
    return writer.to_bytes()


def _read_principal(reader: BinaryReader, what: str) -> PrincipalCV:
    value = deserialize_cv_from(reader)
    if not isinstance(value, (StandardPrincipalCV, ContractPrincipalCV)):
        raise DecodeError(f"{what} is not a principal: {type(value).__name__}")
    return value


def _read_code_body(reader: BinaryReader) -> LengthPrefixedString:
    return deserialize_lp_string(reader, 4, CODE_BODY_MAX_LENGTH_BYTES)


def deserialize_payload(reader: BinaryReader) -> Payload:
    """
    Read one payload from the reader's cursor.

    Raises:
        DecodeError: If the payload-type tag is unknown or a field is malformed
        MalformedLengthError: If the buffer ends inside the payload
    """
    type_byte = reader.u8()
    try:
        payload_type = PayloadType(type_byte)
    except ValueError:
        raise DecodeError(f"Unknown payload type: 0x{type_byte:02x}", ErrorCode.UNKNOWN_WIRE_TYPE)

    if payload_type == PayloadType.TOKEN_TRANSFER:
        recipient = _read_principal(reader, "Recipient")
        amount = reader.u64be()
        return TokenTransferPayload(recipient, amount, deserialize_memo_string(reader))
    if payload_type == PayloadType.CONTRACT_CALL:
        address = deserialize_address(reader)
        contract_name = deserialize_lp_string(reader)
        function_name = deserialize_lp_string(reader)
        argc = reader.u32be()
        args = tuple(deserialize_cv_from(reader) for _ in range(argc))
        return ContractCallPayload(address, contract_name, function_name, args)
    if payload_type == PayloadType.SMART_CONTRACT:
        contract_name = deserialize_lp_string(reader)
        return SmartContractPayload(contract_name, _read_code_body(reader))
    if payload_type == PayloadType.VERSIONED_SMART_CONTRACT:
        version_byte = reader.u8()
        try:
            version = ClarityVersion(version_byte)
        except ValueError:
            raise DecodeError(f"Unknown Clarity version: {version_byte}")
        contract_name = deserialize_lp_string(reader)
        return VersionedSmartContractPayload(version, contract_name, _read_code_body(reader))
    if payload_type == PayloadType.POISON_MICROBLOCK:
        return PoisonPayload()
    if payload_type == PayloadType.COINBASE:
        return CoinbasePayload(reader.bytes(COINBASE_BYTES_LENGTH))
    if payload_type == PayloadType.COINBASE_TO_ALT_RECIPIENT:
        buffer = reader.bytes(COINBASE_BYTES_LENGTH)
        return CoinbaseToAltRecipientPayload(buffer, _read_principal(reader, "Recipient"))
    if payload_type == PayloadType.NAKAMOTO_COINBASE:
        buffer = reader.bytes(COINBASE_BYTES_LENGTH)
        tag = reader.u8()
        if tag == ClarityType.OPTIONAL_NONE:
            recipient = None
        elif tag == ClarityType.OPTIONAL_SOME:
            recipient = _read_principal(reader, "Recipient")
        else:
            raise DecodeError(f"Expected optional recipient, found tag 0x{tag:02x}")
        return NakamotoCoinbasePayload(buffer, recipient, reader.bytes(VRF_PROOF_BYTES_LENGTH))
    if payload_type == PayloadType.TENURE_CHANGE:
        tenure_hash = reader.bytes(TENURE_HASH_LENGTH)
        previous_tenure_hash = reader.bytes(TENURE_HASH_LENGTH)
        burn_view_hash = reader.bytes(TENURE_HASH_LENGTH)
        previous_tenure_end = reader.bytes(BLOCK_ID_LENGTH)
        previous_tenure_blocks = reader.u32be()
        cause_byte = reader.u8()
        try:
            cause = TenureChangeCause(cause_byte)
        except ValueError:
            raise DecodeError(f"Unknown tenure change cause: {cause_byte}")
        pubkey_hash = reader.bytes(ADDRESS_HASH_LENGTH)
        return TenureChangePayload(tenure_hash, previous_tenure_hash, burn_view_hash, previous_tenure_end,
                                   previous_tenure_blocks, cause, pubkey_hash)
    if payload_type == PayloadType.INFER:
        user = _read_principal(reader, "Infer user address")
        amount = reader.u64be()
        user_input = _read_code_body(reader)
        context = _read_code_body(reader)
        node = _read_principal(reader, "Node principal")
        model_name = deserialize_lp_string(reader)
        return InferPayload(user, amount, user_input, context, node, model_name)

    model_name = deserialize_lp_string(reader)
    return RegisterModelPayload(model_name, _read_code_body(reader))
