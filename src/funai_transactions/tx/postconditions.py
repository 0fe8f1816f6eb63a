"""
Post-conditions.

Assertions about asset movement that the chain checks after executing a
transaction. Each condition names a principal (the origin, a standard
account or a contract), optionally an asset class, and a condition code.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import ClassVar, Union

from ..clarity.codec import deserialize_cv_from, serialize_cv_into
from ..clarity.values import ClarityValue
from ..codec.reader import BinaryReader
from ..codec.writer import BinaryWriter
from ..enums import (
    MAX_U64,
    FungibleConditionCode,
    NonFungibleConditionCode,
    PostConditionType,
    WireType,
)
from ..runtime.errors import DecodeError, ErrorCode, InvalidValueError
from ..wire.codec import (
    deserialize_asset_info,
    deserialize_principal,
    serialize_asset_info,
    serialize_principal,
)
from ..wire.types import (
    Address,
    AssetInfo,
    ContractPrincipal,
    PostConditionPrincipal,
    StandardPrincipal,
    create_address,
    create_asset_info,
    create_lp_string,
    create_post_condition_principal,
    validate_contract_name,
)

PrincipalLike = Union[str, PostConditionPrincipal]
AssetLike = Union[str, AssetInfo]


def _check_amount(amount: int) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int) or not 0 <= amount <= MAX_U64:
        raise InvalidValueError(f"Post-condition amount must be an unsigned 64-bit integer, got {amount!r}")


@dataclass(frozen=True)
class STXPostCondition:
    principal: PostConditionPrincipal
    condition_code: FungibleConditionCode
    amount: int

    condition_type: ClassVar[PostConditionType] = PostConditionType.STX
    wire_type: ClassVar[WireType] = WireType.POST_CONDITION

    def __post_init__(self):
        object.__setattr__(self, "condition_code", FungibleConditionCode(self.condition_code))
        _check_amount(self.amount)


@dataclass(frozen=True)
class FungiblePostCondition:
    principal: PostConditionPrincipal
    condition_code: FungibleConditionCode
    amount: int
    asset_info: AssetInfo

    condition_type: ClassVar[PostConditionType] = PostConditionType.FUNGIBLE
    wire_type: ClassVar[WireType] = WireType.POST_CONDITION

    def __post_init__(self):
        object.__setattr__(self, "condition_code", FungibleConditionCode(self.condition_code))
        _check_amount(self.amount)


@dataclass(frozen=True)
class NonFungiblePostCondition:
    principal: PostConditionPrincipal
    condition_code: NonFungibleConditionCode
    asset_info: AssetInfo
    asset_name: ClarityValue

    condition_type: ClassVar[PostConditionType] = PostConditionType.NON_FUNGIBLE
    wire_type: ClassVar[WireType] = WireType.POST_CONDITION

    def __post_init__(self):
        object.__setattr__(self, "condition_code", NonFungibleConditionCode(self.condition_code))


PostCondition = Union[STXPostCondition, FungiblePostCondition, NonFungiblePostCondition]


def _principal(principal: PrincipalLike) -> PostConditionPrincipal:
    return create_post_condition_principal(principal) if isinstance(principal, str) else principal


def _asset(asset: AssetLike) -> AssetInfo:
    """Accept ``address.contract-name::asset-name`` or an ``AssetInfo``."""
    if isinstance(asset, AssetInfo):
        return asset
    try:
        contract_id, asset_name = asset.split("::", 1)
        address, contract_name = contract_id.split(".", 1)
    except ValueError as e:
        raise InvalidValueError(f"Asset must look like 'address.contract::asset', got {asset!r}", cause=e)
    return create_asset_info(address, contract_name, asset_name)


def create_stx_post_condition(principal: PrincipalLike, condition_code: FungibleConditionCode,
                              amount: int) -> STXPostCondition:
    """
    Create an STX post-condition.

    Args:
        principal: ``"origin"``, an address, ``address.contract``, or a parsed principal
        condition_code: Comparison applied to the amount
        amount: Amount in micro-units
    """
    return STXPostCondition(_principal(principal), condition_code, amount)


def create_fungible_post_condition(principal: PrincipalLike, condition_code: FungibleConditionCode,
                                   amount: int, asset: AssetLike) -> FungiblePostCondition:
    return FungiblePostCondition(_principal(principal), condition_code, amount, _asset(asset))


def create_non_fungible_post_condition(principal: PrincipalLike, condition_code: NonFungibleConditionCode,
                                       asset: AssetLike, asset_name: ClarityValue) -> NonFungiblePostCondition:
    return NonFungiblePostCondition(_principal(principal), condition_code, _asset(asset), asset_name)


def make_standard_stx_post_condition(address: Union[str, Address], condition_code: FungibleConditionCode,
                                     amount: int) -> STXPostCondition:
    return STXPostCondition(StandardPrincipal(create_address(address)), condition_code, amount)


def make_contract_stx_post_condition(address: Union[str, Address], contract_name: str,
                                     condition_code: FungibleConditionCode, amount: int) -> STXPostCondition:
    principal = ContractPrincipal(create_address(address), create_lp_string(validate_contract_name(contract_name)))
    return STXPostCondition(principal, condition_code, amount)


def serialize_post_condition(writer: BinaryWriter, condition: PostCondition) -> None:
    writer.u8(condition.condition_type)
    serialize_principal(writer, condition.principal)

    if isinstance(condition, (FungiblePostCondition, NonFungiblePostCondition)):
        serialize_asset_info(writer, condition.asset_info)
    if isinstance(condition, NonFungiblePostCondition):
        serialize_cv_into(writer, condition.asset_name)

    writer.u8(condition.condition_code)

    if isinstance(condition, (STXPostCondition, FungiblePostCondition)):
        writer.u64be(condition.amount)


def deserialize_post_condition(reader: BinaryReader) -> PostCondition:
    type_byte = reader.u8()
    principal = deserialize_principal(reader)

    if type_byte == PostConditionType.STX:
        code = reader.u8()
        return STXPostCondition(principal, _fungible_code(code), reader.u64be())
    if type_byte == PostConditionType.FUNGIBLE:
        asset = deserialize_asset_info(reader)
        code = reader.u8()
        return FungiblePostCondition(principal, _fungible_code(code), reader.u64be(), asset)
    if type_byte == PostConditionType.NON_FUNGIBLE:
        asset = deserialize_asset_info(reader)
        asset_name = deserialize_cv_from(reader)
        code = reader.u8()
        try:
            nft_code = NonFungibleConditionCode(code)
        except ValueError:
            raise DecodeError(f"Unknown non-fungible condition code: 0x{code:02x}")
        return NonFungiblePostCondition(principal, nft_code, asset, asset_name)

    raise DecodeError(f"Unknown post-condition type: 0x{type_byte:02x}", ErrorCode.UNKNOWN_WIRE_TYPE)


def _fungible_code(code: int) -> FungibleConditionCode:
    try:
        return FungibleConditionCode(code)
    except ValueError:
        raise DecodeError(f"Unknown fungible condition code: 0x{code:02x}")
