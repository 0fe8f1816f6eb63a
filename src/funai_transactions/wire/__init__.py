"""
Wire primitive types and codec.
"""

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
    create_address,
    create_asset_info,
    create_lp_string,
    create_post_condition_principal,
    create_transaction_auth_field,
    validate_clarity_name,
    validate_contract_name,
)
from .codec import (
    decode_wire,
    deserialize_address,
    deserialize_lp_list,
    deserialize_lp_string,
    deserialize_memo_string,
    deserialize_message_signature,
    deserialize_principal,
    deserialize_public_key,
    deserialize_transaction_auth_field,
    encode_wire,
    serialize_address,
    serialize_lp_list,
    serialize_lp_string,
    serialize_memo_string,
    serialize_message_signature,
    serialize_principal,
    serialize_public_key,
    serialize_transaction_auth_field,
)

__all__ = [
    "Address",
    "AssetInfo",
    "ContractPrincipal",
    "LengthPrefixedList",
    "LengthPrefixedString",
    "MemoString",
    "MessageSignature",
    "OriginPrincipal",
    "PostConditionPrincipal",
    "PublicKey",
    "StandardPrincipal",
    "TransactionAuthField",
    "create_address",
    "create_asset_info",
    "create_lp_string",
    "create_post_condition_principal",
    "create_transaction_auth_field",
    "validate_clarity_name",
    "validate_contract_name",
    "encode_wire",
    "decode_wire",
    "serialize_address",
    "deserialize_address",
    "serialize_lp_string",
    "deserialize_lp_string",
    "serialize_memo_string",
    "deserialize_memo_string",
    "serialize_public_key",
    "deserialize_public_key",
    "serialize_message_signature",
    "deserialize_message_signature",
    "serialize_transaction_auth_field",
    "deserialize_transaction_auth_field",
    "serialize_principal",
    "deserialize_principal",
    "serialize_lp_list",
    "deserialize_lp_list",
]
