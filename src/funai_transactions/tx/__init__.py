"""
Transactions: payloads, post-conditions, authorization and assembly.

The high-level builders live in ``tx.builders`` and are imported from
there (they depend on the signers, which depend on this package).
"""

from .authorization import (
    Authorization,
    MultiSigSpendingCondition,
    SingleSigSpendingCondition,
    SpendingCondition,
    SponsoredAuthorization,
    StandardAuthorization,
    address_from_public_keys,
    address_hash_from_public_keys,
    create_multi_sig_spending_condition,
    create_single_sig_spending_condition,
    create_sponsored_auth,
    create_standard_auth,
    into_initial_sighash_auth,
    make_sighash_postsign,
    make_sighash_presign,
    next_signature,
    next_verification,
    verify_spending_condition,
)
from .fees import FeeEstimator, NonceLookup, estimate_fee, estimate_transaction_byte_length
from .payload import (
    NULL_NODE_PRINCIPAL,
    CoinbasePayload,
    CoinbaseToAltRecipientPayload,
    ContractCallPayload,
    InferPayload,
    NakamotoCoinbasePayload,
    Payload,
    PoisonPayload,
    RegisterModelPayload,
    SmartContractPayload,
    TenureChangePayload,
    TokenTransferPayload,
    VersionedSmartContractPayload,
    create_coinbase_payload,
    create_contract_call_payload,
    create_infer_payload,
    create_nakamoto_coinbase_payload,
    create_poison_payload,
    create_register_model_payload,
    create_smart_contract_payload,
    create_tenure_change_payload,
    create_token_transfer_payload,
    deserialize_payload,
    serialize_payload,
    serialize_payload_bytes,
)
from .postconditions import (
    FungiblePostCondition,
    NonFungiblePostCondition,
    PostCondition,
    STXPostCondition,
    create_fungible_post_condition,
    create_non_fungible_post_condition,
    create_stx_post_condition,
    deserialize_post_condition,
    make_contract_stx_post_condition,
    make_standard_stx_post_condition,
    serialize_post_condition,
)
from .transaction import Transaction

__all__ = [
    "Authorization",
    "MultiSigSpendingCondition",
    "SingleSigSpendingCondition",
    "SpendingCondition",
    "SponsoredAuthorization",
    "StandardAuthorization",
    "address_from_public_keys",
    "address_hash_from_public_keys",
    "create_multi_sig_spending_condition",
    "create_single_sig_spending_condition",
    "create_sponsored_auth",
    "create_standard_auth",
    "into_initial_sighash_auth",
    "make_sighash_postsign",
    "make_sighash_presign",
    "next_signature",
    "next_verification",
    "verify_spending_condition",
    "FeeEstimator",
    "NonceLookup",
    "estimate_fee",
    "estimate_transaction_byte_length",
    "NULL_NODE_PRINCIPAL",
    "CoinbasePayload",
    "CoinbaseToAltRecipientPayload",
    "ContractCallPayload",
    "InferPayload",
    "NakamotoCoinbasePayload",
    "Payload",
    "PoisonPayload",
    "RegisterModelPayload",
    "SmartContractPayload",
    "TenureChangePayload",
    "TokenTransferPayload",
    "VersionedSmartContractPayload",
    "create_coinbase_payload",
    "create_contract_call_payload",
    "create_infer_payload",
    "create_nakamoto_coinbase_payload",
    "create_poison_payload",
    "create_register_model_payload",
    "create_smart_contract_payload",
    "create_tenure_change_payload",
    "create_token_transfer_payload",
    "deserialize_payload",
    "serialize_payload",
    "serialize_payload_bytes",
    "FungiblePostCondition",
    "NonFungiblePostCondition",
    "PostCondition",
    "STXPostCondition",
    "create_fungible_post_condition",
    "create_non_fungible_post_condition",
    "create_stx_post_condition",
    "deserialize_post_condition",
    "make_contract_stx_post_condition",
    "make_standard_stx_post_condition",
    "serialize_post_condition",
    "Transaction",
]
