"""
Contract call and contract deploy builders.

Both accept post-conditions; the default mode is DENY, so any asset
movement not covered by a post-condition aborts the transaction.
"""

from __future__ import annotations
from typing import Any, List, Optional

from pydantic import Field

from ...enums import ClarityVersion
from ...network import FUNAI_MAINNET, NetworkLike
from ..fees import FeeEstimator, NonceLookup
from ..payload import create_contract_call_payload, create_smart_contract_payload
from ..transaction import Transaction
from .base import PostConditionOptions, SignerOrigin, UnsignedOrigin, assemble_transaction, sign_with


class ContractCallOptions(PostConditionOptions):
    """Options for calling a public contract function."""

    contract_address: str = Field(..., alias="contractAddress")
    contract_name: str = Field(..., alias="contractName")
    function_name: str = Field(..., alias="functionName")
    function_args: List[Any] = Field(default_factory=list, alias="functionArgs")


class ContractDeployOptions(PostConditionOptions):
    """Options for deploying a contract; ``clarity_version`` selects the versioned layout."""

    contract_name: str = Field(..., alias="contractName")
    code_body: str = Field(..., alias="codeBody")
    clarity_version: Optional[ClarityVersion] = Field(default=None, alias="clarityVersion")


def make_unsigned_contract_call(options: ContractCallOptions, origin: UnsignedOrigin,
                                network: NetworkLike = FUNAI_MAINNET,
                                fee_estimator: Optional[FeeEstimator] = None,
                                nonce_lookup: Optional[NonceLookup] = None) -> Transaction:
    """
    Build an unsigned contract call.

    Raises:
        InvalidIdentifierError: If the contract or function name is malformed
    """
    payload = create_contract_call_payload(options.contract_address, options.contract_name,
                                           options.function_name, options.function_args)
    return assemble_transaction(payload, origin, options, network, fee_estimator, nonce_lookup,
                                options.post_conditions, options.post_condition_mode)


def make_contract_call(options: ContractCallOptions, signer: SignerOrigin,
                       network: NetworkLike = FUNAI_MAINNET,
                       fee_estimator: Optional[FeeEstimator] = None,
                       nonce_lookup: Optional[NonceLookup] = None) -> Transaction:
    transaction = make_unsigned_contract_call(options, signer.to_origin(), network, fee_estimator, nonce_lookup)
    return sign_with(transaction, signer)


def make_unsigned_contract_deploy(options: ContractDeployOptions, origin: UnsignedOrigin,
                                  network: NetworkLike = FUNAI_MAINNET,
                                  fee_estimator: Optional[FeeEstimator] = None,
                                  nonce_lookup: Optional[NonceLookup] = None) -> Transaction:
    """Build an unsigned contract deploy."""
    payload = create_smart_contract_payload(options.contract_name, options.code_body, options.clarity_version)
    return assemble_transaction(payload, origin, options, network, fee_estimator, nonce_lookup,
                                options.post_conditions, options.post_condition_mode)


def make_contract_deploy(options: ContractDeployOptions, signer: SignerOrigin,
                         network: NetworkLike = FUNAI_MAINNET,
                         fee_estimator: Optional[FeeEstimator] = None,
                         nonce_lookup: Optional[NonceLookup] = None) -> Transaction:
    transaction = make_unsigned_contract_deploy(options, signer.to_origin(), network, fee_estimator, nonce_lookup)
    return sign_with(transaction, signer)
