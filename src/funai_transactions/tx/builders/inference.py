"""
Infer and register-model builders.

Neither payload has a multi-sig path: passing a multi-sig origin raises
``UnsupportedMultiSigError`` before anything is built or signed.
"""

from __future__ import annotations
from typing import Optional, Union

from pydantic import Field

from ...network import FUNAI_MAINNET, NetworkLike
from ...runtime.errors import UnsupportedMultiSigError
from ..fees import FeeEstimator, NonceLookup
from ..payload import NULL_NODE_PRINCIPAL, create_infer_payload, create_register_model_payload
from ..transaction import Transaction
from .base import (
    MultiSigOrigin,
    MultiSigSigner,
    SingleSigOrigin,
    SingleSigSigner,
    TransactionOptions,
    assemble_transaction,
    sign_with,
)


class InferOptions(TransactionOptions):
    """Options for submitting an inference task."""

    infer_user_address: str = Field(..., alias="inferUserAddress")
    amount: int = Field(..., ge=0, le=0xFFFFFFFFFFFFFFFF)
    user_input: str = Field(..., alias="userInput")
    context: str = Field(default="")
    model_name: str = Field(..., alias="modelName")


class RegisterModelOptions(TransactionOptions):
    """Options for registering a model."""

    model_name: str = Field(..., alias="modelName")
    model_params: str = Field(..., alias="modelParams")


def _require_single_sig(origin: Union[SingleSigOrigin, SingleSigSigner, MultiSigOrigin, MultiSigSigner],
                        payload_kind: str) -> None:
    if isinstance(origin, (MultiSigOrigin, MultiSigSigner)):
        raise UnsupportedMultiSigError(payload_kind)


def make_unsigned_infer(options: InferOptions, origin: SingleSigOrigin,
                        network: NetworkLike = FUNAI_MAINNET,
                        fee_estimator: Optional[FeeEstimator] = None,
                        nonce_lookup: Optional[NonceLookup] = None) -> Transaction:
    """
    Build an unsigned infer transaction.

    The serving node is not known at submission time, so the payload carries
    the null node principal.

    Raises:
        UnsupportedMultiSigError: If ``origin`` is multi-sig
        ValueTooLongError: If the input, context or model name is too long
    """
    _require_single_sig(origin, "infer")
    payload = create_infer_payload(options.infer_user_address, options.amount, options.user_input,
                                   options.context, NULL_NODE_PRINCIPAL, options.model_name)
    return assemble_transaction(payload, origin, options, network, fee_estimator, nonce_lookup)


def make_infer(options: InferOptions, signer: SingleSigSigner,
               network: NetworkLike = FUNAI_MAINNET,
               fee_estimator: Optional[FeeEstimator] = None,
               nonce_lookup: Optional[NonceLookup] = None) -> Transaction:
    _require_single_sig(signer, "infer")
    transaction = make_unsigned_infer(options, signer.to_origin(), network, fee_estimator, nonce_lookup)
    return sign_with(transaction, signer)


def make_unsigned_register_model(options: RegisterModelOptions, origin: SingleSigOrigin,
                                 network: NetworkLike = FUNAI_MAINNET,
                                 fee_estimator: Optional[FeeEstimator] = None,
                                 nonce_lookup: Optional[NonceLookup] = None) -> Transaction:
    """
    Build an unsigned register-model transaction.

    Raises:
        UnsupportedMultiSigError: If ``origin`` is multi-sig
    """
    _require_single_sig(origin, "register-model")
    payload = create_register_model_payload(options.model_name, options.model_params)
    return assemble_transaction(payload, origin, options, network, fee_estimator, nonce_lookup)


def make_register_model(options: RegisterModelOptions, signer: SingleSigSigner,
                        network: NetworkLike = FUNAI_MAINNET,
                        fee_estimator: Optional[FeeEstimator] = None,
                        nonce_lookup: Optional[NonceLookup] = None) -> Transaction:
    _require_single_sig(signer, "register-model")
    transaction = make_unsigned_register_model(options, signer.to_origin(), network, fee_estimator, nonce_lookup)
    return sign_with(transaction, signer)
