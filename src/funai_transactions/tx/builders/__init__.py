"""
High-level transaction builders.

Each builder has an unsigned and a signed form. Fee and nonce are filled
from the injected collaborators only when omitted (None); an explicit 0 is
kept as is.
"""

from .base import (
    MultiSigOrigin,
    MultiSigSigner,
    PostConditionOptions,
    SignerOrigin,
    SingleSigOrigin,
    SingleSigSigner,
    TransactionOptions,
    UnsignedOrigin,
    assemble_transaction,
    create_origin_condition,
    origin_address,
)
from .contracts import (
    ContractCallOptions,
    ContractDeployOptions,
    make_contract_call,
    make_contract_deploy,
    make_unsigned_contract_call,
    make_unsigned_contract_deploy,
)
from .inference import (
    InferOptions,
    RegisterModelOptions,
    make_infer,
    make_register_model,
    make_unsigned_infer,
    make_unsigned_register_model,
)
from .sponsor import SponsorOptions, sponsor_transaction
from .tokens import TokenTransferOptions, make_token_transfer, make_unsigned_token_transfer

__all__ = [
    "MultiSigOrigin",
    "MultiSigSigner",
    "PostConditionOptions",
    "SignerOrigin",
    "SingleSigOrigin",
    "SingleSigSigner",
    "TransactionOptions",
    "UnsignedOrigin",
    "assemble_transaction",
    "create_origin_condition",
    "origin_address",
    "ContractCallOptions",
    "ContractDeployOptions",
    "make_contract_call",
    "make_contract_deploy",
    "make_unsigned_contract_call",
    "make_unsigned_contract_deploy",
    "InferOptions",
    "RegisterModelOptions",
    "make_infer",
    "make_register_model",
    "make_unsigned_infer",
    "make_unsigned_register_model",
    "SponsorOptions",
    "sponsor_transaction",
    "TokenTransferOptions",
    "make_token_transfer",
    "make_unsigned_token_transfer",
]
