"""
Network parameter sets.

Each network is an explicit configuration value passed into the builders;
nothing is read from global state.
"""

from __future__ import annotations
from typing import Optional, Union

from pydantic import BaseModel, Field

from .enums import AddressVersion, ChainId, PeerNetworkId, TransactionVersion
from .runtime.errors import InvalidValueError

MAINNET_URL = "http://34.143.166.224:20443"
TESTNET_URL = "http://localhost:20443"
DEVNET_URL = "http://localhost:3999"

DEVNET_MAGIC_BYTES = "id"


class AddressVersions(BaseModel):
    """Address version bytes for single-sig and multi-sig accounts."""

    single_sig: int = Field(..., alias="singleSig", ge=0, le=31)
    multi_sig: int = Field(..., alias="multiSig", ge=0, le=31)

    model_config = {"populate_by_name": True, "frozen": True}


class ClientOptions(BaseModel):
    """Where the default node collaborators send their requests."""

    base_url: str = Field(..., alias="baseUrl")
    timeout: float = Field(default=30.0, gt=0)

    model_config = {"populate_by_name": True, "frozen": True}


class FunaiNetwork(BaseModel):
    """
    Chain parameters used when building transactions.

    Matches the node's network definition: chain id and transaction version
    are serialized into every transaction, the address versions select the
    c32 prefix for nonce lookups.
    """

    name: str
    chain_id: int = Field(..., alias="chainId", ge=0, le=0xFFFFFFFF)
    transaction_version: TransactionVersion = Field(..., alias="transactionVersion")
    peer_network_id: int = Field(..., alias="peerNetworkId", ge=0, le=0xFFFFFFFF)
    magic_bytes: str = Field(..., alias="magicBytes", min_length=2, max_length=2)
    boot_address: str = Field(..., alias="bootAddress")
    address_version: AddressVersions = Field(..., alias="addressVersion")
    client: ClientOptions

    model_config = {"populate_by_name": True, "frozen": True}


FUNAI_MAINNET = FunaiNetwork(
    name="mainnet",
    chain_id=ChainId.MAINNET,
    transaction_version=TransactionVersion.MAINNET,
    peer_network_id=PeerNetworkId.MAINNET,
    magic_bytes="X2",
    boot_address="SP000000000000000000002Q6VF78",
    address_version=AddressVersions(
        single_sig=AddressVersion.MAINNET_SINGLE_SIG,
        multi_sig=AddressVersion.MAINNET_MULTI_SIG,
    ),
    client=ClientOptions(base_url=MAINNET_URL),
)

FUNAI_TESTNET = FunaiNetwork(
    name="testnet",
    chain_id=ChainId.TESTNET,
    transaction_version=TransactionVersion.TESTNET,
    peer_network_id=PeerNetworkId.TESTNET,
    magic_bytes="T2",
    boot_address="ST000000000000000000002AMW42H",
    address_version=AddressVersions(
        single_sig=AddressVersion.TESTNET_SINGLE_SIG,
        multi_sig=AddressVersion.TESTNET_MULTI_SIG,
    ),
    client=ClientOptions(base_url=TESTNET_URL),
)

FUNAI_DEVNET = FUNAI_TESTNET.model_copy(update={
    "name": "devnet",
    "magic_bytes": DEVNET_MAGIC_BYTES,
    "client": ClientOptions(base_url=DEVNET_URL),
})

FUNAI_MOCKNET = FUNAI_DEVNET.model_copy(update={"name": "mocknet"})

NETWORKS = {
    "mainnet": FUNAI_MAINNET,
    "testnet": FUNAI_TESTNET,
    "devnet": FUNAI_DEVNET,
    "mocknet": FUNAI_MOCKNET,
}

NetworkLike = Union[str, FunaiNetwork]


def network_from_name(name: str) -> FunaiNetwork:
    """
    Get a preset network by name.

    Args:
        name: One of ``mainnet``, ``testnet``, ``devnet``, ``mocknet``

    Raises:
        InvalidValueError: If the name is unknown
    """
    try:
        return NETWORKS[name]
    except KeyError:
        raise InvalidValueError(f"Unknown network name: {name}", {"known": sorted(NETWORKS)})


def network_from(network: NetworkLike) -> FunaiNetwork:
    if isinstance(network, str):
        return network_from_name(network)
    return network


def network_from_transaction(transaction_version: int, chain_id: int) -> FunaiNetwork:
    """
    Preset matching a transaction's header fields.

    Mainnet-versioned transactions map to FUNAI_MAINNET and everything else
    to FUNAI_TESTNET. A chain id that differs from the preset's is carried
    over, so custom chains keep their own id.
    """
    version = TransactionVersion(transaction_version)
    network = FUNAI_MAINNET if version == TransactionVersion.MAINNET else FUNAI_TESTNET
    if network.chain_id != chain_id:
        network = network.model_copy(update={"chain_id": chain_id})
    return network


def default_url_from_network(network: Optional[NetworkLike] = None) -> str:
    """Node URL to use when the caller has not configured one."""
    if network is None:
        return MAINNET_URL
    network = network_from(network)
    if network.transaction_version == TransactionVersion.MAINNET:
        return MAINNET_URL
    if network.magic_bytes == DEVNET_MAGIC_BYTES:
        return DEVNET_URL
    return TESTNET_URL
