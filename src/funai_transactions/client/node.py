"""
Funai node client.

Default implementations of the two collaborators the transaction builders
consume: fee estimation and nonce lookup. Network errors and non-2xx
responses propagate to the caller unchanged; there is no retry policy.
"""

from __future__ import annotations
import logging
from typing import Any, Dict, Optional, Union

import requests

from ..network import FunaiNetwork, NetworkLike, default_url_from_network, network_from
from ..runtime.errors import NoEstimateAvailableError

logger = logging.getLogger(__name__)

NO_ESTIMATE_AVAILABLE = "NoEstimateAvailable"


class FunaiNodeClient:
    """
    Minimal HTTP client for a Funai node.

    Example:
        ```python
        with FunaiNodeClient.from_network("testnet") as client:
            tx = make_token_transfer(
                TokenTransferOptions(recipient=addr, amount=100),
                SingleSigSigner(sender_key),
                network="testnet",
                fee_estimator=client.estimate_fee,
                nonce_lookup=client.get_nonce,
            )
        ```
    """

    def __init__(
        self,
        endpoint: str,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the client.

        Args:
            endpoint: Node base URL, e.g. ``http://localhost:20443``
            timeout: Request timeout in seconds (default: 30)
            session: Optional requests.Session for connection pooling
        """
        self._endpoint = endpoint.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()
        self._owns_session = session is None

    @classmethod
    def from_network(cls, network: Union[NetworkLike, None] = None,
                     session: Optional[requests.Session] = None) -> FunaiNodeClient:
        """Create a client for a network's configured node."""
        if network is None:
            return cls(default_url_from_network(), session=session)
        net: FunaiNetwork = network_from(network)
        return cls(net.client.base_url, timeout=net.client.timeout, session=session)

    @property
    def endpoint(self) -> str:
        """Get the node endpoint."""
        return self._endpoint

    def close(self) -> None:
        """Close the HTTP session if owned by this client."""
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> FunaiNodeClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # =========================================================================
    # Accounts
    # =========================================================================

    def get_account_info(self, address: str) -> Dict[str, Any]:
        """
        Fetch account state.

        Args:
            address: c32 account address

        Returns:
            Account JSON with ``balance``, ``locked`` and ``nonce``

        Raises:
            requests.HTTPError: If the node answers with an error status
        """
        response = self._session.get(
            f"{self._endpoint}/v2/accounts/{address}",
            params={"proof": 0},
            timeout=self._timeout,
        )
        response.raise_for_status()
        return response.json()

    def get_nonce(self, address: str) -> int:
        """Next nonce for ``address``."""
        nonce = int(self.get_account_info(address)["nonce"])
        logger.debug(f"Fetched nonce {nonce} for {address}")
        return nonce

    # =========================================================================
    # Fees
    # =========================================================================

    def estimate_transaction(self, estimated_length: int, payload: bytes) -> list:
        """
        Ask the node for fee estimations for a payload.

        Args:
            estimated_length: Expected length of the signed transaction
            payload: Serialized transaction payload

        Returns:
            The node's three estimations, cheapest first

        Raises:
            NoEstimateAvailableError: If the node has no estimate for this payload
            requests.HTTPError: On any other error status
        """
        response = self._session.post(
            f"{self._endpoint}/v2/fees/transaction",
            json={"transaction_payload": payload.hex(), "estimated_len": estimated_length},
            timeout=self._timeout,
        )
        if not response.ok and NO_ESTIMATE_AVAILABLE in response.text:
            raise NoEstimateAvailableError(details={"status": response.status_code, "body": response.text})
        response.raise_for_status()
        return response.json()["estimations"]

    def get_transfer_fee_rate(self) -> int:
        """Per-byte fee rate for a token transfer."""
        response = self._session.get(f"{self._endpoint}/v2/fees/transfer", timeout=self._timeout)
        response.raise_for_status()
        return int(response.json())

    def estimate_fee(self, estimated_length: int, payload: bytes) -> int:
        """
        Estimate a fee, falling back to the transfer rate times the length
        when the node cannot estimate the payload.
        """
        try:
            fee = int(self.estimate_transaction(estimated_length, payload)[1]["fee"])
        except NoEstimateAvailableError:
            fee = self.get_transfer_fee_rate() * estimated_length
            logger.debug(f"No estimate available, using transfer rate fee {fee}")
        return fee
