"""HTTP chain gateway.

Talks to the node's ``/v1/chain`` API over JSON using httpx.
"""

import logging
from typing import Any, Optional

import httpx

from evtclient.chain.base import ChainAPIError, ChainGateway

logger = logging.getLogger(__name__)

GET_INFO = "/v1/chain/get_info"
ABI_JSON_TO_BIN = "/v1/chain/abi_json_to_bin"
TRX_JSON_TO_DIGEST = "/v1/chain/trx_json_to_digest"
PUSH_TRANSACTION = "/v1/chain/push_transaction"
GET_REQUIRED_KEYS = "/v1/chain/get_required_keys"


class HttpChainGateway(ChainGateway):
    """Chain gateway backed by the node's HTTP API."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize gateway.

        Args:
            base_url: Node URL, e.g. ``http://127.0.0.1:8888``
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._headers = {"Content-Type": "application/json"}

    async def _request(self, method: str, path: str, body: Any = None) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            logger.debug(f"{method} {path}")
            return await client.request(
                method,
                f"{self.base_url}{path}",
                json=body,
                headers=self._headers,
            )

    async def _call(self, method: str, path: str, body: Any = None) -> dict:
        """Send a request and return the parsed reply, raising on HTTP errors."""
        response = await self._request(method, path, body)
        data = _parse_json(response)

        if response.status_code >= 400:
            error = data.get("error") if isinstance(data.get("error"), dict) else None
            logger.warning(f"Chain API error on {path}: HTTP {response.status_code}")
            raise ChainAPIError(path, response.status_code, error)

        return data

    async def get_info(self) -> dict:
        return await self._call("GET", GET_INFO)

    async def abi_json_to_bin(self, action: dict) -> dict:
        return await self._call("POST", ABI_JSON_TO_BIN, action)

    async def trx_json_to_digest(self, transaction: dict) -> dict:
        return await self._call("POST", TRX_JSON_TO_DIGEST, transaction)

    async def push_transaction(self, signed_transaction: dict) -> dict:
        """Push a signed transaction.

        The node reports execution failures as an error envelope with a 5xx
        status, so the body is returned whatever the status code.
        """
        response = await self._request("POST", PUSH_TRANSACTION, signed_transaction)
        if response.status_code >= 400:
            logger.warning(f"push_transaction returned HTTP {response.status_code}")
        return _parse_json(response)

    async def get_required_keys(self, transaction: dict, available_keys: list[str]) -> dict:
        return await self._call(
            "POST",
            GET_REQUIRED_KEYS,
            {"transaction": transaction, "available_keys": available_keys},
        )

    def __repr__(self) -> str:
        return f"HttpChainGateway(base_url={self.base_url!r})"


def _parse_json(response: httpx.Response) -> dict:
    """Parse a JSON object body; anything else becomes an empty dict."""
    if not response.content:
        return {}
    try:
        data = response.json()
    except ValueError:
        logger.warning(f"Non-JSON reply from {response.request.url.path}")
        return {}
    return data if isinstance(data, dict) else {}
