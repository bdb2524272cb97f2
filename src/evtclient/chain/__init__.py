"""Chain node access.

- ChainGateway: interface for the five node calls
- HttpChainGateway: httpx implementation
- ChainInfo: cached head state and reference block derivation
"""

from evtclient.chain.base import (
    ChainAPIError,
    ChainError,
    ChainGateway,
    ChainInfo,
    ChainRejectionError,
    NoResponseError,
)
from evtclient.chain.factory import get_gateway
from evtclient.chain.http import HttpChainGateway

__all__ = [
    "ChainAPIError",
    "ChainError",
    "ChainGateway",
    "ChainInfo",
    "ChainRejectionError",
    "HttpChainGateway",
    "NoResponseError",
    "get_gateway",
]
