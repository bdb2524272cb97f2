"""Factory for chain gateways."""

import logging
from typing import Optional

from evtclient.chain.base import ChainGateway
from evtclient.chain.http import HttpChainGateway
from evtclient.config import Settings, get_settings

logger = logging.getLogger(__name__)

# Cache for gateway instances, keyed by endpoint URL
_gateway_cache: dict[str, ChainGateway] = {}


def get_gateway(settings: Optional[Settings] = None) -> ChainGateway:
    """Get a chain gateway for the configured endpoint.

    Args:
        settings: Settings to use (defaults to the cached environment settings)

    Returns:
        ChainGateway instance for the endpoint
    """
    settings = settings or get_settings()
    url = settings.endpoint_url

    if url in _gateway_cache:
        return _gateway_cache[url]

    logger.info(f"Initializing chain gateway for {url}")
    gateway = HttpChainGateway(url, timeout=settings.request_timeout)
    _gateway_cache[url] = gateway
    return gateway


def reset_gateways() -> None:
    """Clear cached gateways (for testing)."""
    _gateway_cache.clear()
