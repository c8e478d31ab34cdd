"""Pooled httpx client shared by every Tour API call in the process."""
import logging
from typing import Optional

import httpx

from app.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)

_shared_client: Optional[httpx.AsyncClient] = None


def build_client(config: Optional[Settings] = None, **overrides) -> httpx.AsyncClient:
    """New AsyncClient configured from settings.

    The all-regions listing and the statistics grid fire dozens of requests
    at one host per page view, hence the large keep-alive pool and HTTP/2.
    """
    config = config or default_settings
    options = dict(
        timeout=httpx.Timeout(config.API_TIMEOUT_SECONDS),
        limits=httpx.Limits(
            max_connections=config.HTTP_MAX_CONNECTIONS,
            max_keepalive_connections=config.HTTP_MAX_KEEPALIVE,
        ),
        http2=config.HTTP_ENABLE_HTTP2,
        headers={"Accept": "application/json"},
    )
    options.update(overrides)
    return httpx.AsyncClient(**options)


def get_shared_client() -> httpx.AsyncClient:
    global _shared_client

    if _shared_client is None or _shared_client.is_closed:
        _shared_client = build_client()
        logger.info(
            f"Tour API HTTP pool ready: max_conn={default_settings.HTTP_MAX_CONNECTIONS} "
            f"keepalive={default_settings.HTTP_MAX_KEEPALIVE} http2={default_settings.HTTP_ENABLE_HTTP2} "
            f"timeout={default_settings.API_TIMEOUT_SECONDS}s"
        )
    return _shared_client


async def close_shared_client():
    """Release pooled connections on shutdown."""
    global _shared_client

    if _shared_client is None:
        return
    await _shared_client.aclose()
    _shared_client = None
    logger.info("Tour API HTTP pool closed")
