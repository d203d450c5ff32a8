"""Valkey (Redis-compatible) connection for the analysis cache."""

import logging

from redis import Redis

from policycheck.core.config import get_settings

logger = logging.getLogger(__name__)

_client: Redis | None = None


def connect() -> None:
    """Create and store the Valkey connection (call on app startup)."""
    global _client
    settings = get_settings()
    _client = Redis(
        host=settings.valkey_host,
        port=settings.valkey_port,
        password=settings.valkey_password or None,
        decode_responses=False,
        socket_connect_timeout=2,
        socket_timeout=2,
    )
    logger.info("Valkey client configured for %s:%d", settings.valkey_host, settings.valkey_port)


def close() -> None:
    """Close the Valkey connection (call on app shutdown)."""
    global _client
    if _client is not None:
        _client.close()
        _client = None


def get_client() -> Redis:
    """Return the shared Valkey client. Call connect() before first use."""
    if _client is None:
        raise RuntimeError("Valkey not connected; call db.connect() first.")
    return _client
