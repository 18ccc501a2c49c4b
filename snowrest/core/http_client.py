"""HTTP client construction for the REST transport.

The request handler talks to the API through a single ``httpx.AsyncClient``
so connections are reused across every rate limit bucket.
"""

from typing import Mapping, Optional

import httpx

from snowrest.core.config import Settings, settings as default_settings


def create_http_client(
    base_url: str,
    headers: Optional[Mapping[str, str]] = None,
    config: Optional[Settings] = None,
    **kwargs,
) -> httpx.AsyncClient:
    """Create a new HTTP client with granular timeouts and pool limits.

    Note: The returned client should be closed when done, either directly
    or by closing the ``RestClient`` that owns it.

    Args:
        base_url: Versioned API base URL
        headers: Default headers sent with every request
        config: Settings to read defaults from (module settings by default)
        **kwargs: Override default settings. Can include:
            - timeout: Single timeout value (overrides all granular timeouts)
            - connect_timeout, read_timeout, write_timeout, pool_timeout
            - max_connections, max_keepalive_connections, keepalive_expiry
            - transport: Custom ``httpx.AsyncBaseTransport`` (mainly for tests)

    Returns:
        A new httpx.AsyncClient instance.
    """
    cfg = config or default_settings

    timeout_override = kwargs.get("timeout")
    if timeout_override is not None:
        timeout = httpx.Timeout(timeout_override)
    else:
        timeout = httpx.Timeout(
            connect=kwargs.get("connect_timeout", cfg.httpx_connect_timeout),
            read=kwargs.get("read_timeout", cfg.httpx_read_timeout),
            write=kwargs.get("write_timeout", cfg.httpx_write_timeout),
            pool=kwargs.get("pool_timeout", cfg.httpx_pool_timeout),
        )

    limits = httpx.Limits(
        max_connections=kwargs.get("max_connections", cfg.httpx_max_connections),
        max_keepalive_connections=kwargs.get(
            "max_keepalive_connections", cfg.httpx_max_keepalive_connections
        ),
        keepalive_expiry=kwargs.get("keepalive_expiry", cfg.httpx_keepalive_expiry),
    )

    client_kwargs = {
        "base_url": base_url,
        "headers": dict(headers or {}),
        "timeout": timeout,
        "limits": limits,
    }
    if kwargs.get("transport") is not None:
        client_kwargs["transport"] = kwargs["transport"]
    return httpx.AsyncClient(**client_kwargs)
