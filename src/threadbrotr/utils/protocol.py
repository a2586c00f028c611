"""Nostr client operations for ThreadBrotr.

Thin wrappers around ``nostr_sdk.Client`` used by the
[RelaySession][threadbrotr.services.resolver.session.RelaySession]: client
factory with optional SOCKS5 proxy, single-relay connection, filtered event
fetch, and shutdown. The client is always read-only (no signer).

Attributes:
    create_client: Client factory with optional SOCKS5 proxy.
    connect_client: Create a client and connect it to exactly one relay.
    fetch_events: Run one filter against a connected client.
    shutdown_client: Dispose of a client, ignoring FFI teardown noise.

Note:
    Overlay networks (Tor, I2P, Lokinet) use
    ``nostr_sdk.ConnectionMode.PROXY`` with a SOCKS5 proxy. Clearnet relays
    connect directly over TLS.

Examples:
    ```python
    client = await connect_client(Relay("wss://relay.damus.io"), timeout=5.0)
    try:
        events = await fetch_events(client, Filter().kinds([Kind(1)]).limit(10), timeout=10.0)
    finally:
        await shutdown_client(client)
    ```
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import socket
from datetime import timedelta
from ipaddress import ip_address
from typing import TYPE_CHECKING
from urllib.parse import urlparse

from nostr_sdk import (
    ClientBuilder,
    ClientOptions,
    Connection,
    ConnectionMode,
    ConnectionTarget,
    RelayUrl,
)

from threadbrotr.models.constants import NetworkType


if TYPE_CHECKING:
    from nostr_sdk import Client, Filter
    from nostr_sdk import Event as NostrEvent

    from threadbrotr.models.relay import Relay


logger = logging.getLogger(__name__)


async def create_client(proxy_url: str | None = None) -> Client:
    """Create a read-only Nostr client, optionally routed through SOCKS5.

    Args:
        proxy_url: SOCKS5 proxy URL for overlay networks (e.g. ``socks5://tor:9050``).

    Returns:
        Configured ``Client`` instance (call ``add_relay()`` before use).

    Note:
        nostr-sdk requires a numeric proxy address, so a proxy hostname is
        resolved with ``asyncio.to_thread(socket.gethostbyname)``.
    """
    builder = ClientBuilder()

    if proxy_url is not None:
        parsed = urlparse(proxy_url)
        proxy_host = (parsed.hostname or "127.0.0.1").strip("[]")
        proxy_port = parsed.port or 9050
        try:
            ip_address(proxy_host)
        except ValueError:
            proxy_host = await asyncio.to_thread(socket.gethostbyname, proxy_host)

        conn = Connection().mode(ConnectionMode.PROXY(proxy_host, proxy_port)).target(ConnectionTarget.ONION)
        builder = builder.opts(ClientOptions().connection(conn))

    return builder.build()


async def connect_client(
    relay: Relay,
    proxy_url: str | None = None,
    timeout: float = 10.0,  # noqa: ASYNC109
) -> Client:
    """Create a client and connect it to a single relay.

    Args:
        relay: [Relay][threadbrotr.models.relay.Relay] to connect to.
        proxy_url: SOCKS5 proxy URL, required for overlay networks.
        timeout: Connection timeout in seconds.

    Returns:
        Connected ``Client``.

    Raises:
        ValueError: If an overlay relay is requested without ``proxy_url``.
        OSError: If the relay refuses or drops the connection.
    """
    if relay.network != NetworkType.CLEARNET and proxy_url is None:
        raise ValueError(f"proxy_url required for {relay.network} relay: {relay.url}")

    relay_url = RelayUrl.parse(relay.url)
    client = await create_client(proxy_url)
    await client.add_relay(relay_url)
    output = await client.try_connect(timedelta(seconds=timeout))

    if relay_url in output.success:
        logger.debug("relay_connected relay=%s", relay.url)
        return client

    error_message = output.failed.get(relay_url, "Unknown error")
    await shutdown_client(client)
    raise OSError(f"Connection failed: {relay.url} ({error_message})")


async def fetch_events(
    client: Client,
    event_filter: Filter,
    timeout: float = 10.0,  # noqa: ASYNC109
) -> list[NostrEvent]:
    """Fetch every stored event matching *event_filter* until EOSE or timeout.

    Signature verification is left to the caller.
    """
    events = await client.fetch_events(event_filter, timedelta(seconds=timeout))
    return events.to_vec()


async def shutdown_client(client: Client) -> None:
    """Shut the client down.

    nostr-sdk can raise arbitrary exception types from the Rust FFI layer
    during teardown; those are suppressed.
    """
    with contextlib.suppress(Exception):
        await client.shutdown()
