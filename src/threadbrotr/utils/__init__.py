"""Utility layer: nostr-sdk client helpers.

Attributes:
    create_client: Read-only client factory with optional SOCKS5 proxy.
    connect_client: Connect a client to one relay.
    fetch_events: Run a filter against a connected client.
    shutdown_client: Dispose of a client.
"""

from .protocol import connect_client, create_client, fetch_events, shutdown_client


__all__ = [
    "connect_client",
    "create_client",
    "fetch_events",
    "shutdown_client",
]
