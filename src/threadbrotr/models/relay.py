"""
Validated Nostr relay endpoint with network type detection.

Parses and normalizes WebSocket relay URLs (``ws://`` or ``wss://``) coming
from configuration, CLI flags and NIP-19 relay hints. The network type
(clearnet, Tor, I2P, Lokinet) is detected from the hostname and the scheme is
enforced per network. Local and private addresses are rejected, so a relay
hint embedded in a ``nevent1`` can never point the resolver at the host it
runs on.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from ipaddress import ip_address
from typing import ClassVar

from rfc3986 import uri_reference
from rfc3986.exceptions import UnpermittedComponentError, ValidationError
from rfc3986.validators import Validator

from .constants import NetworkType


@dataclass(frozen=True, slots=True)
class Relay:
    """Immutable, normalized relay endpoint.

    Two relays compare equal when their normalized URLs match, which is what
    the query session relies on to deduplicate default relays against hints.

    Attributes:
        url: Fully normalized URL including scheme.
        network: Detected [NetworkType][threadbrotr.models.constants.NetworkType].
        host: Hostname or IP address (brackets stripped for IPv6).
        port: Explicit non-default port, or ``None``.
        path: Normalized path component, or ``None``.

    Raises:
        ValueError: If the URL is malformed, uses an unsupported scheme,
            resolves to a local/private address, or contains null bytes.

    Examples:
        ```python
        relay = Relay("wss://Relay.Damus.io/")
        relay.url       # 'wss://relay.damus.io'
        relay.network   # NetworkType.CLEARNET

        Relay("wss://abc123.onion").url   # 'ws://abc123.onion'
        ```
    """

    raw_url: str = field(repr=False, compare=False)

    url: str = field(init=False)
    network: NetworkType = field(init=False, compare=False)
    host: str = field(init=False, compare=False)
    port: int | None = field(init=False, compare=False)
    path: str | None = field(init=False, compare=False)

    _DEFAULT_PORTS: ClassVar[dict[str, int]] = {"ws": 80, "wss": 443}

    _OVERLAY_SUFFIXES: ClassVar[dict[str, NetworkType]] = {
        ".onion": NetworkType.TOR,
        ".i2p": NetworkType.I2P,
        ".loki": NetworkType.LOKI,
    }

    def __post_init__(self) -> None:
        if not isinstance(self.raw_url, str):
            raise TypeError(f"raw_url must be a str, got {type(self.raw_url).__name__}")
        if "\x00" in self.raw_url:
            raise ValueError("Relay URL contains null bytes")

        uri = uri_reference(self.raw_url.strip()).normalize()
        validator = (
            Validator()
            .require_presence_of("scheme", "host")
            .allow_schemes("ws", "wss")
            .check_validity_of("scheme", "host", "port", "path")
        )
        try:
            validator.validate(uri)
        except UnpermittedComponentError:
            raise ValueError("Invalid scheme: must be ws or wss") from None
        except ValidationError as e:
            raise ValueError(f"Invalid relay URL: {e}") from None

        if uri.query or uri.fragment:
            raise ValueError("Relay URL must not contain a query string or fragment")

        host = uri.host.strip("[]").lower()
        network = self.detect_network(host)
        if network == NetworkType.LOCAL:
            raise ValueError(f"Local addresses not allowed: '{host}'")
        if network == NetworkType.UNKNOWN:
            raise ValueError(f"Invalid host: '{host}'")

        scheme = "wss" if network == NetworkType.CLEARNET else "ws"

        path = uri.path or ""
        while "//" in path:
            path = path.replace("//", "/")
        path = path.rstrip("/") or None

        port = int(uri.port) if uri.port else None
        if port == self._DEFAULT_PORTS[scheme]:
            port = None

        netloc = f"[{host}]" if ":" in host else host
        if port is not None:
            netloc = f"{netloc}:{port}"

        object.__setattr__(self, "url", f"{scheme}://{netloc}{path or ''}")
        object.__setattr__(self, "network", network)
        object.__setattr__(self, "host", host)
        object.__setattr__(self, "port", port)
        object.__setattr__(self, "path", path)

    def __str__(self) -> str:
        return self.url

    @property
    def is_overlay(self) -> bool:
        """``True`` for Tor, I2P and Lokinet relays."""
        return self.network != NetworkType.CLEARNET

    @staticmethod
    def detect_network(host: str) -> NetworkType:
        """Classify a hostname into a network type.

        Overlay suffixes are checked first, then literal IP addresses
        (anything that is not globally routable counts as local), and finally
        the host is validated as a dotted domain name.
        """
        if not host:
            return NetworkType.UNKNOWN

        host = host.lower().strip("[]")
        for suffix, network in Relay._OVERLAY_SUFFIXES.items():
            if host.endswith(suffix):
                return network

        if host in ("localhost", "localhost.localdomain") or host.endswith(".local"):
            return NetworkType.LOCAL

        try:
            ip = ip_address(host)
        except ValueError:
            pass
        else:
            if ip.is_global and not ip.is_multicast:
                return NetworkType.CLEARNET
            return NetworkType.LOCAL

        labels = host.split(".")
        if len(labels) < 2:
            return NetworkType.UNKNOWN
        if all(label and not label.startswith("-") and not label.endswith("-") for label in labels):
            return NetworkType.CLEARNET
        return NetworkType.UNKNOWN
