"""Shared constants for the models layer.

Defines enumerations and identifier helpers used across the model, NIP and
service modules. Placing them here keeps the models layer free of imports
from the layers above it.

See Also:
    [threadbrotr.models.relay][]: Uses [NetworkType][threadbrotr.models.constants.NetworkType]
        to classify relay URLs during construction.
    [threadbrotr.models.event][]: Uses [ReferenceMarker][threadbrotr.models.constants.ReferenceMarker]
        for NIP-10 ``e`` tag markers.
"""

from __future__ import annotations

import re
from enum import IntEnum, StrEnum


_HEX64 = re.compile(r"[0-9a-fA-F]{64}")


class NetworkType(StrEnum):
    """Network type enum for relay classification.

    Each relay URL is classified into exactly one network type during
    [Relay][threadbrotr.models.relay.Relay] construction. Clearnet relays are
    contacted over ``wss://``; overlay networks use ``ws://`` and need a
    SOCKS5 proxy configured in
    [NetworksConfig][threadbrotr.services.resolver.configs.NetworksConfig].

    Attributes:
        CLEARNET: Public internet relay using ``wss://`` (TLS required).
        TOR: Tor hidden service identified by a ``.onion`` hostname.
        I2P: I2P eepsite identified by a ``.i2p`` hostname.
        LOKI: Lokinet service identified by a ``.loki`` hostname.
        LOCAL: Private or reserved IP address (rejected during validation).
        UNKNOWN: Hostname that could not be classified (rejected during validation).
    """

    CLEARNET = "clearnet"
    TOR = "tor"
    I2P = "i2p"
    LOKI = "loki"
    LOCAL = "local"
    UNKNOWN = "unknown"


class EventKind(IntEnum):
    """Nostr event kinds the thread resolver understands.

    Attributes:
        SET_METADATA: Kind 0 -- user profile metadata (NIP-01).
        TEXT_NOTE: Kind 1 -- short text note, the default post kind (NIP-01).
    """

    SET_METADATA = 0
    TEXT_NOTE = 1


class ReferenceMarker(StrEnum):
    """NIP-10 marker carried in the fourth position of an ``e`` tag."""

    ROOT = "root"
    REPLY = "reply"
    MENTION = "mention"


EVENT_KIND_MAX = 65_535


def is_event_id(value: object) -> bool:
    """Return ``True`` if *value* is a 64-character hex string (any case)."""
    return isinstance(value, str) and bool(_HEX64.fullmatch(value))


def normalize_event_id(value: str) -> str:
    """Return *value* as a lowercase event id.

    Raises:
        ValueError: If *value* is not 64 hex characters.
    """
    if not is_event_id(value):
        raise ValueError(f"Not a 64-character hex event id: {value!r}")
    return value.lower()
