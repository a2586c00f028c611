"""
NIP-19 / NIP-21 thread reference decoding.

Turns whatever the user pasted (a ``note1``, ``nevent1`` or ``naddr1``
bech32 entity, a ``nostr:`` URI wrapping one of those, or a raw 64-char hex
event id) into a [ThreadReference][threadbrotr.nips.nip19.ThreadReference].
Bech32 and TLV decoding is delegated to ``nostr_sdk``; this module only
normalizes the result and validates relay hints.

Decoding is pure: no network access, no state.

Examples:
    ```python
    ref = decode_reference("nostr:nevent1qqs...")
    ref.kind          # ReferenceKind.NEVENT
    ref.event_id      # 'b9f5441e...'
    ref.relay_hints   # (Relay('wss://relay.example.com'),)
    ```
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from nostr_sdk import EventId, Nip19Coordinate, Nip19Event, NostrSdkError

from threadbrotr.core.exceptions import InvalidReferenceError
from threadbrotr.core.logger import format_kv_pairs
from threadbrotr.models.constants import is_event_id
from threadbrotr.models.relay import Relay


if TYPE_CHECKING:
    from collections.abc import Iterable


_logger = logging.getLogger(__name__)

_URI_PREFIX = "nostr:"


class ReferenceKind(StrEnum):
    """Encoding the thread reference arrived in."""

    NOTE = "note"
    NEVENT = "nevent"
    NADDR = "naddr"
    HEX = "hex"


@dataclass(frozen=True, slots=True)
class Coordinate:
    """Addressable event coordinate carried by an ``naddr1`` entity.

    Attributes:
        kind: Event kind of the addressable event.
        author: Author public key (lowercase hex).
        identifier: ``d`` tag value; may be empty.
    """

    kind: int
    author: str
    identifier: str


@dataclass(frozen=True, slots=True)
class ThreadReference:
    """Decoded starting point for thread resolution.

    Attributes:
        raw: Input string as received (before stripping).
        event_id: Lookup key. A lowercase hex event id for ``note``,
            ``nevent`` and ``hex`` inputs; for ``naddr`` the coordinate
            identifier, or the author pubkey when the identifier is empty.
        kind: [ReferenceKind][threadbrotr.nips.nip19.ReferenceKind] of the input.
        relay_hints: Relays embedded in the entity, in entity order.
        coordinate: Present only for ``naddr`` references.
    """

    raw: str
    event_id: str
    kind: ReferenceKind
    relay_hints: tuple[Relay, ...] = field(default=())
    coordinate: Coordinate | None = None

    @property
    def has_event_id(self) -> bool:
        """``True`` when ``event_id`` is an actual hex event id."""
        return self.kind != ReferenceKind.NADDR


def _relay_hints(raw_relays: Iterable[Any], reference: str) -> tuple[Relay, ...]:
    """Validate embedded relay URLs, dropping the ones that are unusable."""
    hints: list[Relay] = []
    for raw in raw_relays:
        url = str(raw)
        try:
            relay = Relay(url)
        except (TypeError, ValueError) as e:
            _logger.debug(
                "relay_hint_dropped" + format_kv_pairs({"reference": reference, "url": url, "error": str(e)})
            )
            continue
        if relay not in hints:
            hints.append(relay)
    return tuple(hints)


def decode_reference(reference: str) -> ThreadReference:
    """Decode a user-supplied thread reference.

    Args:
        reference: ``note1...``, ``nevent1...``, ``naddr1...`` (optionally
            prefixed with ``nostr:``) or a 64-character hex event id.

    Returns:
        The decoded [ThreadReference][threadbrotr.nips.nip19.ThreadReference].
        Embedded relay hints that are not usable relay URLs (local or private
        hosts, non-websocket schemes) are dropped, so ``relay_hints`` can hold
        fewer entries than the entity carries.

    Raises:
        InvalidReferenceError: If the input matches none of the supported
            encodings or fails bech32 checksum/TLV decoding.
    """
    if not isinstance(reference, str):
        raise InvalidReferenceError(repr(reference), "reference must be a string")

    value = reference.strip()
    if value.lower().startswith(_URI_PREFIX):
        value = value[len(_URI_PREFIX) :]

    if not value:
        raise InvalidReferenceError(reference, "empty reference")

    if is_event_id(value):
        return ThreadReference(raw=reference, event_id=value.lower(), kind=ReferenceKind.HEX)

    lowered = value.lower()
    try:
        if lowered.startswith("note1"):
            event_id = EventId.parse(lowered).to_hex()
            return ThreadReference(raw=reference, event_id=event_id, kind=ReferenceKind.NOTE)

        if lowered.startswith("nevent1"):
            nevent = Nip19Event.from_bech32(lowered)
            return ThreadReference(
                raw=reference,
                event_id=nevent.event_id().to_hex(),
                kind=ReferenceKind.NEVENT,
                relay_hints=_relay_hints(nevent.relays(), reference),
            )

        if lowered.startswith("naddr1"):
            naddr = Nip19Coordinate.from_bech32(lowered)
            coord = naddr.coordinate()
            coordinate = Coordinate(
                kind=coord.kind().as_u16(),
                author=coord.public_key().to_hex(),
                identifier=coord.identifier(),
            )
            return ThreadReference(
                raw=reference,
                event_id=coordinate.identifier or coordinate.author,
                kind=ReferenceKind.NADDR,
                relay_hints=_relay_hints(naddr.relays(), reference),
                coordinate=coordinate,
            )
    except (NostrSdkError, ValueError, TypeError) as e:
        raise InvalidReferenceError(reference, f"undecodable bech32 entity ({e})") from e

    raise InvalidReferenceError(reference, "expected note1, nevent1, naddr1 or 64-char hex")
