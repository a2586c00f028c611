"""
Immutable post-like Nostr events and their NIP-10 references.

[Note][threadbrotr.models.event.Note] is the only event shape the thread
resolver keeps after ingestion. It is decoupled from ``nostr_sdk.Event`` so
that the walker, formatter and tests work on plain values; the conversion
from SDK events happens once, in
[parse_relay_event()][threadbrotr.nips.nip01.parse_relay_event].

See Also:
    [threadbrotr.nips.nip10][]: Builds [EventReference][threadbrotr.models.event.EventReference]
        tuples from raw ``e`` tags.
    [threadbrotr.services.resolver.walker][]: Collects notes into a
        deduplicated set keyed by event id.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ._validation import validate_hex64, validate_instance, validate_optional_str, validate_timestamp
from .constants import EVENT_KIND_MAX, ReferenceMarker


@dataclass(frozen=True, slots=True)
class EventReference:
    """One ``e`` tag pointing at another event.

    Attributes:
        event_id: Referenced event id (lowercase hex).
        relay_hint: Relay URL suggested by the author, or ``None``.
        marker: NIP-10 marker, or ``None`` for positional (deprecated) tags.
    """

    event_id: str
    relay_hint: str | None = None
    marker: ReferenceMarker | None = None

    def __post_init__(self) -> None:
        validate_hex64(self.event_id, "event_id")
        validate_optional_str(self.relay_hint, "relay_hint")
        if self.marker is not None:
            validate_instance(self.marker, ReferenceMarker, "marker")

    @property
    def is_root(self) -> bool:
        return self.marker == ReferenceMarker.ROOT


@dataclass(frozen=True, slots=True)
class Note:
    """Immutable post-like event (kind 1 by default).

    Attributes:
        id: Event id, 64 lowercase hex characters. Sole deduplication key.
        author: Author public key, 64 lowercase hex characters.
        content: Raw event content.
        created_at: Unix timestamp declared by the author.
        kind: Event kind.
        references: ``e`` tag references in tag order.

    Raises:
        TypeError: If a field has the wrong type.
        ValueError: If an id is not lowercase hex or the kind is out of range.
    """

    id: str
    author: str
    content: str
    created_at: int
    kind: int = 1
    references: tuple[EventReference, ...] = field(default=())

    def __post_init__(self) -> None:
        validate_hex64(self.id, "id")
        validate_hex64(self.author, "author")
        validate_instance(self.content, str, "content")
        validate_timestamp(self.created_at, "created_at")
        validate_timestamp(self.kind, "kind")
        if self.kind > EVENT_KIND_MAX:
            raise ValueError(f"kind must be <= {EVENT_KIND_MAX}, got {self.kind}")
        if not isinstance(self.references, tuple):
            object.__setattr__(self, "references", tuple(self.references))
        for ref in self.references:
            validate_instance(ref, EventReference, "references item")

    @property
    def referenced_ids(self) -> tuple[str, ...]:
        """Ids of every referenced event, in tag order."""
        return tuple(ref.event_id for ref in self.references)

    def references_any(self, event_ids: set[str] | frozenset[str]) -> bool:
        """Return ``True`` if this note references at least one of *event_ids*."""
        return any(ref.event_id in event_ids for ref in self.references)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "author": self.author,
            "content": self.content,
            "created_at": self.created_at,
            "kind": self.kind,
            "references": [
                {
                    "event_id": ref.event_id,
                    "relay_hint": ref.relay_hint,
                    "marker": str(ref.marker) if ref.marker else None,
                }
                for ref in self.references
            ],
        }
