"""
Ingestion boundary for raw relay events.

[parse_relay_event()][threadbrotr.nips.nip01.parse_relay_event] is the single
place where ``nostr_sdk.Event`` objects become ThreadBrotr values: post-like
kinds become [Note][threadbrotr.models.event.Note], kind 0 becomes a
[ProfileEvent][threadbrotr.nips.nip01.ProfileEvent], everything else is
rejected. Nothing past this point touches the SDK event type.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from threadbrotr.models.constants import EventKind
from threadbrotr.models.event import Note

from .nip10 import parse_references


if TYPE_CHECKING:
    from collections.abc import Collection

    from nostr_sdk import Event as NostrEvent


@dataclass(frozen=True, slots=True)
class ProfileEvent:
    """Kind-0 metadata event, content still unparsed.

    Profile JSON is parsed later by the author directory so that a malformed
    profile only costs that one author.
    """

    id: str
    pubkey: str
    created_at: int
    content: str


RelayEvent = Note | ProfileEvent


def parse_relay_event(evt: NostrEvent, note_kinds: Collection[int] = (EventKind.TEXT_NOTE,)) -> RelayEvent:
    """Convert an SDK event into a [Note][threadbrotr.models.event.Note] or
    [ProfileEvent][threadbrotr.nips.nip01.ProfileEvent].

    Args:
        evt: Event as returned by ``Client.fetch_events``.
        note_kinds: Kinds treated as posts.

    Raises:
        ValueError: If the kind is neither a post kind nor kind 0, or a
            field fails model validation.
    """
    kind = evt.kind().as_u16()
    event_id = evt.id().to_hex()
    author = evt.author().to_hex()
    created_at = evt.created_at().as_secs()

    if kind in note_kinds:
        tags = [tag.as_vec() for tag in evt.tags().to_vec()]
        return Note(
            id=event_id,
            author=author,
            content=evt.content(),
            created_at=created_at,
            kind=kind,
            references=parse_references(tags),
        )
    if kind == EventKind.SET_METADATA:
        return ProfileEvent(id=event_id, pubkey=author, created_at=created_at, content=evt.content())
    raise ValueError(f"Unsupported event kind {kind} for event {event_id}")
