"""
NIP-10 ``e`` tag parsing.

Both marked tags (``["e", <id>, <relay>, <marker>]``) and the deprecated
positional form are read into
[EventReference][threadbrotr.models.event.EventReference] values. Tags with a
malformed event id are skipped rather than failing the whole event, because
relays routinely serve notes written by sloppy clients.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from threadbrotr.models.constants import ReferenceMarker, is_event_id
from threadbrotr.models.event import EventReference


if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence


_MARKERS = {marker.value: marker for marker in ReferenceMarker}


def parse_references(tags: Iterable[Sequence[str]]) -> tuple[EventReference, ...]:
    """Extract every well-formed ``e`` tag reference, preserving tag order."""
    references: list[EventReference] = []
    for tag in tags:
        if len(tag) < 2 or tag[0] != "e" or not is_event_id(tag[1]):
            continue
        relay_hint = tag[2] if len(tag) > 2 and tag[2] else None
        marker = _MARKERS.get(tag[3]) if len(tag) > 3 else None
        references.append(EventReference(tag[1].lower(), relay_hint, marker))
    return tuple(references)


def root_candidate(references: Sequence[EventReference]) -> str | None:
    """Pick the thread root an event points at.

    The first reference marked ``root`` wins; otherwise the first reference
    in tag order. Returns ``None`` when there are no references.
    """
    for ref in references:
        if ref.is_root:
            return ref.event_id
    return references[0].event_id if references else None
