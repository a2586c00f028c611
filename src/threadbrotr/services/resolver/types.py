"""Result types of the thread resolver."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from .formatter import format_thread


if TYPE_CHECKING:
    from collections.abc import Mapping

    from threadbrotr.models.event import Note
    from threadbrotr.models.profile import Profile
    from threadbrotr.nips.nip19 import ThreadReference


@dataclass(frozen=True, slots=True)
class RootResolution:
    """Outcome of root resolution.

    Attributes:
        root_id: Event id the reply graph is expanded from.
        start: The starting note, if any relay returned it.
        root_found: ``False`` when the starting note was not found and
            ``root_id`` is the unverified start id.
    """

    root_id: str
    start: Note | None = None
    root_found: bool = False


@dataclass(frozen=True, slots=True)
class ResolvedThread:
    """A reconstructed thread.

    Attributes:
        reference: The decoded input reference.
        root_id: Id the reply graph was expanded from.
        root: Root note; the start note when only the root is missing;
            ``None`` when neither was found.
        replies: Collected replies, newest first (id ascending on ties).
        authors: Read-only pubkey to profile mapping.
        depth_reached: Number of BFS levels expanded.
        relays_queried: Every relay URL contacted during resolution.
    """

    reference: ThreadReference
    root_id: str
    root: Note | None
    replies: tuple[Note, ...] = ()
    authors: Mapping[str, Profile] = field(default_factory=dict)
    depth_reached: int = 0
    relays_queried: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.authors, MappingProxyType):
            object.__setattr__(self, "authors", MappingProxyType(dict(self.authors)))

    @property
    def is_empty(self) -> bool:
        """``True`` when no reply was collected (a valid result)."""
        return not self.replies

    @property
    def reply_count(self) -> int:
        return len(self.replies)

    def author_of(self, pubkey: str) -> Profile | None:
        return self.authors.get(pubkey)

    def render(self) -> str:
        """Flat-text block, see [format_thread()][threadbrotr.services.resolver.formatter.format_thread]."""
        return format_thread(self.root, self.replies, self.authors)

    def to_dict(self) -> dict[str, Any]:
        return {
            "reference": self.reference.raw,
            "reference_kind": str(self.reference.kind),
            "root_id": self.root_id,
            "root": self.root.to_dict() if self.root else None,
            "reply_count": self.reply_count,
            "replies": [reply.to_dict() for reply in self.replies],
            "authors": {pubkey: profile.to_dict() for pubkey, profile in self.authors.items()},
            "depth_reached": self.depth_reached,
            "relays_queried": list(self.relays_queried),
        }
