"""Relay query filters for thread resolution.

[ThreadFilter][threadbrotr.services.resolver.filters.ThreadFilter] is the
subset of the NIP-01 filter the resolver needs, as a plain frozen value that
tests can compare. It is converted to a ``nostr_sdk.Filter`` only right
before a relay call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from nostr_sdk import Alphabet, EventId, Filter, Kind, PublicKey, SingleLetterTag


if TYPE_CHECKING:
    from collections.abc import Iterable


def _tuple(values: Iterable[object]) -> tuple:
    return values if isinstance(values, tuple) else tuple(values)


@dataclass(frozen=True, slots=True)
class ThreadFilter:
    """Immutable relay filter.

    Attributes:
        kinds: Event kinds to match.
        ids: Exact event ids.
        references: Event ids that matching events must reference in an
            ``e`` tag (the ``#e`` filter).
        authors: Author public keys.
        identifiers: ``d`` tag values (the ``#d`` filter).
        limit: Maximum events per relay, or ``None`` for the relay default.
    """

    kinds: tuple[int, ...] = field(default=())
    ids: tuple[str, ...] = field(default=())
    references: tuple[str, ...] = field(default=())
    authors: tuple[str, ...] = field(default=())
    identifiers: tuple[str, ...] = field(default=())
    limit: int | None = None

    def __post_init__(self) -> None:
        for name in ("kinds", "ids", "references", "authors", "identifiers"):
            object.__setattr__(self, name, _tuple(getattr(self, name)))
        if self.limit is not None and self.limit < 1:
            raise ValueError(f"limit must be positive, got {self.limit}")

    def to_nostr(self) -> Filter:
        """Build the equivalent ``nostr_sdk.Filter``."""
        f = Filter()
        if self.kinds:
            f = f.kinds([Kind(k) for k in self.kinds])
        if self.ids:
            f = f.ids([EventId.parse(i) for i in self.ids])
        if self.authors:
            f = f.authors([PublicKey.parse(a) for a in self.authors])
        if self.references:
            tag = SingleLetterTag.lowercase(Alphabet.E)
            for value in self.references:
                f = f.custom_tag(tag, value)
        if self.identifiers:
            tag = SingleLetterTag.lowercase(Alphabet.D)
            for value in self.identifiers:
                f = f.custom_tag(tag, value)
        if self.limit is not None:
            f = f.limit(self.limit)
        return f


def note_by_id(event_id: str, kinds: Iterable[int]) -> ThreadFilter:
    """Filter for a single post by id."""
    return ThreadFilter(kinds=tuple(kinds), ids=(event_id,), limit=1)


def replies_to(event_ids: Iterable[str], kinds: Iterable[int], limit: int) -> ThreadFilter:
    """Filter for posts referencing any of *event_ids*."""
    return ThreadFilter(kinds=tuple(kinds), references=tuple(event_ids), limit=limit)


def profiles_of(pubkeys: Iterable[str]) -> ThreadFilter:
    """Filter for kind-0 metadata of *pubkeys*."""
    authors = tuple(pubkeys)
    return ThreadFilter(kinds=(0,), authors=authors)


def addressable(kind: int, author: str, identifier: str) -> ThreadFilter:
    """Filter for the latest version of an addressable event."""
    return ThreadFilter(kinds=(kind,), authors=(author,), identifiers=(identifier,), limit=1)
