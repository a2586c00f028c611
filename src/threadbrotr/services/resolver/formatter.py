"""Flat-text rendering of a resolved thread.

The output is the exact block consumed by downstream analysis: it must be
byte-for-byte reproducible for the same input, so nothing here depends on
the clock, on dict iteration over unordered sources, or on locale.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from threadbrotr.models.profile import ANONYMOUS


if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from threadbrotr.models.event import Note
    from threadbrotr.models.profile import Profile


ROOT_UNAVAILABLE = "(original post unavailable)"


def sort_replies(notes: Iterable[Note]) -> tuple[Note, ...]:
    """Newest first; equal timestamps ordered by event id ascending."""
    return tuple(sorted(notes, key=lambda note: (-note.created_at, note.id)))


def _label(pubkey: str, authors: Mapping[str, Profile]) -> str:
    profile = authors.get(pubkey)
    return profile.display_label if profile is not None else ANONYMOUS


def format_thread(
    root: Note | None,
    replies: Sequence[Note],
    authors: Mapping[str, Profile],
) -> str:
    """Render the thread as a plain-text block.

    Replies are rendered in the order given; call
    [sort_replies()][threadbrotr.services.resolver.formatter.sort_replies]
    first for the canonical order.

    Args:
        root: Root note, or ``None`` when no relay returned it.
        replies: Replies to render.
        authors: Pubkey to profile; missing authors render as ``Anonymous``.
    """
    if root is None:
        root_author, root_content = ANONYMOUS, ROOT_UNAVAILABLE
    else:
        root_author, root_content = _label(root.author, authors), root.content

    parts = [
        "ORIGINAL POST:\n",
        f"Author: {root_author}\n",
        f"Content: {root_content}\n\n",
        f"REPLIES ({len(replies)} total):\n\n",
    ]
    for index, reply in enumerate(replies, start=1):
        parts.append(
            f"Reply {index}:\n"
            f"Author: {_label(reply.author, authors)}\n"
            f"Content: {reply.content}\n"
            f"Pubkey: {reply.author}\n"
            f"EventId: {reply.id}\n\n"
        )
    return "".join(parts)
