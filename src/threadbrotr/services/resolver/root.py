"""Root resolution: from the event the user pointed at to the thread root."""

from __future__ import annotations

from typing import TYPE_CHECKING

from threadbrotr.core.exceptions import RootNotFoundError
from threadbrotr.core.logger import Logger
from threadbrotr.models.constants import EventKind, is_event_id
from threadbrotr.nips.nip10 import root_candidate

from .filters import note_by_id
from .types import RootResolution


if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from threadbrotr.models.event import Note
    from threadbrotr.models.relay import Relay

    from .session import RelaySession


_logger = Logger("threadbrotr.root")


async def fetch_note(
    session: RelaySession,
    event_id: str,
    relays: Sequence[Relay] = (),
    *,
    kinds: Iterable[int] = (EventKind.TEXT_NOTE,),
) -> Note:
    """Fetch one note by id from the session's relays plus *relays*.

    Raises:
        RootNotFoundError: If no relay returned the event.
    """
    outcome = await session.query(note_by_id(event_id, kinds), relays)
    note = outcome.notes.get(event_id)
    if note is None:
        raise RootNotFoundError(event_id)
    return note


async def resolve_root(
    start_id: str,
    session: RelaySession,
    relays: Sequence[Relay] = (),
    *,
    kinds: Iterable[int] = (EventKind.TEXT_NOTE,),
) -> RootResolution:
    """Determine the thread root for *start_id*.

    A ``root``-marked ``e`` tag wins, else the first ``e`` tag, else the
    start event itself. A candidate that is not a valid event id falls back
    to *start_id*. If no relay returns the start event, *start_id* is used
    unverified and ``root_found`` is ``False``.
    """
    try:
        start = await fetch_note(session, start_id, relays, kinds=kinds)
    except RootNotFoundError:
        _logger.warning("root_not_found", event_id=start_id)
        return RootResolution(root_id=start_id, start=None, root_found=False)

    candidate = root_candidate(start.references)
    root_id = candidate if candidate is not None and is_event_id(candidate) else start_id
    _logger.info("root_resolved", start_id=start_id, root_id=root_id)
    return RootResolution(root_id=root_id, start=start, root_found=True)
