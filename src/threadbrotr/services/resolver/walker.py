"""Bounded breadth-first expansion of the reply graph.

[ReplyGraphWalker][threadbrotr.services.resolver.walker.ReplyGraphWalker]
starts from the root id and repeatedly asks the relays for posts that
reference any id of the current frontier. Each level is split into
``batch_size`` chunks queried one after the other; each chunk fans out
across all relays through the session. The walk stops when the frontier is
empty, ``max_depth`` levels have been expanded, or ``max_total`` replies
have been collected.

Relays decide which events fall inside a filter's ``limit``; within one
level the walker keeps events in the order the session returns them
(endpoint order, then relay order) and stops inserting at ``max_total``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from threadbrotr.core.logger import Logger
from threadbrotr.models.constants import EventKind

from .configs import TraversalLimitsConfig
from .filters import replies_to


if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence

    from threadbrotr.models.event import Note
    from threadbrotr.models.relay import Relay

    from .session import RelaySession


class CollectedSet:
    """Insertion-ordered, bounded, duplicate-free set of replies.

    Never contains the root id and never grows past ``max_total``.

    Attributes:
        root_id: Id excluded from the set.
        max_total: Capacity.
        depth_reached: Levels expanded by the walker that filled the set.
    """

    __slots__ = ("_notes", "depth_reached", "max_total", "root_id")

    def __init__(self, root_id: str, max_total: int) -> None:
        if max_total < 1:
            raise ValueError(f"max_total must be positive, got {max_total}")
        self.root_id = root_id
        self.max_total = max_total
        self.depth_reached = 0
        self._notes: dict[str, Note] = {}

    def add(self, note: Note) -> bool:
        """Insert *note*; ``False`` if it is the root, a duplicate, or the set is full."""
        if note.id == self.root_id or note.id in self._notes or self.is_full:
            return False
        self._notes[note.id] = note
        return True

    @property
    def is_full(self) -> bool:
        return len(self._notes) >= self.max_total

    @property
    def ids(self) -> tuple[str, ...]:
        return tuple(self._notes)

    def __len__(self) -> int:
        return len(self._notes)

    def __contains__(self, event_id: object) -> bool:
        return event_id in self._notes

    def __iter__(self) -> Iterator[Note]:
        return iter(self._notes.values())


class ReplyGraphWalker:
    """Breadth-first reply collector bound to one session.

    Args:
        session: Session used for every level query.
        limits: Traversal ceilings.
        kinds: Post kinds to follow.
    """

    def __init__(
        self,
        session: RelaySession,
        limits: TraversalLimitsConfig | None = None,
        kinds: Iterable[int] = (EventKind.TEXT_NOTE,),
        *,
        logger: Logger | None = None,
    ) -> None:
        self._session = session
        self._limits = limits or TraversalLimitsConfig()
        self._kinds = tuple(kinds)
        self._logger = logger or Logger("threadbrotr.walker")

    async def walk(self, root_id: str, relays: Sequence[Relay] = ()) -> CollectedSet:
        """Collect replies below *root_id*.

        Args:
            root_id: Event id to expand from.
            relays: Request-specific relays added to the session defaults.

        Returns:
            The filled [CollectedSet][threadbrotr.services.resolver.walker.CollectedSet];
            possibly empty.
        """
        limits = self._limits
        collected = CollectedSet(root_id, limits.max_total)
        seen: set[str] = {root_id}
        frontier: list[str] = [root_id]
        depth = 0

        while frontier and depth < limits.max_depth and not collected.is_full:
            next_frontier: list[str] = []
            for start in range(0, len(frontier), limits.batch_size):
                if collected.is_full:
                    break
                batch = frontier[start : start + limits.batch_size]
                next_frontier.extend(await self._expand_batch(batch, seen, collected, relays))

            depth += 1
            self._logger.info(
                "level_expanded",
                depth=depth,
                frontier=len(frontier),
                discovered=len(next_frontier),
                collected=len(collected),
            )
            frontier = next_frontier

        collected.depth_reached = depth
        self._logger.info("walk_completed", root_id=root_id, collected=len(collected), depth=depth)
        return collected

    async def _expand_batch(
        self,
        batch: list[str],
        seen: set[str],
        collected: CollectedSet,
        relays: Sequence[Relay],
    ) -> list[str]:
        """Query one batch and insert its unseen direct replies."""
        outcome = await self._session.query(
            replies_to(batch, self._kinds, self._limits.per_query_limit), relays
        )
        batch_ids = frozenset(batch)
        discovered: list[str] = []
        for note in outcome.notes.values():
            if note.id in seen or not note.references_any(batch_ids):
                continue
            if not collected.add(note):
                break
            seen.add(note.id)
            discovered.append(note.id)
        return discovered
