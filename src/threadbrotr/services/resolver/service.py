"""Thread resolver service.

[ThreadResolver][threadbrotr.services.resolver.service.ThreadResolver] runs
one resolution request end to end:

1. Decode the reference
   ([decode_reference()][threadbrotr.nips.nip19.decode_reference]).
2. Resolve the thread root
   ([resolve_root()][threadbrotr.services.resolver.root.resolve_root]), or
   look up the addressable event for ``naddr1`` references.
3. Expand the reply graph
   ([ReplyGraphWalker][threadbrotr.services.resolver.walker.ReplyGraphWalker]).
4. Enrich authors
   ([AuthorDirectory][threadbrotr.services.resolver.authors.AuthorDirectory]).

Every step shares one [RelaySession][threadbrotr.services.resolver.session.RelaySession],
created at the start of the request and closed at its end.

Examples:
    ```python
    resolver = ThreadResolver.from_yaml("config/threadbrotr.yaml")
    thread = await resolver.resolve("nevent1qqs...")
    print(thread.render())
    ```
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

from threadbrotr.core.exceptions import RelaySetUnreachableError, RootNotFoundError
from threadbrotr.core.logger import Logger
from threadbrotr.core.metrics import record_resolution
from threadbrotr.core.yaml import load_yaml
from threadbrotr.nips.nip19 import ReferenceKind, ThreadReference, decode_reference

from .authors import AuthorDirectory
from .configs import ResolverConfig
from .filters import addressable
from .formatter import sort_replies
from .root import fetch_note, resolve_root
from .session import RelaySession
from .types import ResolvedThread
from .walker import CollectedSet, ReplyGraphWalker


if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from threadbrotr.models.event import Note


class ThreadResolver:
    """Reconstructs Nostr threads from note/nevent/naddr references.

    Args:
        config: Resolver configuration; defaults apply when omitted.
        session_factory: Builds the per-request session. Tests inject fakes here.
    """

    def __init__(
        self,
        config: ResolverConfig | None = None,
        *,
        session_factory: Callable[[ResolverConfig], RelaySession] | None = None,
    ) -> None:
        self._config = config or ResolverConfig()
        self._session_factory = session_factory or RelaySession
        self._logger = Logger("threadbrotr.resolver")

    @classmethod
    def from_yaml(cls, config_path: str | Path, **kwargs: Any) -> ThreadResolver:
        """Build a resolver from a YAML file.

        Raises:
            FileNotFoundError: If the file does not exist.
            ConfigurationError: If the file is not a YAML mapping.
            pydantic.ValidationError: If the configuration is invalid.
        """
        return cls.from_dict(load_yaml(config_path), **kwargs)

    @classmethod
    def from_dict(cls, data: dict[str, Any], **kwargs: Any) -> ThreadResolver:
        return cls(ResolverConfig.model_validate(data), **kwargs)

    @property
    def config(self) -> ResolverConfig:
        return self._config

    async def resolve(self, reference: str | ThreadReference) -> ResolvedThread:
        """Resolve one thread.

        Args:
            reference: Raw user input or an already decoded reference.

        Returns:
            The [ResolvedThread][threadbrotr.services.resolver.types.ResolvedThread];
            ``is_empty`` is ``True`` when no reply was found.

        Raises:
            InvalidReferenceError: If *reference* cannot be decoded.
            RelaySetUnreachableError: If no relay answered any query.
        """
        ref = decode_reference(reference) if isinstance(reference, str) else reference
        started = time.monotonic()
        self._logger.info(
            "resolution_started",
            reference=ref.raw,
            kind=ref.kind,
            hints=len(ref.relay_hints),
        )

        config = self._config
        async with self._session_factory(config) as session:
            hints = ref.relay_hints
            root_id, root = await self._find_root(ref, session)

            if not session.any_responded:
                raise RelaySetUnreachableError(list(session.relays_queried))

            if root_id is None:
                root_id = ref.event_id
                collected = CollectedSet(root_id, config.limits.max_total)
            else:
                walker = ReplyGraphWalker(session, config.limits, config.post_kinds)
                collected = await walker.walk(root_id, hints)

            replies = sort_replies(note for note in collected if root is None or note.id != root.id)
            pubkeys = [note.author for note in ((root,) if root else ()) + replies]
            directory = AuthorDirectory(session, config.limits.batch_size)
            authors = await directory.resolve(pubkeys)
            relays_queried = session.relays_queried

        thread = ResolvedThread(
            reference=ref,
            root_id=root_id,
            root=root,
            replies=replies,
            authors=authors,
            depth_reached=collected.depth_reached,
            relays_queried=relays_queried,
        )

        duration = time.monotonic() - started
        record_resolution(config.metrics, duration, thread.reply_count)
        if thread.is_empty:
            self._logger.info("thread_empty", root_id=root_id)
        self._logger.info(
            "resolution_completed",
            root_id=root_id,
            replies=thread.reply_count,
            authors=len(thread.authors),
            depth=thread.depth_reached,
            duration_s=round(duration, 3),
        )
        return thread

    async def _find_root(
        self, ref: ThreadReference, session: RelaySession
    ) -> tuple[str | None, Note | None]:
        """Return ``(root_id, root_note)``.

        ``root_id`` is ``None`` only for an ``naddr`` whose addressable event
        no relay returned; there is then nothing to expand.

        When the start note is found but its root is on no relay, the start
        note is returned as ``root_note`` while ``root_id`` keeps the root.
        """
        kinds = self._config.post_kinds

        if ref.kind == ReferenceKind.NADDR and ref.coordinate is not None:
            coord = ref.coordinate
            outcome = await session.query(
                addressable(coord.kind, coord.author, coord.identifier), ref.relay_hints
            )
            matches = [note for note in outcome.notes.values() if note.author == coord.author]
            if not matches:
                self._logger.warning("address_not_found", kind=coord.kind, author=coord.author)
                return None, None
            note = max(matches, key=lambda n: (n.created_at, n.id))
            return note.id, note

        resolution = await resolve_root(ref.event_id, session, ref.relay_hints, kinds=kinds)
        if resolution.start is not None and resolution.start.id == resolution.root_id:
            return resolution.root_id, resolution.start

        if not resolution.root_found:
            return resolution.root_id, None

        try:
            root = await fetch_note(session, resolution.root_id, ref.relay_hints, kinds=kinds)
        except RootNotFoundError:
            # The walk still starts from the root id; the start note is shown in its place.
            self._logger.warning("root_unavailable", root_id=resolution.root_id)
            return resolution.root_id, resolution.start
        return resolution.root_id, root
