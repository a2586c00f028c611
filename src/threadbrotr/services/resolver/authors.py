"""Author enrichment from kind-0 profile metadata.

Profiles are looked up on the default relays only; relay hints point at
where a thread lives, not at where its authors publish metadata.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from threadbrotr.core.exceptions import ProfileUnparseableError
from threadbrotr.core.logger import Logger
from threadbrotr.models.profile import Profile

from .filters import profiles_of


if TYPE_CHECKING:
    from collections.abc import Iterable

    from threadbrotr.nips.nip01 import ProfileEvent

    from .session import RelaySession


def parse_profile(event: ProfileEvent) -> Profile:
    """Parse kind-0 content into a [Profile][threadbrotr.models.profile.Profile].

    Raises:
        ProfileUnparseableError: If the content is not a JSON object.
    """
    try:
        return Profile.from_content(event.pubkey, event.content, event.created_at)
    except (ValueError, TypeError) as e:
        raise ProfileUnparseableError(event.pubkey, str(e)) from e


def newest_per_author(events: Iterable[ProfileEvent]) -> dict[str, ProfileEvent]:
    """Keep the latest kind-0 event per pubkey (first seen wins on ties)."""
    newest: dict[str, ProfileEvent] = {}
    for event in events:
        current = newest.get(event.pubkey)
        if current is None or event.created_at > current.created_at:
            newest[event.pubkey] = event
    return newest


class AuthorDirectory:
    """Batched profile lookups against a session's default relays.

    A malformed or missing profile leaves the author out of the result;
    callers fall back to ``Anonymous``.
    """

    def __init__(
        self,
        session: RelaySession,
        batch_size: int = 150,
        *,
        logger: Logger | None = None,
    ) -> None:
        if batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        self._session = session
        self._batch_size = batch_size
        self._logger = logger or Logger("threadbrotr.authors")

    async def resolve(self, pubkeys: Iterable[str]) -> dict[str, Profile]:
        """Return the profiles found for *pubkeys*, keyed by pubkey."""
        wanted = list(dict.fromkeys(pubkeys))
        if not wanted:
            return {}

        events: list[ProfileEvent] = []
        for start in range(0, len(wanted), self._batch_size):
            chunk = wanted[start : start + self._batch_size]
            outcome = await self._session.query(profiles_of(chunk))
            events.extend(outcome.profiles.values())

        requested = set(wanted)
        profiles: dict[str, Profile] = {}
        for pubkey, event in newest_per_author(events).items():
            if pubkey not in requested:
                continue
            try:
                profiles[pubkey] = parse_profile(event)
            except ProfileUnparseableError as e:
                self._logger.debug("profile_unparseable", pubkey=pubkey, error=e.reason)

        self._logger.info("authors_resolved", requested=len(wanted), found=len(profiles))
        return profiles

    async def lookup(self, pubkey: str) -> Profile | None:
        """Resolve a single author, e.g. for a lightning address."""
        return (await self.resolve([pubkey])).get(pubkey)
