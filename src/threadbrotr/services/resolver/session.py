"""Relay query session: one filter, many unreliable relays, one merged answer.

A [RelaySession][threadbrotr.services.resolver.session.RelaySession] is
created for a single resolution request and disposed at its end. It sends
each [ThreadFilter][threadbrotr.services.resolver.filters.ThreadFilter] to
every default relay plus any request-specific relay hints, concurrently,
and folds the per-relay [RelayResult][threadbrotr.services.resolver.session.RelayResult]
values into a deduplicated
[QueryOutcome][threadbrotr.services.resolver.session.QueryOutcome].

A relay that errors or exceeds its time budget contributes nothing and is
recorded as failed; it never fails the query.

Examples:
    ```python
    async with RelaySession(config) as session:
        outcome = await session.query(replies_to([root_id], [1], 500))
        outcome.notes       # {event_id: Note, ...}
        outcome.failed      # {"wss://slow.example": "timed out after 10.0s"}
    ```
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from nostr_sdk import NostrSdkError

from threadbrotr.core.exceptions import RelayTimeoutError, RelayUnavailableError
from threadbrotr.core.logger import Logger
from threadbrotr.core.metrics import record_relay_query
from threadbrotr.models.event import Note
from threadbrotr.nips.nip01 import ProfileEvent, RelayEvent, parse_relay_event
from threadbrotr.utils.protocol import connect_client, fetch_events, shutdown_client


if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from nostr_sdk import Client

    from threadbrotr.models.relay import Relay

    from .configs import ResolverConfig
    from .filters import ThreadFilter


# =============================================================================
# Results
# =============================================================================


@dataclass(frozen=True, slots=True)
class RelayResult:
    """Answer of one relay to one filter.

    Exactly one of ``events`` (possibly empty) or ``error`` is meaningful:
    a failed relay carries an error and no events.
    """

    relay: Relay
    events: tuple[RelayEvent, ...] = ()
    error: RelayUnavailableError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(slots=True)
class QueryOutcome:
    """Deduplicated union of every successful relay result.

    Attributes:
        notes: Post-like events keyed by event id, in first-seen order.
        profiles: Kind-0 events keyed by event id, in first-seen order.
        succeeded: URLs of relays that answered.
        failed: URL to failure reason for relays that did not.
    """

    notes: dict[str, Note] = field(default_factory=dict)
    profiles: dict[str, ProfileEvent] = field(default_factory=dict)
    succeeded: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)

    @property
    def all_failed(self) -> bool:
        """``True`` when relays were attempted and none answered."""
        return not self.succeeded and bool(self.failed)


def fold_results(results: Iterable[RelayResult]) -> QueryOutcome:
    """Merge per-relay results into one [QueryOutcome][threadbrotr.services.resolver.session.QueryOutcome].

    Results are consumed in the given order; the first copy of an event id
    wins and later duplicates are dropped. Failed results only add to
    ``failed``.
    """
    outcome = QueryOutcome()
    for result in results:
        if not result.ok:
            outcome.failed[result.relay.url] = result.error.reason if result.error else "unknown"
            continue
        outcome.succeeded.append(result.relay.url)
        for event in result.events:
            if isinstance(event, Note):
                outcome.notes.setdefault(event.id, event)
            else:
                outcome.profiles.setdefault(event.id, event)
    return outcome


# =============================================================================
# Session
# =============================================================================


class RelaySession:
    """Per-request relay pool.

    Holds at most one connected ``nostr_sdk.Client`` per relay. Clients are
    opened lazily on first use, reused across queries of the same request,
    discarded after any error (the next query reconnects) and shut down by
    [close()][threadbrotr.services.resolver.session.RelaySession.close].

    Use as an async context manager; a closed session refuses new queries.
    """

    def __init__(self, config: ResolverConfig, *, logger: Logger | None = None) -> None:
        self._config = config
        self._logger = logger or Logger("threadbrotr.session")
        self._default_relays: tuple[Relay, ...] = config.default_relays
        self._semaphore = asyncio.Semaphore(config.concurrency.max_parallel_relays)
        self._clients: dict[str, Client] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._queried: dict[str, None] = {}
        self._any_responded = False
        self._closed = False

    async def __aenter__(self) -> RelaySession:
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.close()

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    @property
    def default_relays(self) -> tuple[Relay, ...]:
        return self._default_relays

    @property
    def any_responded(self) -> bool:
        """``True`` once at least one relay has answered any query."""
        return self._any_responded

    @property
    def relays_queried(self) -> tuple[str, ...]:
        """Every relay URL attempted so far, in first-attempt order."""
        return tuple(self._queried)

    def endpoints(self, extra_relays: Sequence[Relay] = ()) -> list[Relay]:
        """Default relays followed by *extra_relays*, deduplicated.

        Relays on a network that is not enabled in ``networks`` are skipped.
        """
        relays: list[Relay] = []
        for relay in (*self._default_relays, *extra_relays):
            if relay in relays:
                continue
            if not self._config.networks.is_enabled(relay.network):
                self._logger.debug("relay_skipped", relay=relay.url, network=relay.network)
                continue
            relays.append(relay)
        return relays

    # -------------------------------------------------------------------------
    # Querying
    # -------------------------------------------------------------------------

    async def query(
        self, thread_filter: ThreadFilter, extra_relays: Sequence[Relay] = ()
    ) -> QueryOutcome:
        """Send *thread_filter* to every endpoint and fold the answers.

        Args:
            thread_filter: Filter to send.
            extra_relays: Request-specific relays (hints) added to the defaults.

        Returns:
            Deduplicated [QueryOutcome][threadbrotr.services.resolver.session.QueryOutcome].
            Results are folded in endpoint order, not completion order.

        Raises:
            RuntimeError: If the session has been closed.
        """
        if self._closed:
            raise RuntimeError("RelaySession is closed")

        relays = self.endpoints(extra_relays)
        for relay in relays:
            self._queried.setdefault(relay.url, None)

        async with asyncio.TaskGroup() as tg:
            tasks = [tg.create_task(self._query_relay(relay, thread_filter)) for relay in relays]

        outcome = fold_results(task.result() for task in tasks)
        if outcome.succeeded:
            self._any_responded = True
        return outcome

    async def _query_relay(self, relay: Relay, thread_filter: ThreadFilter) -> RelayResult:
        """Run one filter against one relay, converting failures into a result."""
        budget = self._config.timeouts.request
        error: RelayUnavailableError
        async with self._semaphore:
            try:
                async with asyncio.timeout(budget):
                    events = await self._fetch_from_relay(relay, thread_filter)
            except TimeoutError:
                error = RelayTimeoutError(relay.url, f"timed out after {budget}s")
                label = "timeout"
            except (OSError, NostrSdkError, ValueError) as e:
                error = RelayUnavailableError(relay.url, str(e) or type(e).__name__)
                label = "failed"
            except Exception as e:  # Intentionally broad: one relay must not fail the query
                self._logger.error(
                    "relay_unexpected_exception",
                    relay=relay.url,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                error = RelayUnavailableError(relay.url, str(e) or type(e).__name__)
                label = "failed"
            else:
                record_relay_query(self._config.metrics, relay.url, "ok")
                self._logger.debug("relay_query_ok", relay=relay.url, events=len(events))
                return RelayResult(relay, tuple(events))

        await self._discard(relay)
        record_relay_query(self._config.metrics, relay.url, label)
        self._logger.warning("relay_query_failed", relay=relay.url, error=error.reason)
        return RelayResult(relay, error=error)

    async def _fetch_from_relay(self, relay: Relay, thread_filter: ThreadFilter) -> list[RelayEvent]:
        """Fetch, verify and parse events from one relay.

        Events with an invalid signature or an unsupported kind are dropped.
        """
        client = await self._client_for(relay)
        raw_events = await fetch_events(
            client, thread_filter.to_nostr(), timeout=self._config.timeouts.request
        )

        # Kinds requested explicitly (e.g. an addressable root) are accepted as notes too.
        note_kinds = {*self._config.post_kinds, *(k for k in thread_filter.kinds if k != 0)}
        events: list[RelayEvent] = []
        for evt in raw_events:
            try:
                if not evt.verify():
                    self._logger.debug("invalid_event_signature", relay=relay.url, event_id=evt.id().to_hex())
                    continue
                events.append(parse_relay_event(evt, note_kinds))
            except (ValueError, TypeError, NostrSdkError) as e:
                self._logger.debug("event_parse_error", relay=relay.url, error=str(e))
        return events

    # -------------------------------------------------------------------------
    # Connection management
    # -------------------------------------------------------------------------

    async def _client_for(self, relay: Relay) -> Client:
        lock = self._locks.setdefault(relay.url, asyncio.Lock())
        async with lock:
            client = self._clients.get(relay.url)
            if client is None:
                client = await connect_client(
                    relay,
                    proxy_url=self._config.networks.get_proxy_url(relay.network),
                    timeout=self._config.timeouts.connect,
                )
                self._clients[relay.url] = client
            return client

    async def _discard(self, relay: Relay) -> None:
        client = self._clients.pop(relay.url, None)
        if client is not None:
            await shutdown_client(client)

    async def close(self) -> None:
        """Shut down every open client. Idempotent."""
        self._closed = True
        clients = list(self._clients.values())
        self._clients.clear()
        for client in clients:
            await shutdown_client(client)
