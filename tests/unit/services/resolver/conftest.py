"""Shared fixtures and fakes for services.resolver tests.

``FakeRelay`` is an in-memory relay answering ``ThreadFilter`` queries from a
fixed event list; ``FakeRelaySession`` routes each relay URL to one of them
instead of opening WebSocket connections.
"""

import asyncio
from collections.abc import Callable, Iterable

import pytest

from threadbrotr.models import Note
from threadbrotr.nips.nip01 import ProfileEvent, RelayEvent
from threadbrotr.services.resolver.configs import ResolverConfig
from threadbrotr.services.resolver.filters import ThreadFilter
from threadbrotr.services.resolver.session import RelaySession


RELAY_A = "wss://relay-a.example.com"
RELAY_B = "wss://relay-b.example.com"
RELAY_C = "wss://relay-c.example.com"
HINT_RELAY = "wss://hint.example.com"


def _matches(event: RelayEvent, f: ThreadFilter) -> bool:
    if isinstance(event, ProfileEvent):
        kind, author = 0, event.pubkey
    else:
        kind, author = event.kind, event.author
    if f.kinds and kind not in f.kinds:
        return False
    if f.ids and event.id not in f.ids:
        return False
    if f.authors and author not in f.authors:
        return False
    if f.references:
        if not isinstance(event, Note) or not event.references_any(set(f.references)):
            return False
    return True


class FakeRelay:
    """In-memory relay.

    Args:
        events: Stored events, returned in this order.
        error: Raised on every query when set.
        hang: Sleep past any timeout on every query when set.
    """

    def __init__(
        self,
        events: Iterable[RelayEvent] = (),
        *,
        error: Exception | None = None,
        hang: bool = False,
    ) -> None:
        self.events = list(events)
        self.error = error
        self.hang = hang
        self.calls: list[ThreadFilter] = []

    async def answer(self, f: ThreadFilter) -> list[RelayEvent]:
        self.calls.append(f)
        if self.hang:
            await asyncio.sleep(3600)
        if self.error is not None:
            raise self.error
        matched = [e for e in self.events if _matches(e, f)]
        return matched[: f.limit] if f.limit else matched


class FakeRelaySession(RelaySession):
    """RelaySession whose relays are ``FakeRelay`` objects keyed by URL."""

    def __init__(self, config: ResolverConfig, relays: dict[str, FakeRelay]) -> None:
        super().__init__(config)
        self.fake_relays = relays
        self.closed = False

    async def _fetch_from_relay(self, relay, thread_filter):
        fake = self.fake_relays.get(relay.url)
        if fake is None:
            raise OSError(f"Connection failed: {relay.url}")
        return await fake.answer(thread_filter)

    async def close(self) -> None:
        self.closed = True
        await super().close()


@pytest.fixture
def resolver_config() -> ResolverConfig:
    return ResolverConfig(relays=[RELAY_A, RELAY_B, RELAY_C], timeouts={"request": 0.5})


@pytest.fixture
def make_session(resolver_config: ResolverConfig) -> Callable[..., FakeRelaySession]:
    def _make(relays: dict[str, FakeRelay], config: ResolverConfig | None = None) -> FakeRelaySession:
        return FakeRelaySession(config or resolver_config, relays)

    return _make
