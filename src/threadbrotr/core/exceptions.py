"""ThreadBrotr exception hierarchy.

Typed exceptions separate the one fatal input error from the many
per-relay and per-author problems that thread resolution absorbs as
best-effort degradation.

Exception hierarchy:

```text
ThreadBrotrError (base -- never raised directly)
├── ConfigurationError           -- config validation, unreadable YAML
├── InvalidReferenceError        -- input is not note1/nevent1/naddr1/64-hex
├── RootNotFoundError            -- start event absent from every relay
├── ConnectivityError            -- relay/network failures
│   ├── RelayUnavailableError    -- one relay failed a query
│   │   └── RelayTimeoutError    -- one relay did not answer in time
│   └── RelaySetUnreachableError -- no relay answered any query
└── ProtocolError                -- malformed relay payloads
    └── ProfileUnparseableError  -- kind-0 content is not a profile object
```

Only [InvalidReferenceError][threadbrotr.core.exceptions.InvalidReferenceError],
[RelaySetUnreachableError][threadbrotr.core.exceptions.RelaySetUnreachableError]
and [ConfigurationError][threadbrotr.core.exceptions.ConfigurationError]
reach callers of
[ThreadResolver.resolve()][threadbrotr.services.resolver.service.ThreadResolver.resolve].
Everything else is caught where it is raised and recorded or logged.

See Also:
    [fold_results()][threadbrotr.services.resolver.session.fold_results]:
        Absorbs per-relay [RelayUnavailableError][threadbrotr.core.exceptions.RelayUnavailableError].
    [resolve_root()][threadbrotr.services.resolver.root.resolve_root]:
        Absorbs [RootNotFoundError][threadbrotr.core.exceptions.RootNotFoundError].
    [AuthorDirectory][threadbrotr.services.resolver.authors.AuthorDirectory]:
        Absorbs [ProfileUnparseableError][threadbrotr.core.exceptions.ProfileUnparseableError].
"""

from __future__ import annotations


class ThreadBrotrError(Exception):
    """Base exception for all ThreadBrotr errors.

    Never raised directly -- always use a specific subclass.
    """


# ---------------------------------------------------------------------------
# Configuration and input
# ---------------------------------------------------------------------------


class ConfigurationError(ThreadBrotrError):
    """Invalid or missing configuration (YAML, CLI flags)."""


class InvalidReferenceError(ThreadBrotrError, ValueError):
    """The thread reference matches no supported encoding.

    Fatal to the resolution request and never retried.

    Attributes:
        reference: The raw user input that failed to decode.
    """

    def __init__(self, reference: str, reason: str) -> None:
        super().__init__(f"Invalid thread reference {reference!r}: {reason}")
        self.reference = reference
        self.reason = reason


class RootNotFoundError(ThreadBrotrError):
    """The requested event was not returned by any relay.

    Attributes:
        event_id: Hex id of the missing event.
    """

    def __init__(self, event_id: str) -> None:
        super().__init__(f"Event {event_id} not found on any relay")
        self.event_id = event_id


# ---------------------------------------------------------------------------
# Connectivity
# ---------------------------------------------------------------------------


class ConnectivityError(ThreadBrotrError):
    """Base for all relay/network connectivity errors."""


class RelayUnavailableError(ConnectivityError):
    """A single relay refused, dropped, or failed a query.

    Attributes:
        relay_url: Normalized URL of the failing relay.
    """

    def __init__(self, relay_url: str, reason: str) -> None:
        super().__init__(f"{relay_url}: {reason}")
        self.relay_url = relay_url
        self.reason = reason


class RelayTimeoutError(RelayUnavailableError):
    """A single relay did not answer within its time budget."""


class RelaySetUnreachableError(ConnectivityError):
    """Every relay failed every query of a resolution request.

    Attributes:
        relay_urls: URLs of all relays that were attempted.
    """

    def __init__(self, relay_urls: list[str]) -> None:
        super().__init__(f"No relay responded ({len(relay_urls)} attempted)")
        self.relay_urls = relay_urls


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


class ProtocolError(ThreadBrotrError):
    """Relay payload does not match the expected NIP shape."""


class ProfileUnparseableError(ProtocolError):
    """Kind-0 metadata content could not be parsed into a profile.

    Attributes:
        pubkey: Author whose profile was malformed.
    """

    def __init__(self, pubkey: str, reason: str) -> None:
        super().__init__(f"Unparseable profile for {pubkey}: {reason}")
        self.pubkey = pubkey
        self.reason = reason
