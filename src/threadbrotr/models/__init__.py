"""Pure frozen dataclasses with zero I/O for relays, notes, and profiles.

The models layer is the foundation of the diamond DAG. It has no
dependencies on any other ThreadBrotr package. Every model uses
``@dataclass(frozen=True, slots=True)`` and validates in ``__post_init__``
so invalid instances never escape the constructor.

Attributes:
    Relay: Validated relay URL with [NetworkType][threadbrotr.models.constants.NetworkType]
        detection. Rejects local IPs.
    Note: Immutable post-like event with its NIP-10 references.
    EventReference: One ``e`` tag (event id, relay hint, marker).
    Profile: Author metadata with display and lightning fallbacks.
"""

from .constants import (
    EVENT_KIND_MAX,
    EventKind,
    NetworkType,
    ReferenceMarker,
    is_event_id,
    normalize_event_id,
)
from .event import EventReference, Note
from .profile import ANONYMOUS, Profile
from .relay import Relay


__all__ = [
    "ANONYMOUS",
    "EVENT_KIND_MAX",
    "EventKind",
    "EventReference",
    "NetworkType",
    "Note",
    "Profile",
    "ReferenceMarker",
    "Relay",
    "is_event_id",
    "normalize_event_id",
]
