"""NIP-specific decoding: NIP-19 references, NIP-10 tags, NIP-01 ingestion.

Attributes:
    decode_reference: Turn user input into a
        [ThreadReference][threadbrotr.nips.nip19.ThreadReference].
    parse_references: Read NIP-10 ``e`` tags.
    parse_relay_event: Convert SDK events to notes or profile events.
"""

from .nip01 import ProfileEvent, RelayEvent, parse_relay_event
from .nip10 import parse_references, root_candidate
from .nip19 import Coordinate, ReferenceKind, ThreadReference, decode_reference


__all__ = [
    "Coordinate",
    "ProfileEvent",
    "ReferenceKind",
    "RelayEvent",
    "ThreadReference",
    "decode_reference",
    "parse_references",
    "parse_relay_event",
    "root_candidate",
]
