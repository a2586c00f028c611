"""
Author profile parsed from kind-0 metadata content.

NIP-01 stores profile fields as a JSON object in the event content. Clients
disagree on key spelling (``display_name`` vs ``displayName``) and frequently
publish non-string values, so parsing is lenient about everything except the
top-level shape.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from ._validation import validate_hex64, validate_optional_str, validate_timestamp


ANONYMOUS = "Anonymous"


def _text(data: dict[str, Any], *keys: str) -> str | None:
    for key in keys:
        value = data.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


@dataclass(frozen=True, slots=True)
class Profile:
    """Immutable author profile.

    Attributes:
        pubkey: Author public key (lowercase hex).
        name: Short handle.
        display_name: Human-readable name, preferred over ``name``.
        nip05: NIP-05 internet identifier.
        lud16: Lightning address (``user@domain``).
        lud06: LNURL pay string.
        created_at: Timestamp of the kind-0 event this profile came from.
    """

    pubkey: str
    name: str | None = None
    display_name: str | None = None
    nip05: str | None = None
    lud16: str | None = None
    lud06: str | None = None
    created_at: int = 0

    def __post_init__(self) -> None:
        validate_hex64(self.pubkey, "pubkey")
        for attr in ("name", "display_name", "nip05", "lud16", "lud06"):
            validate_optional_str(getattr(self, attr), attr)
        validate_timestamp(self.created_at, "created_at")

    @property
    def display_label(self) -> str:
        """``display_name``, else ``name``, else ``"Anonymous"``."""
        return self.display_name or self.name or ANONYMOUS

    @property
    def lightning_address(self) -> str | None:
        """Payable lightning address: ``lud16`` preferred over ``lud06``."""
        return self.lud16 or self.lud06

    @classmethod
    def from_content(cls, pubkey: str, content: str, created_at: int = 0) -> Profile:
        """Build a profile from raw kind-0 event content.

        Raises:
            ValueError: If *content* is not valid JSON or not a JSON object.
        """
        try:
            data = json.loads(content)
        except (json.JSONDecodeError, TypeError) as e:
            raise ValueError(f"profile content is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"profile content must be a JSON object, got {type(data).__name__}")

        return cls(
            pubkey=pubkey,
            name=_text(data, "name", "username"),
            display_name=_text(data, "display_name", "displayName"),
            nip05=_text(data, "nip05"),
            lud16=_text(data, "lud16"),
            lud06=_text(data, "lud06"),
            created_at=created_at,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "pubkey": self.pubkey,
            "name": self.name,
            "display_name": self.display_name,
            "display_label": self.display_label,
            "nip05": self.nip05,
            "lightning_address": self.lightning_address,
            "created_at": self.created_at,
        }
