"""
Pytest configuration and shared fixtures for ThreadBrotr tests.

Provides:
- Factory fixtures for mock ``nostr_sdk.Event`` objects and ``Note`` values
- Deterministic 64-char hex ids
"""

import json
import logging
from collections.abc import Callable
from typing import Any
from unittest.mock import MagicMock

import pytest

from threadbrotr.models import EventReference, Note, ReferenceMarker


# ============================================================================
# Logging Configuration
# ============================================================================


@pytest.fixture(scope="session", autouse=True)
def setup_logging() -> None:
    """Configure logging for tests."""
    logging.basicConfig(level=logging.DEBUG)


# ============================================================================
# Identifiers
# ============================================================================


def hex_id(n: int) -> str:
    """Deterministic 64-char lowercase hex id."""
    return f"{n:064x}"


@pytest.fixture
def hexid() -> Callable[[int], str]:
    return hex_id


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def make_nostr_event() -> Callable[..., MagicMock]:
    """Factory for mock ``nostr_sdk.Event`` objects."""

    def _make(
        event_id: str = "a" * 64,
        pubkey: str = "b" * 64,
        created_at: int = 1_700_000_000,
        kind: int = 1,
        tags: list[list[str]] | None = None,
        content: str = "Test content",
        *,
        verified: bool = True,
    ) -> MagicMock:
        if tags is None:
            tags = [["e", "c" * 64, "", "root"], ["p", "d" * 64]]

        mock_event = MagicMock()
        mock_event.id.return_value.to_hex.return_value = event_id
        mock_event.author.return_value.to_hex.return_value = pubkey
        mock_event.created_at.return_value.as_secs.return_value = created_at
        mock_event.kind.return_value.as_u16.return_value = kind
        mock_event.content.return_value = content
        mock_event.verify.return_value = verified

        mock_tags = []
        for tag in tags:
            mock_tag = MagicMock()
            mock_tag.as_vec.return_value = tag
            mock_tags.append(mock_tag)
        mock_event.tags.return_value.to_vec.return_value = mock_tags
        return mock_event

    return _make


@pytest.fixture
def make_note() -> Callable[..., Note]:
    """Factory for ``Note`` values.

    ``replies_to`` adds a positional ``e`` tag; ``root`` adds a ``root``-marked one.
    """

    def _make(
        n: int,
        *,
        author: int = 0xA0,
        created_at: int = 1_700_000_000,
        replies_to: int | str | None = None,
        root: int | str | None = None,
        content: str | None = None,
        kind: int = 1,
    ) -> Note:
        references: list[EventReference] = []
        if root is not None:
            root_id = root if isinstance(root, str) else hex_id(root)
            references.append(EventReference(root_id, None, ReferenceMarker.ROOT))
        if replies_to is not None:
            parent = replies_to if isinstance(replies_to, str) else hex_id(replies_to)
            references.append(EventReference(parent, None, ReferenceMarker.REPLY))
        return Note(
            id=hex_id(n),
            author=hex_id(author),
            content=content if content is not None else f"note {n}",
            created_at=created_at,
            kind=kind,
            references=tuple(references),
        )

    return _make


@pytest.fixture
def profile_content() -> Callable[..., str]:
    """Factory for kind-0 JSON content."""

    def _make(**fields: Any) -> str:
        return json.dumps(fields)

    return _make
