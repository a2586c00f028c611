"""Unit tests for nips.nip10 module."""

from threadbrotr.models import EventReference, ReferenceMarker
from threadbrotr.nips.nip10 import parse_references, root_candidate


ID_A = "a" * 64
ID_B = "b" * 64
ID_C = "c" * 64


class TestParseReferences:
    def test_marked_tags(self):
        refs = parse_references(
            [
                ["e", ID_A, "wss://nos.lol", "root"],
                ["e", ID_B, "", "reply"],
                ["p", "d" * 64],
            ]
        )
        assert refs == (
            EventReference(ID_A, "wss://nos.lol", ReferenceMarker.ROOT),
            EventReference(ID_B, None, ReferenceMarker.REPLY),
        )

    def test_positional_tags(self):
        refs = parse_references([["e", ID_A], ["e", ID_B, "wss://relay.damus.io"]])
        assert [r.marker for r in refs] == [None, None]
        assert refs[1].relay_hint == "wss://relay.damus.io"

    def test_unknown_marker_ignored(self):
        assert parse_references([["e", ID_A, "", "fork"]])[0].marker is None

    def test_uppercase_id_lowercased(self):
        assert parse_references([["e", ID_A.upper()]])[0].event_id == ID_A

    def test_malformed_tags_skipped(self):
        refs = parse_references([["e"], ["e", "not-hex"], [], ["q", ID_A], ["e", ID_C]])
        assert [r.event_id for r in refs] == [ID_C]

    def test_trailing_newline_id_skipped(self):
        refs = parse_references([["e", ID_A + "\n", "", "root"], ["e", ID_B]])
        assert [r.event_id for r in refs] == [ID_B]
        assert root_candidate(refs) == ID_B


class TestRootCandidate:
    def test_root_marker_wins_over_order(self):
        refs = (
            EventReference(ID_A, None, ReferenceMarker.REPLY),
            EventReference(ID_B, None, ReferenceMarker.ROOT),
        )
        assert root_candidate(refs) == ID_B

    def test_first_reference_fallback(self):
        refs = (EventReference(ID_C), EventReference(ID_A))
        assert root_candidate(refs) == ID_C

    def test_no_references(self):
        assert root_candidate(()) is None
