"""
Tests for cross-wiki name matching.
"""

import pytest

from name_matcher import find_first_match, fold, matches, unmatched


class TestMatches:

    @pytest.mark.parametrize("a,b,expected", [
        ("Zeus", "Zeus", True),
        ("zeus", "ZEUS", True),
        ("The Morrigan", "Morrigan", True),
        ("Chang'e", "Change", False),
        ("Thor", "Hera", False),
        ("", "Zeus", False),
        ("Zeus", "", False),
    ])
    def test_matches(self, a, b, expected):
        assert matches(a, b) is expected

    @pytest.mark.parametrize("a,b", [
        ("The Morrigan", "Morrigan"),
        ("Ra", "Ratatoskr"),
        ("Zeus", "Thor"),
    ])
    def test_symmetric(self, a, b):
        """Should give the same answer in both directions."""
        assert matches(a, b) == matches(b, a)

    def test_fold(self):
        assert fold("  Hou Yi ") == "hou yi"
        assert fold(None) == ""


class TestFindFirstMatch:

    def test_returns_first_in_listing_order(self):
        """Should be greedy: the earliest listed candidate wins."""
        assert find_first_match("Ra", ["Ratatoskr", "Ra"]) == "Ratatoskr"
        assert find_first_match("Ra", ["Ra", "Ratatoskr"]) == "Ra"

    def test_no_match(self):
        assert find_first_match("Thor", ["Zeus", "Hera"]) is None

    def test_blank_name_takes_nothing(self):
        """Should not let a missing name claim the first listing entry."""
        assert find_first_match("", ["Zeus", "Hera"]) is None
        assert find_first_match("   ", ["Zeus", "Hera"]) is None


class TestUnmatched:

    def test_keeps_order_and_drops_matched(self):
        assert unmatched(["Zeus", "Baldur", "Hera", "Aladdin"], ["Zeus", "Hera"]) == ["Baldur", "Aladdin"]

    def test_empty_names_match_nothing(self):
        assert unmatched(["Zeus"], ["", "  "]) == ["Zeus"]
