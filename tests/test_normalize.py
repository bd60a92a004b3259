"""Tests for username normalization helpers."""

import pytest

from userlists.core.normalize import escape_like, is_list_type, normalize_username


class TestNormalizeUsername:
    """Test normalize_username."""

    def test_strips_at_trims_and_lowercases(self):
        """"@Foo " becomes "foo"."""
        assert normalize_username("@Foo ") == "foo"

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("foo", "foo"),
            ("  @Bar", "bar"),
            ("@ baz ", "baz"),
            ("MiXeD_Case", "mixed_case"),
        ],
    )
    def test_common_forms(self, raw, expected):
        """Typical user input forms normalize to the bare handle."""
        assert normalize_username(raw) == expected

    def test_only_one_leading_at_removed(self):
        """A second "@" is part of the handle."""
        assert normalize_username("@@foo") == "@foo"

    def test_inner_at_kept(self):
        """Only a leading "@" is stripped."""
        assert normalize_username("foo@bar") == "foo@bar"

    def test_empty_results(self):
        """Blank or bare "@" input normalizes to empty."""
        assert normalize_username("") == ""
        assert normalize_username("   ") == ""
        assert normalize_username("@") == ""
        assert normalize_username(" @ ") == ""

    def test_non_string_input_is_stringified(self):
        """Numbers are accepted as handles."""
        assert normalize_username(12345) == "12345"

    def test_none_is_empty(self):
        """None never becomes the handle "none"."""
        assert normalize_username(None) == ""


class TestIsListType:
    """Test is_list_type."""

    def test_known_lists(self):
        assert is_list_type("following")
        assert is_list_type("followers")

    def test_unknown_values(self):
        assert not is_list_type("Following")
        assert not is_list_type("blocked")
        assert not is_list_type("")
        assert not is_list_type(None)
        assert not is_list_type(["following"])


class TestEscapeLike:
    """Test escape_like."""

    def test_plain_text_unchanged(self):
        assert escape_like("foo") == "foo"

    def test_wildcards_escaped(self):
        assert escape_like("50%_off") == "50\\%\\_off"

    def test_backslash_escaped_first(self):
        assert escape_like("a\\b") == "a\\\\b"
