"""Tests for Version parsing and comparison."""

import pytest

from checktree.core.errors import InvalidVersionError
from checktree.core.version import Version


# ============================================================================
# parse tests
# ============================================================================


def test_parse_string() -> None:
    """Dot-separated strings become integer segments."""
    assert Version.parse("1.2.10").segments == (1, 2, 10)


def test_parse_tolerates_whitespace() -> None:
    """Whitespace around segments and separators is ignored."""
    assert Version.parse(" 1 . 2 ").segments == (1, 2)


def test_parse_integer() -> None:
    """A plain integer is a single-segment version."""
    assert Version.parse(4).segments == (4,)


def test_parse_version_returns_equal_copy() -> None:
    """Parsing a Version yields an equal, independent value."""
    original = Version.parse("2.0.1")
    copy = Version.parse(original)
    assert copy == original
    assert copy is not original


@pytest.mark.parametrize("value", ["", "1.a", "-1", "1..2", "1.2-beta", "v1"])
def test_parse_rejects_invalid_segments(value: str) -> None:
    """Anything that is not a non-negative integer segment is rejected."""
    with pytest.raises(InvalidVersionError, match="Invalid version"):
        Version.parse(value)


def test_invalid_version_is_a_type_error() -> None:
    """Parse failures are type errors."""
    with pytest.raises(TypeError):
        Version.parse("abc")


def test_constructor_rejects_negative_segment() -> None:
    """Direct construction validates segments as well."""
    with pytest.raises(InvalidVersionError):
        Version((1, -2))


def test_str_and_json() -> None:
    """Serialization joins segments with dots."""
    version = Version.parse("3.0.2")
    assert str(version) == "3.0.2"
    assert version.to_json() == "3.0.2"


# ============================================================================
# compare tests
# ============================================================================


def test_compare_lower() -> None:
    assert Version.parse("1.2").compare("1.3") == -1


def test_compare_higher() -> None:
    assert Version.parse("2.0").compare("1.9.9") == 1


def test_compare_equal() -> None:
    assert Version.parse("1.2.3").compare(Version.parse("1.2.3")) == 0


def test_compare_only_walks_common_prefix() -> None:
    """Trailing segments beyond the shorter version are never inspected."""
    assert Version.parse("1.2").compare("1.2.9") == 0
    assert Version.parse("1.2.9").compare("1.2") == 0
    assert Version.parse("1.2").is_equal_to("1.2.0.7")


def test_compare_is_numeric_not_lexical() -> None:
    assert Version.parse("1.10").is_above("1.9")


def test_comparison_helpers() -> None:
    """Helpers are thin wrappers over compare."""
    v = Version.parse("1.5")
    assert v.is_below("2.0")
    assert v.is_below_or_equal_to("1.5")
    assert v.is_above("1.4")
    assert v.is_above_or_equal_to("1.5")
    assert not v.is_above("1.5.3")
    assert not v.is_below("1.5.3")
