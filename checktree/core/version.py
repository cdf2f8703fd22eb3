"""Comparable protocol versions used for min/max version gating."""

import re
from dataclasses import dataclass
from typing import TypeAlias

from .errors import InvalidVersionError

_SEGMENT_SEPARATOR = re.compile(r"\s*\.\s*")
_SEGMENT = re.compile(r"\d+", re.ASCII)


@dataclass(frozen=True)
class Version:
    """A dot-separated sequence of non-negative integers.

    Comparison only walks the common prefix of both sequences, so "1.2"
    and "1.2.9" compare as equal. Version gates throughout the harness rely
    on this exact behavior.
    """

    segments: tuple[int, ...]

    def __post_init__(self) -> None:
        """Validate that every segment is a non-negative integer."""
        if not self.segments:
            raise InvalidVersionError("Version must have at least one segment")
        for segment in self.segments:
            if isinstance(segment, bool) or not isinstance(segment, int) or segment < 0:
                raise InvalidVersionError(
                    f"Invalid version segment {segment!r} in {self.segments!r}"
                )

    @classmethod
    def parse(cls, value: "VersionLike") -> "Version":
        """Build a Version from a string, a number or another Version.

        Raises:
            InvalidVersionError: If any segment is not a non-negative integer.
        """
        if isinstance(value, Version):
            return cls(value.segments)

        text = str(value).strip()
        parts = _SEGMENT_SEPARATOR.split(text)
        if not all(_SEGMENT.fullmatch(part) for part in parts):
            raise InvalidVersionError(f'Invalid version "{value}"')

        return cls(tuple(int(part) for part in parts))

    def compare(self, other: "VersionLike") -> int:
        """Return 1 if this version is higher, -1 if lower, 0 otherwise."""
        other = Version.parse(other)
        for mine, theirs in zip(self.segments, other.segments):
            if mine > theirs:
                return 1
            if mine < theirs:
                return -1
        return 0

    def is_below(self, other: "VersionLike") -> bool:
        return self.compare(other) < 0

    def is_below_or_equal_to(self, other: "VersionLike") -> bool:
        return self.compare(other) <= 0

    def is_above(self, other: "VersionLike") -> bool:
        return self.compare(other) > 0

    def is_above_or_equal_to(self, other: "VersionLike") -> bool:
        return self.compare(other) >= 0

    def is_equal_to(self, other: "VersionLike") -> bool:
        return self.compare(other) == 0

    def to_json(self) -> str:
        return str(self)

    def __str__(self) -> str:
        return ".".join(str(segment) for segment in self.segments)


VersionLike: TypeAlias = str | int | float | Version
