"""Domain models for the checktree harness.

All models in this module use only Python standard library types,
ensuring zero external dependencies in the core domain.
"""

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Literal, TypeAlias

from .version import Version


class NodeKind(Enum):
    """Discriminant for the two kinds of tree nodes."""

    SUITE = "suite"
    TEST = "test"


class TestStatus(Enum):
    """Run states of a single test.

    State transitions:
    - UNSET -> SKIPPED | NOT_IMPLEMENTED (terminal, body never runs)
    - UNSET -> RUNNING -> SUCCEEDED | WARNED | FAILED | NOT_SUPPORTED

    Exactly one terminal status is reached per run; Test.reset() returns
    a test to UNSET.
    """

    __test__ = False

    UNSET = "unset"
    RUNNING = "running"
    SKIPPED = "skipped"
    NOT_IMPLEMENTED = "not-implemented"
    SUCCEEDED = "succeeded"
    WARNED = "warned"
    FAILED = "failed"
    NOT_SUPPORTED = "not-supported"

    @property
    def is_terminal(self) -> bool:
        return self not in (TestStatus.UNSET, TestStatus.RUNNING)


LogType: TypeAlias = Literal["log", "info", "warn", "error"]


@dataclass(frozen=True)
class ConsoleEntry:
    """A single tagged entry written by a check or by the runner."""

    type: LogType
    label: str
    tags: tuple[str, ...]
    data: tuple[Any, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "label": self.label,
            "tags": list(self.tags),
            "data": list(self.data),
        }


class Console:
    """Ordered log sink attached to every test.

    Checks write to it through the TestAPI; reporters read it after the
    test ends. Entries tagged "markdown" or "html" can be rendered as such
    by front-ends.
    """

    def __init__(self) -> None:
        self._entries: list[ConsoleEntry] = []

    def log(self, *data: Any) -> None:
        self.add("log", "log", (), *data)

    def info(self, *data: Any) -> None:
        self.add("info", "info", (), *data)

    def warn(self, *data: Any) -> None:
        self.add("warn", "warn", (), *data)

    def error(self, error: BaseException | str) -> None:
        """Add an error entry holding the error's text."""
        text = str(error) or type(error).__name__
        self.add("error", "error", (), text)

    def md(self, markdown: str, type: LogType = "log", label: str | None = None) -> None:
        self.add(type, label or type, ("markdown",), markdown)

    def html(self, html: str, type: LogType = "log", label: str | None = None) -> None:
        self.add(type, label or type, ("html",), html)

    def add(self, type: LogType, label: str, tags: tuple[str, ...] | list[str], *data: Any) -> None:
        self._entries.append(
            ConsoleEntry(type=type, label=label, tags=tuple(tags), data=tuple(data))
        )

    def has(self, type: LogType) -> bool:
        return any(entry.type == type for entry in self._entries)

    def get(self, type: LogType) -> list[ConsoleEntry]:
        return [entry for entry in self._entries if entry.type == type]

    def by_tags(self, tags: str | list[str]) -> list[ConsoleEntry]:
        """Select entries by tag.

        A string is a comma or space separated list and matches entries
        carrying all of the tags. A list matches entries carrying any of them.
        """
        if isinstance(tags, str):
            wanted = [t for t in tags.replace(",", " ").split() if t]
            return [e for e in self._entries if all(t in e.tags for t in wanted)]
        return [e for e in self._entries if any(t in e.tags for t in tags)]

    def clear(self) -> None:
        self._entries = []

    def to_list(self) -> list[dict[str, Any]]:
        return [entry.to_dict() for entry in self._entries]

    def __iter__(self) -> Iterator[ConsoleEntry]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)


@dataclass
class RunRecord:
    """Mutable outcome of one test run.

    This is the only state the runner mutates. Test.reset() discards the
    record and allocates a fresh one.
    """

    status: TestStatus = TestStatus.UNSET
    started_at: datetime | None = None
    ended_at: datetime | None = None
    error: BaseException | None = None
    console: Console = field(default_factory=Console)
    after: Callable[..., Any] | None = None  # registered at runtime via TestAPI.after


@dataclass(frozen=True)
class RunSettings:
    """Read-only settings shared by reference across a whole run."""

    api_version: Version
    match: str | None = None
    bail: bool = False

    def __post_init__(self) -> None:
        """Accept plain strings for the API version."""
        if not isinstance(self.api_version, Version):
            object.__setattr__(self, "api_version", Version.parse(self.api_version))


class RunEvent(Enum):
    """Events emitted by the runner, in the order they can occur."""

    START = "start"
    GROUP_START = "groupStart"
    GROUP_END = "groupEnd"
    TEST_START = "testStart"
    TEST_END = "testEnd"
    END = "end"


@dataclass(frozen=True)
class Prerequisite:
    """A condition a check needs before it can run against a server.

    ``assertion`` may be a bool or a zero-argument callable returning one.
    """

    assertion: bool | Callable[[], bool]
    message: str


@dataclass(frozen=True)
class RunSummary:
    """Test counts for a subtree, grouped by status."""

    total: int
    by_status: Mapping[str, int]  # status value -> count (immutable at runtime)

    def __post_init__(self) -> None:
        """Convert the mutable dict to an immutable proxy."""
        object.__setattr__(self, "by_status", MappingProxyType(dict(self.by_status)))

    def count(self, status: TestStatus) -> int:
        return self.by_status.get(status.value, 0)

    @property
    def failed(self) -> int:
        return self.count(TestStatus.FAILED)

    @property
    def passed(self) -> int:
        return self.count(TestStatus.SUCCEEDED) + self.count(TestStatus.WARNED)

    @property
    def skipped(self) -> int:
        return self.count(TestStatus.SKIPPED)
