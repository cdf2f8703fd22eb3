"""Tree nodes: the Suite composite and the Test leaf.

Structural fields (name, path, version bounds, children, hooks) are set
while the tree is built and are not touched afterwards. The only state the
runner mutates is the RunRecord owned by each Test.
"""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any, TypeAlias

from .errors import ConfigurationError
from .models import Console, NodeKind, RunRecord, TestStatus
from .version import Version, VersionLike


@dataclass(frozen=True)
class SetupArgs:
    """Argument handed to suite-level ``before`` and ``after`` hooks."""

    config: Any
    context: dict[str, Any]


@dataclass(frozen=True)
class CheckArgs:
    """Argument handed to check bodies and per-test hooks.

    ``api`` is the TestAPI bound to the test being executed.
    """

    config: Any
    api: Any
    context: dict[str, Any]


SetupHook: TypeAlias = Callable[[SetupArgs], Awaitable[Any] | Any]
CheckFn: TypeAlias = Callable[[CheckArgs], Awaitable[Any] | Any]


class HookKind(Enum):
    """Lifecycle hook slots of a Suite.

    BEFORE and AFTER run once per suite invocation with SetupArgs.
    BEFORE_EACH and AFTER_EACH run around every executed child test with
    CheckArgs.
    """

    BEFORE = "before"
    AFTER = "after"
    BEFORE_EACH = "beforeEach"
    AFTER_EACH = "afterEach"

    @property
    def label(self) -> str:
        return f"suite.{self.value} hook"


def _parse_bound(value: VersionLike | None) -> Version | None:
    if value is None or value == "":
        return None
    return Version.parse(value)


@dataclass(eq=False)
class TestNode(ABC):
    """Identity and metadata shared by suites and tests."""

    __test__ = False

    name: str
    path: str = ""
    description: str | None = None
    min_version: VersionLike | None = None
    max_version: VersionLike | None = None
    only: bool = False
    skip: bool = False

    def __post_init__(self) -> None:
        """Validate identity and version bounds."""
        if not isinstance(self.name, str) or not self.name.strip():
            raise ConfigurationError("Test node name must be a non-empty string")

        self.min_version = _parse_bound(self.min_version)
        self.max_version = _parse_bound(self.max_version)
        self.only = bool(self.only)
        self.skip = bool(self.skip)

        if (
            self.min_version is not None
            and self.max_version is not None
            and self.max_version.is_below(self.min_version)
        ):
            raise ConfigurationError(
                f'The minimal version "{self.min_version}" cannot be higher '
                f'than the maximal version "{self.max_version}" ({self.name!r})'
            )

    @property
    @abstractmethod
    def kind(self) -> NodeKind:
        """Discriminant used by the runner to dispatch on node type."""

    @property
    def parent_path(self) -> str | None:
        """Dot-path of the enclosing suite, or None for the root."""
        if not self.path:
            return None
        head, _, _ = self.path.rpartition(".")
        return head

    def to_dict(self) -> dict[str, Any]:
        """Project the node onto its JSON wire format."""
        data: dict[str, Any] = {"name": self.name, "path": self.path}
        if self.min_version is not None:
            data["minVersion"] = self.min_version.to_json()
        if self.max_version is not None:
            data["maxVersion"] = self.max_version.to_json()
        if self.description:
            data["description"] = self.description
        return data


@dataclass(eq=False)
class Suite(TestNode):
    """Composite node with ordered children and optional lifecycle hooks."""

    children: list["Suite | Test"] = field(default_factory=list)
    before: SetupHook | None = None
    after: SetupHook | None = None
    before_each: CheckFn | None = None
    after_each: CheckFn | None = None

    @property
    def kind(self) -> NodeKind:
        return NodeKind.SUITE

    def hook(self, kind: HookKind) -> SetupHook | CheckFn | None:
        return {
            HookKind.BEFORE: self.before,
            HookKind.AFTER: self.after,
            HookKind.BEFORE_EACH: self.before_each,
            HookKind.AFTER_EACH: self.after_each,
        }[kind]

    def set_hook(self, kind: HookKind, fn: SetupHook | CheckFn) -> None:
        if not callable(fn):
            raise ConfigurationError(f"{kind.label} must be callable, got {fn!r}")
        attribute = {
            HookKind.BEFORE: "before",
            HookKind.AFTER: "after",
            HookKind.BEFORE_EACH: "before_each",
            HookKind.AFTER_EACH: "after_each",
        }[kind]
        setattr(self, attribute, fn)

    def has_only(self) -> bool:
        """True if this suite or anything below it is flagged ``only``."""
        if self.only:
            return True
        return any(
            child.has_only() if isinstance(child, Suite) else child.only
            for child in self.children
        )

    def get_node_at(self, path: str = "") -> "Suite | Test | None":
        """Resolve a dot-separated list of child indexes.

        For example "2.1.5" is the sixth child of the second child of the
        third child of this suite. Returns None for any invalid segment.
        """
        if not path:
            return self

        node: Suite | Test | None = self
        for segment in path.split("."):
            if not isinstance(node, Suite) or not (segment.isascii() and segment.isdigit()):
                return None
            index = int(segment)
            if index >= len(node.children):
                return None
            node = node.children[index]
        return node

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["children"] = [child.to_dict() for child in self.children]
        return data


@dataclass(eq=False)
class Test(TestNode):
    """Leaf node wrapping one executable check and its run-record.

    A test without ``fn`` is considered not implemented.
    """

    id: str | None = None
    fn: CheckFn | None = None
    record: RunRecord = field(default_factory=RunRecord, repr=False)

    @property
    def kind(self) -> NodeKind:
        return NodeKind.TEST

    @property
    def status(self) -> TestStatus:
        return self.record.status

    @status.setter
    def status(self, status: TestStatus) -> None:
        self.record.status = TestStatus(status)

    @property
    def started_at(self) -> datetime | None:
        return self.record.started_at

    @property
    def ended_at(self) -> datetime | None:
        return self.record.ended_at

    @property
    def error(self) -> BaseException | None:
        return self.record.error

    @property
    def console(self) -> Console:
        return self.record.console

    def reset(self) -> None:
        """Discard the run-record so the test can be run again."""
        self.record = RunRecord()

    def start(self) -> None:
        self.record.started_at = datetime.now(UTC)

    def end(self) -> None:
        if self.record.ended_at is None:
            self.record.ended_at = datetime.now(UTC)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["id"] = self.id
        data["status"] = None if self.status is TestStatus.UNSET else self.status.value
        data["startedAt"] = self.started_at.isoformat() if self.started_at else None
        data["endedAt"] = self.ended_at.isoformat() if self.ended_at else None
        return data


def filter_by_version(projection: dict[str, Any], version: VersionLike) -> dict[str, Any] | None:
    """Drop projected nodes whose version bounds exclude ``version``.

    Works on the output of ``to_dict()`` and returns a filtered copy, or
    None when the node itself is excluded.
    """
    min_version = projection.get("minVersion")
    if min_version and Version.parse(min_version).is_above(version):
        return None

    max_version = projection.get("maxVersion")
    if max_version and Version.parse(max_version).is_below(version):
        return None

    if isinstance(projection.get("children"), list):
        children = [filter_by_version(child, version) for child in projection["children"]]
        return {**projection, "children": [c for c in children if c is not None]}

    return projection
