"""Explicit builder used to declare a check tree.

Loaders call ``suite``/``test`` and the hook registration methods on a
TreeBuilder. The builder tracks which suite is currently open, assigns
dot-paths from tree position and notices ``only`` flags anywhere in the
tree. Nothing declared here is executed at build time.
"""

import logging
import re
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import Any

from .errors import NodeNotFoundError
from .models import RunSettings
from .nodes import CheckFn, HookKind, SetupHook, Suite, Test, filter_by_version
from .ports import RunListenerPort
from .runner import TestRunner
from .version import VersionLike

logger = logging.getLogger(__name__)

ROOT_NAME = "__ROOT__"


def _slugify(text: str) -> str:
    """Lowercase ``text`` and collapse anything but letters and digits to '-'."""
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")


class TreeBuilder:
    """Builds a Suite/Test tree through nested declaration calls.

    Example:
        builder = TreeBuilder()
        with builder.suite("Kick-off endpoint", min_version="1.0"):
            builder.before_each(reset_client)
            builder.test("Requires Accept header", check_accept_header)
    """

    def __init__(self, root_name: str = ROOT_NAME):
        self.root = Suite(name=root_name, path="")
        self._open: list[Suite] = [self.root]
        self.only_mode = False

    @property
    def current(self) -> Suite:
        """The suite new nodes and hooks attach to."""
        return self._open[-1]

    def _next_path(self) -> str:
        parent = self.current
        return ".".join(filter(None, [parent.path, str(len(parent.children))]))

    @contextmanager
    def suite(
        self,
        name: str,
        *,
        description: str | None = None,
        min_version: VersionLike | None = None,
        max_version: VersionLike | None = None,
        only: bool = False,
        skip: bool = False,
    ) -> Iterator[Suite]:
        """Open a child suite of the current suite for the ``with`` block.

        Children and hooks declared inside the block belong to the new
        suite. Children of an ``only`` suite inherit the flag.

        Raises:
            ConfigurationError: If the suite definition is invalid.
        """
        parent = self.current
        node = Suite(
            name=name,
            path=self._next_path(),
            description=description,
            min_version=min_version,
            max_version=max_version,
            only=only or parent.only,
            skip=skip,
        )
        if only:
            self.only_mode = True

        parent.children.append(node)
        self._open.append(node)
        try:
            yield node
        finally:
            self._open.pop()

    def test(
        self,
        name: str,
        fn: CheckFn | None = None,
        *,
        id: str | None = None,
        description: str | None = None,
        min_version: VersionLike | None = None,
        max_version: VersionLike | None = None,
        only: bool = False,
        skip: bool = False,
    ) -> Test:
        """Append a test to the current suite.

        A test declared without ``fn`` ends as not implemented when run.

        Raises:
            ConfigurationError: If the test definition is invalid.
        """
        parent = self.current
        path = self._next_path()
        node = Test(
            name=name,
            path=path,
            description=description,
            min_version=min_version,
            max_version=max_version,
            only=only or parent.only,
            skip=skip,
            id=id or _slugify(f"{path}--{name}"),
            fn=fn,
        )
        if only:
            self.only_mode = True

        parent.children.append(node)
        return node

    def before(self, fn: SetupHook) -> SetupHook:
        """Run ``fn`` once before the current suite's children."""
        self.current.set_hook(HookKind.BEFORE, fn)
        return fn

    def after(self, fn: SetupHook) -> SetupHook:
        """Run ``fn`` once after the current suite's children."""
        self.current.set_hook(HookKind.AFTER, fn)
        return fn

    def before_each(self, fn: CheckFn) -> CheckFn:
        """Run ``fn`` before every executed test of the current suite."""
        self.current.set_hook(HookKind.BEFORE_EACH, fn)
        return fn

    def after_each(self, fn: CheckFn) -> CheckFn:
        """Run ``fn`` after every executed test of the current suite."""
        self.current.set_hook(HookKind.AFTER_EACH, fn)
        return fn

    def get_node_at(self, path: str = "") -> Suite | Test | None:
        return self.root.get_node_at(path)

    def list(self, path: str = "", api_version: VersionLike | None = None) -> dict[str, Any] | None:
        """Project the subtree at ``path`` without running anything.

        When ``api_version`` is given, nodes whose version bounds exclude it
        are left out. Returns None if the node at ``path`` itself is excluded.

        Raises:
            NodeNotFoundError: If there is no node at ``path``.
        """
        node = self.get_node_at(path)
        if node is None:
            raise NodeNotFoundError(path)

        projection = node.to_dict()
        if api_version:
            return filter_by_version(projection, api_version)
        return projection

    def create_runner(
        self,
        settings: RunSettings,
        config: Any = None,
        listeners: Iterable[RunListenerPort] = (),
    ) -> TestRunner:
        """Create a runner for this tree with the detected only-mode."""
        logger.debug(f"Creating runner (only mode: {self.only_mode})")
        runner = TestRunner(
            root=self.root,
            settings=settings,
            config=config,
            only_mode=self.only_mode,
        )
        for listener in listeners:
            runner.subscribe(listener)
        return runner
