"""Depth-first execution engine for check trees.

The runner walks a Suite/Test tree strictly in declared order, awaiting
every hook and check body before taking the next step. Nothing raised by
a hook or a check escapes the traversal: each error is attributed to the
narrowest node it occurred in.
"""

import inspect
import logging
import re
from typing import Any

from .api import TestAPI
from .errors import HookError, NotSupportedError
from .models import NodeKind, RunEvent, RunSettings, TestStatus
from .nodes import CheckArgs, HookKind, SetupArgs, Suite, Test
from .ports import RunListenerPort

logger = logging.getLogger(__name__)

TEST_AFTER_HOOK = "test.after hook"


async def _invoke(fn: Any, arg: Any) -> None:
    """Call a hook or check body, awaiting it if it is asynchronous."""
    result = fn(arg)
    if inspect.isawaitable(result):
        await result


class TestRunner:
    """Runs a check tree and emits the six-event stream.

    Selection rules, evaluated in order for every node (first match wins
    and neither the node's body nor its hooks run):

    1. ``skip`` flag set                              -> skipped
    2. only-mode active and node (or its suite)
       not flagged ``only``                           -> skipped
    3. ``min_version`` above / ``max_version`` below
       the configured API version                     -> skipped
    4. (tests) name does not match ``settings.match`` -> skipped
    5. (tests) no check body                          -> not-implemented

    A skipped suite skips its whole subtree. With ``settings.bail`` the
    first failure cancels the run: no node that has not started yet will
    start, while hooks of nodes already in flight still complete.
    """

    __test__ = False

    def __init__(
        self,
        root: Suite,
        settings: RunSettings,
        config: Any = None,
        only_mode: bool = False,
    ):
        self.root = root
        self.settings = settings
        self.config = config
        self.only_mode = only_mode
        self.canceled = False
        self._listeners: list[RunListenerPort] = []
        self._match = re.compile(settings.match, re.IGNORECASE) if settings.match else None

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def subscribe(self, listener: RunListenerPort) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: RunListenerPort) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, event: RunEvent, node: Suite | Test) -> None:
        for listener in list(self._listeners):
            try:
                listener.on_event(event, node)
            except Exception as e:
                logger.error(
                    f"Listener {type(listener).__name__} failed on {event.value}: {e}",
                    exc_info=True,
                )

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def cancel(self) -> None:
        """Stop admitting new nodes. Work already in flight finishes."""
        self.canceled = True

    async def run(
        self,
        node: Suite | Test | None = None,
        context: dict[str, Any] | None = None,
    ) -> Suite | Test:
        """Run ``node`` (the whole tree by default) and return it.

        Args:
            node: Root of the subtree to run, or a single test.
            context: Mutable bag passed to suite hooks. Each test gets a
                fresh copy of it for its own hook chain.
        """
        node = self.root if node is None else node
        context = {} if context is None else context
        self.canceled = False

        logger.info(f"Starting run at {node.path or 'root'} (API version {self.settings.api_version})")
        self._emit(RunEvent.START, node)
        await self._run_node(node, self._parent_of(node), context)
        self._emit(RunEvent.END, node)
        logger.info(f"Run finished at {node.path or 'root'}")
        return node

    def _parent_of(self, node: Suite | Test) -> Suite | None:
        parent_path = node.parent_path
        if parent_path is None:
            return None
        parent = self.root.get_node_at(parent_path)
        return parent if isinstance(parent, Suite) else None

    async def _run_node(self, node: Suite | Test, parent: Suite | None, context: dict[str, Any]) -> None:
        match node.kind:
            case NodeKind.SUITE:
                await self._run_suite(node, parent, context)
            case NodeKind.TEST:
                await self._run_test(node, parent, context)

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def _skip_reason(self, node: Suite | Test, parent: Suite | None) -> str | None:
        """Return why ``node`` must not execute, or None if it may."""
        noun = node.kind.value

        if node.skip:
            return f"This {noun} was skipped because it has a 'skip' option set"

        if self.only_mode and not (node.only or (parent is not None and parent.only)):
            flagged_below = isinstance(node, Suite) and node.has_only()
            if not flagged_below:
                return (
                    f"This {noun} was skipped due to only mode "
                    f'(other nodes are using the "only" option)'
                )

        api_version = self.settings.api_version
        if node.min_version is not None and node.min_version.is_above(api_version):
            return (
                f"This {noun} was skipped because it requires API version "
                f">= {node.min_version} (currently using {api_version})"
            )
        if node.max_version is not None and node.max_version.is_below(api_version):
            return (
                f"This {noun} was skipped because it requires API version "
                f"<= {node.max_version} (currently using {api_version})"
            )

        if isinstance(node, Test) and self._match is not None and not self._match.search(node.name):
            return (
                f"This {noun} was skipped because its name does not match "
                f"/{self.settings.match}/i"
            )

        return None

    # ------------------------------------------------------------------
    # Suites
    # ------------------------------------------------------------------

    async def _run_suite(self, suite: Suite, parent: Suite | None, context: dict[str, Any]) -> None:
        if self.canceled:
            return

        reason = self._skip_reason(suite, parent)
        if reason:
            logger.debug(f"Skipping suite {suite.name!r}: {reason}")
            self._skip_subtree(suite, reason)
            return

        self._emit(RunEvent.GROUP_START, suite)

        before_failed = False
        if suite.before is not None:
            error = await self._call_hook(HookKind.BEFORE.label, suite.before, SetupArgs(self.config, context))
            if error is not None:
                before_failed = True
                logger.error(f"Suite {suite.name!r} aborted: {error}", exc_info=error.original)

        if not before_failed:
            for child in suite.children:
                await self._run_node(child, suite, context)
                if self.canceled:
                    break

        if suite.after is not None:
            error = await self._call_hook(HookKind.AFTER.label, suite.after, SetupArgs(self.config, context))
            if error is not None:
                logger.error(f"Suite {suite.name!r}: {error}", exc_info=error.original)

        self._emit(RunEvent.GROUP_END, suite)

    def _skip_subtree(self, suite: Suite, reason: str) -> None:
        """Mark every test below ``suite`` skipped without running any hook."""
        self._emit(RunEvent.GROUP_START, suite)
        for child in suite.children:
            if isinstance(child, Suite):
                self._skip_subtree(child, reason)
            else:
                child.reset()
                child.start()
                self._settle_skipped(child, TestStatus.SKIPPED, reason)
        self._emit(RunEvent.GROUP_END, suite)

    # ------------------------------------------------------------------
    # Tests
    # ------------------------------------------------------------------

    async def _run_test(self, test: Test, parent: Suite | None, context: dict[str, Any]) -> None:
        if self.canceled:
            return

        test.reset()
        test.start()

        reason = self._skip_reason(test, parent)
        if reason:
            self._settle_skipped(test, TestStatus.SKIPPED, reason)
            return

        if test.fn is None:
            self._settle_skipped(test, TestStatus.NOT_IMPLEMENTED)
            return

        api = TestAPI(test)
        args = CheckArgs(config=self.config, api=api, context=dict(context))

        test.status = TestStatus.RUNNING
        self._emit(RunEvent.TEST_START, test)

        guarded = True
        if parent is not None and parent.before_each is not None:
            error = await self._call_hook(HookKind.BEFORE_EACH.label, parent.before_each, args)
            if error is not None:
                guarded = False
                if isinstance(error.original, NotSupportedError):
                    api.set_not_supported(str(error.original))
                else:
                    self._fail(test, error)

        if guarded:
            await self._execute_body(test, api, args)

        test.end()

        if test.record.after is not None:
            error = await self._call_hook(TEST_AFTER_HOOK, test.record.after, args)
            if error is not None:
                test.console.error(error)

        if parent is not None and parent.after_each is not None:
            error = await self._call_hook(HookKind.AFTER_EACH.label, parent.after_each, args)
            if error is not None:
                test.console.error(error)

        self._emit(RunEvent.TEST_END, test)

    async def _execute_body(self, test: Test, api: TestAPI, args: CheckArgs) -> None:
        try:
            await _invoke(test.fn, args)
        except NotSupportedError as e:
            api.set_not_supported(str(e))
        except Exception as e:
            self._fail(test, e)
        else:
            # The body may have set a terminal status itself through the API.
            if not test.status.is_terminal:
                test.status = TestStatus.WARNED if test.console.has("warn") else TestStatus.SUCCEEDED

    def _settle_skipped(self, test: Test, status: TestStatus, reason: str | None = None) -> None:
        test.status = status
        if reason:
            test.console.info(reason)
        test.end()
        self._emit(RunEvent.TEST_END, test)

    def _fail(self, test: Test, error: BaseException) -> None:
        test.status = TestStatus.FAILED
        test.record.error = error
        test.console.error(error)

        if self.settings.bail and not self.canceled:
            logger.warning(f"Test {test.name!r} failed; bail is set, no further checks will start")
            self.canceled = True

    async def _call_hook(self, label: str, fn: Any, arg: Any) -> HookError | None:
        """Run a hook and return its error, relabeled, instead of raising it."""
        try:
            await _invoke(fn, arg)
        except Exception as e:
            error = HookError(label, e)
            error.__cause__ = e
            return error
        return None
