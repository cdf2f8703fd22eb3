"""Stdout reporter.

Implements RunListenerPort by printing the tree to the terminal as it
runs, with a status mark per test and a summary at the end.
"""

import sys
from typing import TextIO

from checktree.core.models import ConsoleEntry, RunEvent, RunSummary, TestStatus
from checktree.core.nodes import Suite, Test
from checktree.core.ports import RunListenerPort
from checktree.core.summary import summarize

STATUS_MARKS = {
    TestStatus.SUCCEEDED: "[PASS]",
    TestStatus.WARNED: "[WARN]",
    TestStatus.FAILED: "[FAIL]",
    TestStatus.NOT_SUPPORTED: "[N/S ]",
    TestStatus.NOT_IMPLEMENTED: "[TODO]",
    TestStatus.SKIPPED: "[SKIP]",
}


class StdoutReporter(RunListenerPort):
    """Prints a human-readable run log."""

    def __init__(self, verbose: bool = False, stream: TextIO | None = None):
        """Initialize stdout reporter.

        Args:
            verbose: If True, print console entries of every executed test.
                Otherwise only entries of failed or warned tests are shown.
            stream: Where to write. Defaults to sys.stdout at write time.
        """
        self.verbose = verbose
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def _print(self, text: str) -> None:
        print(text, file=self.stream, flush=True)

    def on_event(self, event: RunEvent, node: Suite | Test) -> None:
        if event is RunEvent.START:
            self._print("=" * 80)
            self._print(f"CHECK RUN: {node.name}")
            self._print("=" * 80)
        elif event is RunEvent.GROUP_START and node.path:
            self._print(f"{self._indent(node, -1)}{node.name}")
        elif event is RunEvent.TEST_END and isinstance(node, Test):
            self._print(self._format_test(node))
            if self._shows_console(node):
                for entry in node.console:
                    self._print(self._format_entry(node, entry))
        elif event is RunEvent.END:
            self._print(self._format_summary(summarize(node)))

    def _shows_console(self, test: Test) -> bool:
        if test.status in (TestStatus.SKIPPED, TestStatus.NOT_IMPLEMENTED):
            return self.verbose
        if test.status in (TestStatus.FAILED, TestStatus.WARNED):
            return True
        return self.verbose

    @staticmethod
    def _indent(node: Suite | Test, offset: int = 0) -> str:
        depth = len(node.path.split(".")) if node.path else 0
        return "  " * max(depth + offset, 0)

    @classmethod
    def _format_test(cls, test: Test) -> str:
        mark = STATUS_MARKS.get(test.status, f"[{test.status.value}]")
        line = f"{cls._indent(test, -1)}{mark} {test.name}"
        if test.started_at and test.ended_at and test.status not in (
            TestStatus.SKIPPED,
            TestStatus.NOT_IMPLEMENTED,
        ):
            elapsed_ms = (test.ended_at - test.started_at).total_seconds() * 1000
            line += f" ({elapsed_ms:.0f}ms)"
        return line

    @classmethod
    def _format_entry(cls, test: Test, entry: ConsoleEntry) -> str:
        text = " ".join(str(item) for item in entry.data)
        return f"{cls._indent(test)}  {entry.label.upper()}: {text}"

    @staticmethod
    def _format_summary(summary: RunSummary) -> str:
        """Format a summary statistics report."""
        lines = [
            "",
            "=" * 80,
            "SUMMARY",
            "=" * 80,
            f"Total Tests: {summary.total}",
        ]
        for status in STATUS_MARKS:
            count = summary.count(status)
            if count:
                lines.append(f"  {status.value.upper()}: {count}")
        not_reached = summary.count(TestStatus.UNSET)
        if not_reached:
            lines.append(f"  NOT RUN: {not_reached}")
        lines.append("=" * 80)
        return "\n".join(lines)
