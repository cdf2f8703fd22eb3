"""Tests for the JSON stream and stdout reporters."""

import json
from io import StringIO

import pytest

from checktree.adapters.reporters.json_stream import JsonStreamReporter
from checktree.adapters.reporters.stdout import StdoutReporter
from checktree.core.builder import TreeBuilder
from checktree.core.models import RunSettings


async def _ok(args) -> None:
    args.api.console.log("request sent")


async def _fail(args) -> None:
    raise AssertionError("Expected 202, got 500")


@pytest.fixture
def builder() -> TreeBuilder:
    b = TreeBuilder()
    with b.suite("Kick-off", description="Bulk kick-off endpoint", min_version="1.0"):
        b.test("accepts request", _ok)
        b.test("rejects bad header", _fail)
    b.test("todo")
    return b


@pytest.mark.asyncio
class TestJsonStreamReporter:
    """One JSON document per event."""

    async def _run(self, builder: TreeBuilder) -> list[dict]:
        stream = StringIO()
        runner = builder.create_runner(
            RunSettings(api_version="1.0"), listeners=[JsonStreamReporter(stream=stream)]
        )
        await runner.run()
        return [json.loads(line) for line in stream.getvalue().splitlines()]

    async def test_writes_one_line_per_event(self, builder: TreeBuilder) -> None:
        events = await self._run(builder)

        assert [e["type"] for e in events] == [
            "start",
            "groupStart",
            "groupStart",
            "testStart",
            "testEnd",
            "testStart",
            "testEnd",
            "groupEnd",
            "testEnd",
            "groupEnd",
            "end",
        ]

    async def test_group_events_carry_definition_only(self, builder: TreeBuilder) -> None:
        events = await self._run(builder)

        group_start = events[2]["data"]
        assert group_start == {
            "name": "Kick-off",
            "path": "0",
            "minVersion": "1.0",
            "description": "Bulk kick-off endpoint",
        }
        assert "children" not in events[1]["data"]

    async def test_test_end_carries_outcome(self, builder: TreeBuilder) -> None:
        events = await self._run(builder)
        test_ends = [e["data"] for e in events if e["type"] == "testEnd"]

        passed, failed, todo = test_ends
        assert passed["status"] == "succeeded"
        assert passed["console"][0]["data"] == ["request sent"]
        assert passed["error"] is None
        assert failed["status"] == "failed"
        assert failed["error"] == "Expected 202, got 500"
        assert failed["id"] == "0-1-rejects-bad-header"
        assert todo["status"] == "not-implemented"
        assert todo["startedAt"] is not None


@pytest.mark.asyncio
class TestStdoutReporter:
    """Human-readable run log."""

    async def _run(self, builder: TreeBuilder, verbose: bool = False) -> str:
        stream = StringIO()
        runner = builder.create_runner(
            RunSettings(api_version="1.0"),
            listeners=[StdoutReporter(verbose=verbose, stream=stream)],
        )
        await runner.run()
        return stream.getvalue()

    async def test_prints_tree_with_marks(self, builder: TreeBuilder) -> None:
        output = await self._run(builder)

        assert "CHECK RUN: __ROOT__" in output
        assert "\nKick-off\n" in output
        assert "  [PASS] accepts request" in output
        assert "  [FAIL] rejects bad header" in output
        assert "\n[TODO] todo\n" in output

    async def test_failed_test_console_is_always_shown(self, builder: TreeBuilder) -> None:
        output = await self._run(builder)

        assert "ERROR: Expected 202, got 500" in output
        assert "request sent" not in output

    async def test_verbose_shows_all_console_entries(self, builder: TreeBuilder) -> None:
        output = await self._run(builder, verbose=True)

        assert "LOG: request sent" in output

    async def test_summary_counts(self, builder: TreeBuilder) -> None:
        output = await self._run(builder)

        assert "Total Tests: 3" in output
        assert "SUCCEEDED: 1" in output
        assert "FAILED: 1" in output
        assert "NOT-IMPLEMENTED: 1" in output
