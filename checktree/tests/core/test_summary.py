"""Tests for tree iteration and run summaries."""

import pytest

from checktree.core.builder import TreeBuilder
from checktree.core.models import RunSettings, TestStatus
from checktree.core.summary import iter_tests, summarize


async def _ok(args) -> None:
    return None


async def _boom(args) -> None:
    raise RuntimeError("boom")


async def _warn(args) -> None:
    args.api.console.warn("deprecated")


@pytest.fixture
def builder() -> TreeBuilder:
    b = TreeBuilder()
    with b.suite("a"):
        b.test("ok", _ok)
        b.test("warn", _warn)
        with b.suite("nested"):
            b.test("boom", _boom)
    b.test("todo")
    b.test("skipped", _ok, skip=True)
    return b


def test_iter_tests_is_depth_first(builder: TreeBuilder) -> None:
    assert [t.name for t in iter_tests(builder.root)] == ["ok", "warn", "boom", "todo", "skipped"]


def test_iter_tests_of_a_single_test(builder: TreeBuilder) -> None:
    test = builder.get_node_at("1")
    assert list(iter_tests(test)) == [test]


def test_summary_before_running(builder: TreeBuilder) -> None:
    summary = summarize(builder.root)
    assert summary.total == 5
    assert summary.count(TestStatus.UNSET) == 5
    assert summary.failed == 0


@pytest.mark.asyncio
async def test_summary_after_running(builder: TreeBuilder) -> None:
    await builder.create_runner(RunSettings(api_version="1.0")).run()

    summary = summarize(builder.root)

    assert summary.total == 5
    assert summary.passed == 2
    assert summary.failed == 1
    assert summary.skipped == 1
    assert summary.count(TestStatus.NOT_IMPLEMENTED) == 1
    assert dict(summary.by_status) == {
        "succeeded": 1,
        "warned": 1,
        "failed": 1,
        "not-implemented": 1,
        "skipped": 1,
    }


def test_summary_is_read_only(builder: TreeBuilder) -> None:
    summary = summarize(builder.root)
    with pytest.raises(TypeError):
        summary.by_status["failed"] = 3  # type: ignore[index]
