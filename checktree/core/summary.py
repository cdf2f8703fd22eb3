"""Aggregate counts over a (possibly partially) run tree."""

from collections import Counter
from collections.abc import Iterator

from .models import RunSummary
from .nodes import Suite, Test


def iter_tests(node: Suite | Test) -> Iterator[Test]:
    """Yield every test below ``node`` in depth-first, declared order."""
    if isinstance(node, Test):
        yield node
        return
    for child in node.children:
        yield from iter_tests(child)


def summarize(node: Suite | Test) -> RunSummary:
    """Count the tests below ``node`` by status in a single pass."""
    counts: Counter[str] = Counter()
    total = 0
    for test in iter_tests(node):
        counts[test.status.value] += 1
        total += 1
    return RunSummary(total=total, by_status=dict(counts))
