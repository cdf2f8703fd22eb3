"""Core engine of the checktree harness.

This package contains zero external dependencies: versions, tree nodes,
the explicit tree builder and the runner state machine. Reporters,
loaders and configuration live outside of it.
"""

from .api import TestAPI
from .builder import TreeBuilder
from .errors import (
    ConfigurationError,
    HookError,
    InvalidVersionError,
    NodeNotFoundError,
    NotSupportedError,
)
from .models import (
    Console,
    ConsoleEntry,
    NodeKind,
    Prerequisite,
    RunEvent,
    RunRecord,
    RunSettings,
    RunSummary,
    TestStatus,
)
from .nodes import CheckArgs, HookKind, SetupArgs, Suite, Test, TestNode, filter_by_version
from .runner import TestRunner
from .summary import iter_tests, summarize
from .version import Version

__all__ = [
    "CheckArgs",
    "ConfigurationError",
    "Console",
    "ConsoleEntry",
    "HookError",
    "HookKind",
    "InvalidVersionError",
    "NodeKind",
    "NodeNotFoundError",
    "NotSupportedError",
    "Prerequisite",
    "RunEvent",
    "RunRecord",
    "RunSettings",
    "RunSummary",
    "SetupArgs",
    "Suite",
    "Test",
    "TestAPI",
    "TestNode",
    "TestRunner",
    "TestStatus",
    "TreeBuilder",
    "Version",
    "filter_by_version",
    "iter_tests",
    "summarize",
]
