"""checktree: a conformance-check harness running a declared tree of checks."""

__version__ = "0.1.0"
