"""Exception types raised while building and running a check tree."""


class ConfigurationError(ValueError):
    """A node definition is invalid.

    Raised at build time only. It is fatal: tree construction stops and
    nothing reaches the runner.
    """


class InvalidVersionError(TypeError):
    """A version string contains a segment that is not a non-negative integer."""


class NodeNotFoundError(LookupError):
    """No node exists at the requested dot-path."""

    def __init__(self, path: str):
        super().__init__(f"No test node found at path {path!r}")
        self.path = path


class NotSupportedError(Exception):
    """Signals that a check does not apply to the server under test.

    Check bodies raise this to end with the benign ``not-supported`` status
    instead of a failure.
    """


class HookError(Exception):
    """Wraps an exception raised by a lifecycle hook.

    The message is prefixed with the hook label so the console entry tells
    which hook broke, e.g. ``"suite.afterEach hook: connection reset"``.
    """

    def __init__(self, hook: str, original: BaseException):
        super().__init__(f"{hook}: {original}")
        self.hook = hook
        self.original = original
