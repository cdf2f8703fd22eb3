"""The API object handed to check bodies and per-test hooks."""

from .errors import NotSupportedError
from .models import Console, Prerequisite, TestStatus
from .nodes import CheckFn, Test


class TestAPI:
    """Lets a running check report on itself.

    One instance is bound to the test being executed. Everything it
    writes lands in that test's run-record.
    """

    __test__ = False

    def __init__(self, test: Test):
        self._test = test

    @property
    def console(self) -> Console:
        return self._test.console

    def set_status(self, status: TestStatus | str) -> None:
        """Set the status of this test explicitly."""
        self._test.status = TestStatus(status)

    def set_not_supported(self, message: str = "") -> None:
        """Mark the test as not supported by the server under test."""
        if message:
            self._test.console.info(message)
        self._test.status = TestStatus.NOT_SUPPORTED

    def prerequisite(self, *conditions: Prerequisite) -> None:
        """Check the conditions a test needs before it can do its job.

        Raises:
            NotSupportedError: With the message of the first condition that
                does not hold.
        """
        for condition in conditions:
            assertion = condition.assertion
            holds = assertion() if callable(assertion) else bool(assertion)
            if not holds:
                raise NotSupportedError(condition.message)

    def after(self, fn: CheckFn) -> CheckFn:
        """Register a cleanup callback that runs once this test settles.

        It runs even if the test fails. Registering again replaces the
        previous callback.
        """
        self._test.record.after = fn
        return fn
