"""JSON stream reporter.

Implements RunListenerPort by writing one JSON object per runner event,
one per line, so another process can follow a run as it happens.
"""

import json
import sys
from typing import Any, TextIO

from checktree.core.models import RunEvent
from checktree.core.nodes import Suite, Test, TestNode
from checktree.core.ports import RunListenerPort


class JsonStreamReporter(RunListenerPort):
    """Writes ``{"type": <event>, "data": <node>}`` lines to a stream."""

    def __init__(self, stream: TextIO | None = None):
        """Initialize JSON stream reporter.

        Args:
            stream: Where to write. Defaults to sys.stdout at write time.
        """
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def on_event(self, event: RunEvent, node: Suite | Test) -> None:
        """Serialize the event and write it as one line."""
        line = json.dumps(
            {"type": event.value, "data": self._payload(event, node)},
            default=str,
        )
        print(line, file=self.stream, flush=True)

    @staticmethod
    def _payload(event: RunEvent, node: Suite | Test) -> dict[str, Any]:
        """Project the node for the given event.

        Group and run boundary events carry the definition fields only;
        test events carry the test projection, and TEST_END adds the
        console entries and the error text.
        """
        if event in (RunEvent.TEST_START, RunEvent.TEST_END) and isinstance(node, Test):
            data = node.to_dict()
            if event is RunEvent.TEST_END:
                data["console"] = node.console.to_list()
                data["error"] = str(node.error) if node.error is not None else None
            return data

        # Base projection only, so a suite does not drag its whole subtree along
        return TestNode.to_dict(node)
