"""Reporters rendering the runner's event stream.

Implementations support multiple output channels:
- Stdout (terminal tree with a closing summary)
- JSON stream (one event per line, for other processes)
"""

from .json_stream import JsonStreamReporter
from .stdout import StdoutReporter

__all__ = ["JsonStreamReporter", "StdoutReporter"]
