"""Fake implementations of core ports for testing.

- RecordingListener: Captures the runner's event stream for assertions
- ExplodingListener: Raises on every event
"""

from .listener import ExplodingListener, RecordingListener

__all__ = ["ExplodingListener", "RecordingListener"]
