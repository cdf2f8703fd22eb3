"""External adapters for the checktree harness.

This package holds everything that touches the outside world and provides
implementations of the core port interfaces.

Adapter Organization:

- reporters/: RunListenerPort implementations rendering the event stream
- loader/: TreeLoaderPort implementations discovering check definitions
"""
