"""Test suite for the checktree harness.

Organized into three categories:

1. core/: Unit tests for the engine (versions, nodes, builder, runner)
   - No external dependencies, fast execution
   - Uses in-memory fakes for ports

2. adapters/: Tests for reporters and the module loader

3. fakes/: Port implementations for testing
   - RecordingListener captures the event stream for assertions
"""
