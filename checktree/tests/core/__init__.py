"""Unit tests for the core engine.

These tests exercise the engine without external dependencies.
Reporters are replaced with in-memory fakes from tests/fakes/.
"""
