"""Tests for adapter implementations (reporters, loader)."""
