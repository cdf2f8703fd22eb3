"""Tests for ModuleTreeLoader discovery and registration."""

import logging
from pathlib import Path
from textwrap import dedent

import pytest

from checktree.adapters.loader.module_loader import ModuleTreeLoader
from checktree.core.builder import TreeBuilder
from checktree.core.errors import ConfigurationError


def _write(directory: Path, name: str, source: str) -> Path:
    path = directory / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dedent(source), encoding="utf-8")
    return path


TOKEN_CHECKS = """
    async def rejects_bad_grant(args):
        return None


    def register(t):
        with t.suite("Token endpoint", min_version="1.2"):
            t.test("Rejects bad grant type", rejects_bad_grant)
            t.test("Rejects expired assertion")
"""

STATUS_CHECKS = """
    def register(t):
        t.test("Status endpoint", lambda args: None)
"""


class TestDiscovery:
    """Tests for file discovery."""

    def test_discovers_matching_files_sorted(self, tmp_path: Path) -> None:
        _write(tmp_path, "b_checks.py", STATUS_CHECKS)
        _write(tmp_path, "nested/a_checks.py", STATUS_CHECKS)
        _write(tmp_path, "helpers.py", "")

        paths = ModuleTreeLoader(str(tmp_path)).discover()

        assert [p.relative_to(tmp_path).as_posix() for p in paths] == [
            "b_checks.py",
            "nested/a_checks.py",
        ]

    def test_no_matching_files_raises(self, tmp_path: Path) -> None:
        _write(tmp_path, "helpers.py", "")

        with pytest.raises(FileNotFoundError, match="No files were found"):
            ModuleTreeLoader(str(tmp_path)).discover()

    def test_custom_pattern(self, tmp_path: Path) -> None:
        _write(tmp_path, "token.py", STATUS_CHECKS)

        paths = ModuleTreeLoader(str(tmp_path), pattern="*.py").discover()

        assert [p.name for p in paths] == ["token.py"]


class TestLoading:
    """Tests for importing modules and calling register()."""

    def test_registers_modules_in_file_order(self, tmp_path: Path) -> None:
        _write(tmp_path, "a_token_checks.py", TOKEN_CHECKS)
        _write(tmp_path, "b_status_checks.py", STATUS_CHECKS)
        builder = TreeBuilder()

        root = ModuleTreeLoader(str(tmp_path)).load(builder)

        assert root is builder.root
        assert [c.name for c in root.children] == ["Token endpoint", "Status endpoint"]
        token = root.children[0]
        assert [c.path for c in token.children] == ["0.0", "0.1"]
        assert token.children[1].fn is None

    def test_broken_module_is_logged_and_skipped(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        _write(tmp_path, "a_broken_checks.py", "raise RuntimeError('cannot import')\n")
        _write(tmp_path, "b_status_checks.py", STATUS_CHECKS)
        builder = TreeBuilder()

        with caplog.at_level(logging.ERROR):
            ModuleTreeLoader(str(tmp_path)).load(builder)

        assert [c.name for c in builder.root.children] == ["Status endpoint"]
        assert "No tests could be loaded from" in caplog.text
        assert "a_broken_checks.py" in caplog.text

    def test_module_without_register_is_skipped_with_warning(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        _write(tmp_path, "empty_checks.py", "VALUE = 1\n")
        builder = TreeBuilder()

        with caplog.at_level(logging.WARNING):
            ModuleTreeLoader(str(tmp_path)).load(builder)

        assert builder.root.children == []
        assert "has no register() function" in caplog.text

    def test_invalid_definition_aborts_loading(self, tmp_path: Path) -> None:
        _write(
            tmp_path,
            "bad_checks.py",
            """
            def register(t):
                t.test("bounds", lambda args: None, min_version="3", max_version="2")
            """,
        )

        with pytest.raises(ConfigurationError, match="cannot be higher"):
            ModuleTreeLoader(str(tmp_path)).load(TreeBuilder())
