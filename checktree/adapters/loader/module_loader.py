"""Python module loader for check definitions.

Implements TreeLoaderPort by importing every file under a directory that
matches a glob pattern and calling its module-level ``register(builder)``
function. A check module looks like::

    def register(t):
        with t.suite("Token endpoint", min_version="1.2"):
            t.test("Rejects bad grant type", check_grant_type)
"""

import importlib.util
import logging
import re
from pathlib import Path

from checktree.core.builder import TreeBuilder
from checktree.core.errors import ConfigurationError
from checktree.core.nodes import Suite
from checktree.core.ports import TreeLoaderPort

logger = logging.getLogger(__name__)

REGISTER_FUNCTION = "register"


class ModuleTreeLoader(TreeLoaderPort):
    """Discovers check modules on disk and declares them on a builder."""

    def __init__(self, tests_dir: str, pattern: str = "**/*_checks.py"):
        """Initialize module loader.

        Args:
            tests_dir: Directory to search.
            pattern: Glob pattern relative to ``tests_dir``.
        """
        self.tests_dir = Path(tests_dir).resolve()
        self.pattern = pattern

    def discover(self) -> list[Path]:
        """Return matching files in a stable (sorted) order.

        Raises:
            FileNotFoundError: If nothing matches.
        """
        paths = sorted(p for p in self.tests_dir.glob(self.pattern) if p.is_file())
        if not paths:
            raise FileNotFoundError(
                f'No files were found in "{self.tests_dir}" matching the pattern "{self.pattern}".'
            )
        return paths

    def load(self, builder: TreeBuilder) -> Suite:
        """Import each check module and let it register its nodes.

        A module that fails to import or to register is logged and skipped,
        unless the failure is a ConfigurationError, which aborts loading.
        """
        for path in self.discover():
            try:
                self._load_file(path, builder)
            except ConfigurationError:
                raise
            except Exception as e:
                logger.error(f"No tests could be loaded from {path}: {e}", exc_info=True)

        return builder.root

    def _load_file(self, path: Path, builder: TreeBuilder) -> None:
        relative = path.relative_to(self.tests_dir).with_suffix("")
        module_name = "checktree_checks." + re.sub(r"\W", "_", str(relative))

        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            raise ImportError(f"Cannot import check module {path}")

        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)

        register = getattr(module, REGISTER_FUNCTION, None)
        if not callable(register):
            logger.warning(f"Check module {path} has no {REGISTER_FUNCTION}() function; skipped")
            return

        logger.debug(f"Registering checks from {path}")
        register(builder)
