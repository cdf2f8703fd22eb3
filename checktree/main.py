"""Composition root for the checktree harness.

This module is the ONLY location that imports both the core engine and
concrete adapter implementations. All wiring of dependencies happens
here, creating a clear entry point for the application.

Module Structure:
- Configuration loading via config module
- Check discovery via the module loader
- Reporter selection
- Entry point selection (run or list)
"""

import asyncio
import json
import logging
import sys

from checktree.adapters.loader.module_loader import ModuleTreeLoader
from checktree.adapters.reporters.json_stream import JsonStreamReporter
from checktree.adapters.reporters.stdout import StdoutReporter
from checktree.config import Settings, load_settings
from checktree.core.builder import TreeBuilder
from checktree.core.errors import NodeNotFoundError
from checktree.core.ports import RunListenerPort
from checktree.core.summary import summarize


def configure_logging(log_level: str, log_format: str) -> None:
    """Configure application logging.

    Log records go to stderr so they never interleave with reporter output
    on stdout.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Log format (json, text).
    """
    level = getattr(logging, log_level, logging.WARNING)

    if log_format == "json":
        format_str = '{"time": "%(asctime)s", "level": "%(levelname)s", "message": "%(message)s"}'
    else:
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stderr),
        ],
    )


def create_reporter(settings: Settings) -> RunListenerPort:
    """Select the reporter named in the settings."""
    if settings.reporter == "json":
        return JsonStreamReporter()
    return StdoutReporter(verbose=settings.verbose)


def build_tree(settings: Settings) -> TreeBuilder:
    """Load all check modules into a fresh builder."""
    builder = TreeBuilder()
    ModuleTreeLoader(settings.tests_dir, settings.pattern).load(builder)
    return builder


async def bootstrap(settings: Settings | None = None) -> int:
    """Load configuration and checks, then list or run them.

    Steps:
    1. Load configuration from environment
    2. Configure logging
    3. Build the check tree
    4. List the tree, or run it with the selected reporter

    Returns:
        Process exit code: 0 when nothing failed, 1 otherwise.

    Raises:
        ConfigurationError: If a check definition is invalid.
        NodeNotFoundError: If start_path does not exist in the tree.
        FileNotFoundError: If no check modules were found.
    """
    # Step 1: Load configuration
    if settings is None:
        settings = load_settings()

    # Step 2: Configure logging
    configure_logging(settings.log_level, settings.log_format)
    logger = logging.getLogger(__name__)

    # Step 3: Build the check tree
    logger.info(f"Loading checks from {settings.tests_dir} ({settings.pattern})")
    builder = build_tree(settings)

    # Step 4: List or run
    if settings.run_mode == "list":
        projection = builder.list(settings.start_path, settings.api_version)
        print(json.dumps(projection, indent=2, default=str))
        return 0

    node = builder.get_node_at(settings.start_path)
    if node is None:
        raise NodeNotFoundError(settings.start_path)

    runner = builder.create_runner(
        settings.to_run_settings(),
        config=settings,
        listeners=[create_reporter(settings)],
    )
    await runner.run(node)

    summary = summarize(node)
    logger.info(f"{summary.total} tests, {summary.passed} passed, {summary.failed} failed")
    return 1 if summary.failed else 0


def main() -> None:
    """Application entry point.

    Exit codes:
        0: All executed checks passed
        1: At least one check failed, or a fatal configuration error
        130: Interrupted by user (SIGINT/KeyboardInterrupt)
    """
    logger = logging.getLogger(__name__)
    try:
        exit_code = asyncio.run(bootstrap())
    except KeyboardInterrupt:
        logger.warning("Run interrupted by user (SIGINT)")
        sys.exit(130)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
