"""Port interfaces for the checktree harness.

These abstract base classes define the boundaries between the core
engine and external adapters. Implementations live in the adapters/
package.

Port Interface Categories:

1. **Driven Ports** (core calls out to adapters)
   - RunListenerPort: Receive the runner's event stream (reporters)

2. **Driving Ports** (adapters feed the core)
   - TreeLoaderPort: Populate a TreeBuilder with check definitions
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from .models import RunEvent
from .nodes import Suite, Test

if TYPE_CHECKING:
    from .builder import TreeBuilder


# ============================================================================
# DRIVEN PORTS (Core calls out to adapters)
# ============================================================================


class RunListenerPort(ABC):
    """Port for observing a run.

    The runner calls ``on_event`` synchronously for every event it emits.
    The payload is the live node at the moment of emission (the run root
    for START and END). Listeners must treat it as read-only.

    Implementations must handle:
    - Being called for nodes that never executed (skipped tests still
      produce TEST_END)
    - Their own output errors; anything they raise is logged by the runner
      and otherwise ignored
    """

    @abstractmethod
    def on_event(self, event: RunEvent, node: Suite | Test) -> None:
        """Handle one runner event.

        Args:
            event: Which point of the run was reached.
            node: The suite or test the event is about.
        """


# ============================================================================
# DRIVING PORTS (Adapters feed the core)
# ============================================================================


class TreeLoaderPort(ABC):
    """Port for discovering check definitions.

    Implementations read definitions from somewhere (Python modules,
    fixtures, ...) and declare them on the given builder. Check bodies and
    hooks must not be invoked while loading.
    """

    @abstractmethod
    def load(self, builder: "TreeBuilder") -> Suite:
        """Declare all discovered suites and tests on ``builder``.

        Args:
            builder: The builder to populate.

        Returns:
            The builder's root suite.

        Raises:
            ConfigurationError: If any definition is invalid.
            FileNotFoundError: If no definitions could be found.
        """
