"""Background tree expansion with cooperative cancellation."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass

from chesstree.tree.node import Node
from chesstree.tree.search_tree import DEFAULT_MAX_DEPTH, SearchTree

_LOGGER = logging.getLogger(__name__)

CancelCheck = Callable[[], bool]
ExpandedCallback = Callable[[Node], None]


def _never_cancelled() -> bool:
    return False


@dataclass(slots=True, frozen=True)
class ExpansionSettings:
    """Knobs for the background expansion loop."""

    max_depth: int = DEFAULT_MAX_DEPTH
    idle_wait_s: float = 0.05
    max_steps: int | None = None

    def __post_init__(self) -> None:
        if self.max_depth < 1:
            raise ValueError("Expansion depth must be >= 1")
        if self.idle_wait_s < 0:
            raise ValueError("Idle wait must be >= 0")
        if self.max_steps is not None and self.max_steps < 0:
            raise ValueError("Step limit must be >= 0")


class TreeExpander:
    """Repeatedly expands the shallowest unexpanded node of a :class:`SearchTree`.

    The loop checks its stop event once per expansion step. When nothing is
    left to expand it sleeps on that event instead of spinning, so
    :meth:`stop` wakes it immediately.
    """

    __slots__ = ("_tree", "_settings", "_stop_event", "_thread", "_steps")

    def __init__(
        self, tree: SearchTree, settings: ExpansionSettings | None = None
    ) -> None:
        self._tree = tree
        self._settings = settings or ExpansionSettings()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._steps = 0

    @property
    def tree(self) -> SearchTree:
        return self._tree

    @property
    def steps(self) -> int:
        """Number of nodes expanded so far."""
        return self._steps

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run(
        self,
        is_cancelled: CancelCheck | None = None,
        on_expanded: ExpandedCallback | None = None,
    ) -> int:
        """Expand until stopped, cancelled or out of steps; return total steps."""
        cancelled = is_cancelled or _never_cancelled
        settings = self._settings
        stop_event = self._stop_event

        while not stop_event.is_set() and not cancelled():
            if settings.max_steps is not None and self._steps >= settings.max_steps:
                break
            node = self._tree.expand_step(settings.max_depth)
            if node is None:
                stop_event.wait(settings.idle_wait_s)
                continue
            self._steps += 1
            if on_expanded is not None:
                on_expanded(node)

        _LOGGER.debug("Expansion loop exited after %d steps", self._steps)
        return self._steps

    def start(self) -> None:
        """Run :meth:`run` on a daemon thread."""
        if self.is_running:
            raise RuntimeError("Tree expander is already running")
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self.run, name="tree-expander", daemon=True
        )
        self._thread.start()
        _LOGGER.info("Tree expander started (max_depth=%d)", self._settings.max_depth)

    def request_stop(self) -> None:
        """Ask the loop to exit before its next step without waiting for it."""
        self._stop_event.set()

    def stop(self, timeout: float | None = None) -> None:
        """Signal the loop to exit and wait for the thread to finish."""
        self._stop_event.set()
        thread = self._thread
        if thread is None:
            return
        thread.join(timeout)
        if thread.is_alive():
            _LOGGER.warning("Tree expander did not stop within %s s", timeout)
            return
        self._thread = None
        _LOGGER.info("Tree expander stopped after %d steps", self._steps)
