"""Qt bridge to run tree expansion in a worker thread."""

from __future__ import annotations

import logging

from PyQt6.QtCore import QCoreApplication, QObject, QThread, pyqtSignal, pyqtSlot

from chesstree.tree.expander import ExpansionSettings, TreeExpander
from chesstree.tree.node import Node
from chesstree.tree.search_tree import DEFAULT_MAX_DEPTH, SearchTree

_LOGGER = logging.getLogger(__name__)


class ExpansionWorker(QObject):
    """Thread-affine worker that grows a :class:`SearchTree` until cancelled.

    Move it to a ``QThread`` and connect the thread's ``started`` signal to
    :meth:`run`; the tree can be read from any thread meanwhile. The loop
    drains the worker thread's event queue once per step, so queued
    :meth:`cancel` calls arrive while it runs. ``QThread.requestInterruption``
    on the owning thread stops it as well.
    """

    node_expanded = pyqtSignal(int, int)
    expansion_finished = pyqtSignal(int)
    expansion_error = pyqtSignal(str)

    def __init__(
        self,
        tree: SearchTree,
        *,
        max_depth: int = DEFAULT_MAX_DEPTH,
        idle_wait_s: float = 0.05,
        max_steps: int | None = None,
    ) -> None:
        super().__init__()
        self._expander = TreeExpander(
            tree,
            ExpansionSettings(
                max_depth=max_depth, idle_wait_s=idle_wait_s, max_steps=max_steps
            ),
        )

    @property
    def tree(self) -> SearchTree:
        return self._expander.tree

    @pyqtSlot()
    def run(self) -> None:
        """Expand the tree and emit a signal per expanded node."""
        try:
            steps = self._expander.run(
                is_cancelled=self._is_cancelled,
                on_expanded=self._emit_expanded,
            )
        except Exception as exc:
            _LOGGER.exception("Tree expansion failed")
            self.expansion_error.emit(str(exc))
            return
        self.expansion_finished.emit(steps)

    @pyqtSlot()
    def cancel(self) -> None:
        """Request the running expansion loop to exit."""
        self._expander.request_stop()

    @staticmethod
    def _is_cancelled() -> bool:
        QCoreApplication.processEvents()
        thread = QThread.currentThread()
        return thread is not None and thread.isInterruptionRequested()

    def _emit_expanded(self, node: Node) -> None:
        self.node_expanded.emit(node.index, len(node.children))
