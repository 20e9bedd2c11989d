"""Incrementally grown game tree shared between an expander and readers."""

from __future__ import annotations

import logging
import threading
from collections import deque
from collections.abc import Iterator

from chesstree.core.position import Position
from chesstree.tree.node import Node

_LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 2


class SearchTree:
    """Arena of :class:`Node` objects addressed by stable indices.

    Child generation runs without any lock. The writer lock is held only to
    re-check that the node is still unexpanded, append the new nodes to the
    arena and publish the node's child tuple, so concurrent expanders never
    publish twice and readers never wait on move generation.
    """

    __slots__ = ("_arena", "_lock")

    def __init__(self, position: Position | str) -> None:
        if isinstance(position, str):
            position = Position.from_fen(position)
        self._arena: list[Node] = [Node(0, position)]
        self._lock = threading.Lock()

    # -- Read access ----------------------------------------------------------

    @property
    def root(self) -> Node:
        return self._arena[0]

    @property
    def node_count(self) -> int:
        return len(self._arena)

    def node(self, index: int) -> Node:
        """Node with arena *index*."""
        return self._arena[index]

    def iter_nodes(self, max_depth: int | None = None) -> Iterator[Node]:
        """Breadth-first walk over nodes no deeper than *max_depth*.

        Each node's children are read once, so the walk only ever sees
        whole child lists.
        """
        queue: deque[Node] = deque((self.root,))
        while queue:
            node = queue.popleft()
            yield node
            if max_depth is None or node.depth < max_depth:
                queue.extend(node.children)

    def frontier(self, max_depth: int = DEFAULT_MAX_DEPTH) -> list[Node]:
        """Unexpanded nodes shallower than *max_depth*, breadth-first."""
        return [
            node for node in self.iter_nodes(max_depth - 1) if not node.is_expanded
        ]

    # -- Growth ---------------------------------------------------------------

    def expand(self, node: Node) -> bool:
        """Generate *node*'s legal children. No-op if it is already expanded."""
        if node.is_expanded:
            return False

        children = node.position.legal_children()

        with self._lock:
            if node.is_expanded:
                return False
            base = len(self._arena)
            child_depth = node.depth + 1
            nodes = tuple(
                Node(base + offset, child, child_depth, node.index)
                for offset, child in enumerate(children)
            )
            self._arena.extend(nodes)
            node._publish(nodes)

        _LOGGER.debug(
            "Expanded node #%d at depth %d into %d children",
            node.index,
            node.depth,
            len(nodes),
        )
        return True

    def expand_step(self, max_depth: int = DEFAULT_MAX_DEPTH) -> Node | None:
        """Expand the shallowest, lowest-index node above *max_depth* plies.

        Returns the expanded node, or ``None`` once every node shallower
        than *max_depth* has been expanded.
        """
        for node in self.iter_nodes(max_depth - 1):
            if not node.is_expanded and self.expand(node):
                return node
        return None
