"""Search tree node."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from chesstree.core.position import Position


class Node:
    """A position in the search tree plus its (lazily generated) children.

    ``children`` is published once, as a complete tuple, by a single
    attribute assignment. Readers therefore see either no children or all
    of them and never need the writer's lock.
    """

    __slots__ = ("index", "position", "depth", "parent_index", "_children")

    def __init__(
        self,
        index: int,
        position: Position,
        depth: int = 0,
        parent_index: int | None = None,
    ) -> None:
        self.index = index
        self.position = position
        self.depth = depth
        self.parent_index = parent_index
        self._children: tuple[Node, ...] | None = None

    @property
    def children(self) -> tuple[Node, ...]:
        """Snapshot of the children; empty until the node is expanded."""
        children = self._children
        return children if children is not None else ()

    @property
    def is_expanded(self) -> bool:
        return self._children is not None

    @property
    def is_terminal(self) -> bool:
        """Expanded with no legal move: checkmate or stalemate."""
        return self._children == ()

    def _publish(self, children: tuple[Node, ...]) -> None:
        self._children = children

    def __repr__(self) -> str:
        move = self.position.last_move
        state = "unexpanded" if self._children is None else f"{len(self._children)} children"
        return f"Node(#{self.index}, depth={self.depth}, move={move}, {state})"
