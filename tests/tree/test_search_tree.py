"""Tests for SearchTree expansion and concurrent reads."""

from __future__ import annotations

import threading

from chesstree.core.notation import STARTING_FEN, position_from_fen
from chesstree.tree.node import Node
from chesstree.tree.search_tree import SearchTree

FOOLS_MATE = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"


class TestExpand:
    def test_root_starts_unexpanded(self) -> None:
        tree = SearchTree(STARTING_FEN)
        assert not tree.root.is_expanded
        assert tree.root.children == ()
        assert tree.node_count == 1

    def test_expand_root(self) -> None:
        tree = SearchTree(position_from_fen(STARTING_FEN))
        assert tree.expand(tree.root)
        children = tree.root.children
        assert len(children) == 20
        assert tree.node_count == 21
        for offset, child in enumerate(children, start=1):
            assert child.index == offset
            assert child.depth == 1
            assert child.parent_index == 0
            assert tree.node(offset) is child

    def test_expand_is_idempotent(self) -> None:
        tree = SearchTree(STARTING_FEN)
        tree.expand(tree.root)
        first = tree.root.children
        assert not tree.expand(tree.root)
        assert tree.root.children is first
        assert tree.node_count == 21

    def test_terminal_node(self) -> None:
        tree = SearchTree(FOOLS_MATE)
        assert tree.expand(tree.root)
        assert tree.root.is_terminal
        assert tree.expand_step() is None

    def test_children_are_legal_successors(self) -> None:
        tree = SearchTree(STARTING_FEN)
        tree.expand(tree.root)
        positions = [child.position for child in tree.root.children]
        assert positions == tree.root.position.legal_children()


class TestExpandStep:
    def test_breadth_first_lowest_index_first(self) -> None:
        tree = SearchTree(STARTING_FEN)
        expanded = [tree.expand_step() for _ in range(3)]
        assert [node.index for node in expanded if node is not None] == [0, 1, 2]

    def test_stops_after_two_plies(self) -> None:
        tree = SearchTree(STARTING_FEN)
        steps = 0
        while tree.expand_step() is not None:
            steps += 1
        assert steps == 21
        assert tree.node_count == 1 + 20 + 400
        assert tree.frontier() == []
        assert all(not node.is_expanded for node in tree.root.children[0].children)

    def test_custom_depth(self) -> None:
        tree = SearchTree(STARTING_FEN)
        assert tree.expand_step(max_depth=1) is tree.root
        assert tree.expand_step(max_depth=1) is None

    def test_frontier_lists_unexpanded(self) -> None:
        tree = SearchTree(STARTING_FEN)
        assert tree.frontier() == [tree.root]
        tree.expand_step()
        assert len(tree.frontier()) == 20

    def test_iter_nodes_respects_depth(self) -> None:
        tree = SearchTree(STARTING_FEN)
        while tree.expand_step() is not None:
            pass
        assert sum(1 for _ in tree.iter_nodes(max_depth=1)) == 21
        assert sum(1 for _ in tree.iter_nodes()) == 421


class TestConcurrency:
    def test_readers_never_see_partial_children(self) -> None:
        tree = SearchTree(STARTING_FEN)
        observed: list[tuple[int, int]] = []
        done = threading.Event()

        def read() -> None:
            while not done.is_set():
                for node in tree.iter_nodes():
                    if node.is_expanded:
                        observed.append((node.index, len(node.children)))

        reader = threading.Thread(target=read)
        reader.start()
        try:
            while tree.expand_step() is not None:
                pass
        finally:
            done.set()
            reader.join(timeout=10)

        for index, count in observed:
            assert count == len(tree.node(index).children)

    def test_racing_expanders_publish_once(self) -> None:
        tree = SearchTree(STARTING_FEN)
        barrier = threading.Barrier(4)
        results: list[bool] = []
        lock = threading.Lock()

        def expand() -> None:
            barrier.wait()
            outcome = tree.expand(tree.root)
            with lock:
                results.append(outcome)

        threads = [threading.Thread(target=expand) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10)

        assert results.count(True) == 1
        assert tree.node_count == 21
        assert all(isinstance(child, Node) for child in tree.root.children)
