"""Tests for the background tree expander."""

from __future__ import annotations

import time

import pytest

from chesstree.core.notation import STARTING_FEN
from chesstree.tree.expander import ExpansionSettings, TreeExpander
from chesstree.tree.node import Node
from chesstree.tree.search_tree import SearchTree


def _wait_until(predicate, timeout: float = 10.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


class TestExpansionSettings:
    def test_defaults(self) -> None:
        settings = ExpansionSettings()
        assert settings.max_depth == 2
        assert settings.max_steps is None

    @pytest.mark.parametrize(
        "kwargs",
        [{"max_depth": 0}, {"idle_wait_s": -1.0}, {"max_steps": -1}],
    )
    def test_rejects_invalid(self, kwargs: dict[str, float]) -> None:
        with pytest.raises(ValueError):
            ExpansionSettings(**kwargs)


class TestRun:
    def test_step_limit(self) -> None:
        tree = SearchTree(STARTING_FEN)
        expander = TreeExpander(tree, ExpansionSettings(max_steps=3))
        assert expander.run() == 3
        assert expander.steps == 3
        assert tree.node_count == 1 + 20 + 20 + 20

    def test_reports_expanded_nodes_in_order(self) -> None:
        tree = SearchTree(STARTING_FEN)
        seen: list[Node] = []
        TreeExpander(tree, ExpansionSettings(max_steps=3)).run(on_expanded=seen.append)
        assert [node.index for node in seen] == [0, 1, 2]

    def test_cancel_check_is_polled_every_step(self) -> None:
        tree = SearchTree(STARTING_FEN)
        expander = TreeExpander(tree)
        steps = expander.run(is_cancelled=lambda: tree.root.is_expanded)
        assert steps == 1

    def test_request_stop_before_run(self) -> None:
        expander = TreeExpander(SearchTree(STARTING_FEN))
        expander.request_stop()
        assert expander.run() == 0


class TestBackgroundThread:
    def test_grows_tree_until_stopped(self) -> None:
        tree = SearchTree(STARTING_FEN)
        expander = TreeExpander(tree, ExpansionSettings(idle_wait_s=0.01))
        expander.start()
        try:
            assert _wait_until(lambda: tree.node_count == 421)
            assert expander.is_running
        finally:
            expander.stop(timeout=5)
        assert not expander.is_running
        assert expander.steps == 21

    def test_stop_wakes_idle_loop(self) -> None:
        tree = SearchTree(STARTING_FEN)
        expander = TreeExpander(tree, ExpansionSettings(max_depth=1, idle_wait_s=30))
        expander.start()
        assert _wait_until(lambda: tree.root.is_expanded)
        started = time.monotonic()
        expander.stop(timeout=5)
        assert not expander.is_running
        assert time.monotonic() - started < 5

    def test_start_twice_raises(self) -> None:
        expander = TreeExpander(
            SearchTree(STARTING_FEN), ExpansionSettings(idle_wait_s=0.01)
        )
        expander.start()
        try:
            with pytest.raises(RuntimeError):
                expander.start()
        finally:
            expander.stop(timeout=5)

    def test_restart_after_stop(self) -> None:
        tree = SearchTree(STARTING_FEN)
        expander = TreeExpander(tree, ExpansionSettings(idle_wait_s=0.01))
        expander.start()
        expander.stop(timeout=5)
        expander.start()
        try:
            assert _wait_until(lambda: tree.node_count == 421)
        finally:
            expander.stop(timeout=5)
