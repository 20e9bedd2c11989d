"""Search tree package: node arena, background expander and Qt worker bridge."""

from chesstree.tree.expander import ExpansionSettings, TreeExpander
from chesstree.tree.node import Node
from chesstree.tree.search_tree import SearchTree

__all__ = [
    "ExpansionSettings",
    "Node",
    "SearchTree",
    "TreeExpander",
]
