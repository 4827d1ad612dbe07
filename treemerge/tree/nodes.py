"""Node contract consumed by the grouping, hashing and merging stages."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator, Sequence
from typing import Protocol, runtime_checkable

NodeFilter = Callable[["ChildableNode"], bool]


@runtime_checkable
class ChildableNode(Protocol):
    """A node that may or may not be able to have children.

    ``get_children()`` returns ``None`` when the node is not a kind of node
    that can have children at all (a file), and a possibly empty list when it
    can (a directory, empty or not).

    Nodes are used as cache keys by identity. Suppliers must never produce a
    cyclic tree: grouping, hashing and merging recurse without cycle checks.
    """

    name: str

    def get_children(self) -> list[ChildableNode] | None: ...


def _accept_all(node: ChildableNode) -> bool:
    return True


class AbstractChildableNode(ABC):
    """Base class deriving the convenience accessors from ``get_children``."""

    name: str

    @abstractmethod
    def get_children(self) -> list[ChildableNode] | None: ...

    @property
    def is_leaf(self) -> bool:
        return self.get_children() is None

    @property
    def children_count(self) -> int:
        """Number of children; 0 if the node can't have any."""
        children = self.get_children()
        return 0 if children is None else len(children)

    def iter_children(self, node_filter: NodeFilter | None = None) -> Iterator[ChildableNode]:
        """Iterate the children passing *node_filter*; leaves yield nothing."""
        for child in self.get_children() or ():
            if node_filter is None or node_filter(child):
                yield child

    def filter_children(self, node_filter: NodeFilter) -> list[ChildableNode] | None:
        """Direct children matching *node_filter*, or ``None`` for leaves."""
        if self.is_leaf:
            return None
        return list(self.iter_children(node_filter))

    def filtered(self, node_filter: NodeFilter, recursive: bool = False) -> ChildFilteringNode:
        """Wrap this node so that its children are filtered by *node_filter*."""
        return ChildFilteringNode(self, node_filter, recursive)

    def __str__(self) -> str:
        return self.name


class TreeNode(AbstractChildableNode):
    """In-memory node: ``children=None`` is a leaf, a sequence is a parent."""

    def __init__(self, name: str, children: Sequence[ChildableNode] | None = None) -> None:
        self.name = name
        self._children = None if children is None else list(children)

    def get_children(self) -> list[ChildableNode] | None:
        return self._children

    def __repr__(self) -> str:
        kind = "leaf" if self._children is None else f"{len(self._children)} children"
        return f"TreeNode({self.name!r}, {kind})"


class ChildFilteringNode(AbstractChildableNode):
    """View on another node that hides children not matching a filter.

    When a child is removed by the filter, its whole subtree is removed with
    it. With ``recursive=False`` only the direct children are filtered; the
    wrapped grandchildren are passed through unchanged.

    The wrapped children are created once and reused, so the same wrapper
    instances are seen by every cache keyed on node identity.
    """

    def __init__(self, base: ChildableNode, node_filter: NodeFilter, recursive: bool = False) -> None:
        self.base = base
        self.name = base.name
        self.node_filter = node_filter
        self.recursive = recursive
        self._children: list[ChildableNode] | None = None
        self._resolved = False

    def get_children(self) -> list[ChildableNode] | None:
        if not self._resolved:
            base_children = self.base.get_children()
            if base_children is not None:
                child_filter = self.node_filter if self.recursive else _accept_all
                self._children = [
                    ChildFilteringNode(child, child_filter, self.recursive)
                    for child in base_children
                    if self.node_filter(child)
                ]
            self._resolved = True
        return self._children

    def __repr__(self) -> str:
        return f"ChildFilteringNode({self.base!r}, recursive={self.recursive})"
