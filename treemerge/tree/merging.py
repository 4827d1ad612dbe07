"""Merging of equivalent nodes into a summary tree."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from treemerge.tree.hashing import Hasher
from treemerge.tree.identity import unique_by_identity
from treemerge.tree.nodes import ChildableNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class NodeMerge:
    """Several nodes with the same fingerprint, merged together.

    Leaves are kept directly. Non-leaf nodes are represented through the
    submerges built from their children, each submerge remembering the
    non-leaf nodes it was built from.
    """

    leaves: tuple[ChildableNode, ...]
    submerges: tuple[NodeSubMerge, ...]

    @property
    def non_leaves(self) -> list[ChildableNode]:
        """Non-leaf nodes merged into this instance, without repetitions."""
        return unique_by_identity(parent for submerge in self.submerges for parent in submerge.parents)

    @property
    def merged_nodes(self) -> list[ChildableNode]:
        return [*self.leaves, *self.non_leaves]

    @property
    def merged_nodes_count(self) -> int:
        return len(self.merged_nodes)

    @property
    def leaves_count(self) -> int:
        return len(self.leaves)

    @property
    def submerge_count(self) -> int:
        return len(self.submerges)

    def sort_key(self) -> tuple[int, int, int]:
        # node count first, then submerge count, then more non-leaf structure
        return (self.merged_nodes_count, self.submerge_count, -self.leaves_count)

    def __lt__(self, other: NodeMerge) -> bool:
        return self.sort_key() < other.sort_key()


@dataclass(frozen=True, eq=False)
class NodeSubMerge(NodeMerge):
    """A merge of children of non-leaf nodes within an enclosing merge."""

    parents: tuple[ChildableNode, ...]


class Merger:
    """Separates nodes by fingerprint and merges each set recursively."""

    def __init__(self, hasher: Hasher) -> None:
        self.hasher = hasher

    def separate_and_merge(self, nodes: Iterable[ChildableNode]) -> list[NodeMerge]:
        """One :class:`NodeMerge` per distinct fingerprint among *nodes*.

        Together the returned merges hold every given node exactly once,
        either as a leaf or as a parent of one of their submerges.
        """
        merges: list[NodeMerge] = []
        for same_hash_nodes in self._group_by_hashes(nodes).values():
            leaves, submerges = self._split_into_leaves_and_submerges(same_hash_nodes)
            merges.append(NodeMerge(leaves=tuple(leaves), submerges=tuple(submerges)))
        logger.debug("Separated nodes into %d merges", len(merges))
        return merges

    def _create_submerge(self, nodes: Sequence[ChildableNode], parents: Sequence[ChildableNode]) -> NodeSubMerge:
        leaves, submerges = self._split_into_leaves_and_submerges(nodes)
        return NodeSubMerge(leaves=tuple(leaves), submerges=tuple(submerges), parents=tuple(parents))

    def _split_into_leaves_and_submerges(
        self, nodes: Sequence[ChildableNode]
    ) -> tuple[list[ChildableNode], list[NodeSubMerge]]:
        leaves: list[ChildableNode] = []
        # child fingerprint -> (parent, its children with that fingerprint)
        non_leaves: dict[int, list[tuple[ChildableNode, list[ChildableNode]]]] = {}
        childless: list[ChildableNode] = []

        for node in nodes:
            children = node.get_children()
            if children is None:
                leaves.append(node)
                continue
            if not children:
                childless.append(node)
                continue
            for child_hash, same_hash_children in self._group_by_hashes(children).items():
                non_leaves.setdefault(child_hash, []).append((node, same_hash_children))

        submerges: list[NodeSubMerge] = []
        for pairs in non_leaves.values():
            merged_parents = unique_by_identity(parent for parent, _ in pairs)
            merged_children = [child for _, children in pairs for child in children]
            submerges.append(self._create_submerge(merged_children, merged_parents))
        if childless:
            # parents without children still have to show up in the merge
            submerges.append(NodeSubMerge(leaves=(), submerges=(), parents=tuple(childless)))
        return leaves, submerges

    def _group_by_hashes(self, nodes: Iterable[ChildableNode]) -> dict[int, list[ChildableNode]]:
        """Nodes keyed by fingerprint, in first-seen order."""
        grouped: dict[int, list[ChildableNode]] = {}
        for node in nodes:
            grouped.setdefault(self.hasher.get_hash(node), []).append(node)
        return grouped
