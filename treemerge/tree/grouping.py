"""Grouping of sibling nodes by classifier, plus per-classifier statistics.

Grouping is not the same as merging. Two directories that both contain
images and movies are grouped the same way (an image group and a movie
group each), but whether they are later merged depends on how the hasher
compares those groups, e.g. whether the number of images must match.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from treemerge.tree.classifiers import CatchAllMatcher, Classifier
from treemerge.tree.identity import IdentityDict
from treemerge.tree.nodes import ChildableNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class Group:
    """Sibling nodes that matched the same classifier, in sibling order."""

    classifier: Classifier
    nodes: tuple[ChildableNode, ...]

    @property
    def size(self) -> int:
        return len(self.nodes)

    def __lt__(self, other: Group) -> bool:
        return self.size < other.size


@dataclass
class GroupingStats:
    """Member counts of groups sharing one classifier across many parents."""

    minimal_count: int
    maximal_count: int
    child_sum: int = 0
    group_count: int = 0

    @classmethod
    def starting_with(cls, first_group_child_count: int) -> GroupingStats:
        """Seed min/max only; the count still has to be added."""
        return cls(minimal_count=first_group_child_count, maximal_count=first_group_child_count)

    @property
    def average(self) -> float:
        """Arithmetic mean of the added counts (NaN before any was added)."""
        if self.group_count == 0:
            return math.nan
        return self.child_sum / self.group_count

    def add_group_child_count(self, node_count: int) -> None:
        """Account for one more group holding *node_count* members."""
        self.maximal_count = max(self.maximal_count, node_count)
        self.minimal_count = min(self.minimal_count, node_count)
        self.child_sum += node_count
        self.group_count += 1


class Grouper:
    """Separates a node's direct children into groups using classifiers.

    Each child is placed in the group of the first classifier (in priority
    order) it matches. A child matching no classifier is silently dropped,
    so configurations should end with a :class:`CatchAllMatcher`.

    Groups are returned in classifier priority order. Results of
    :meth:`get_groups` are cached per parent identity for the lifetime of
    the instance.
    """

    def __init__(self, classifiers: Iterable[Classifier]) -> None:
        self.classifiers: tuple[Classifier, ...] = tuple(classifiers)
        names: set[str] = set()
        seen: set[int] = set()
        for classifier in self.classifiers:
            if id(classifier) in seen:
                raise ValueError(f"Classifier configured twice: {classifier!r}")
            if classifier.name in names:
                raise ValueError(f"Duplicate classifier name: {classifier.name!r}")
            seen.add(id(classifier))
            names.add(classifier.name)
        if not any(isinstance(c, CatchAllMatcher) for c in self.classifiers):
            logger.debug("No catch-all classifier configured; unmatched nodes will be dropped")
        self._groups_by_parent: IdentityDict[ChildableNode, tuple[Group, ...] | None] = IdentityDict()

    def get_groups(self, parent: ChildableNode) -> tuple[Group, ...] | None:
        """Grouped children of *parent*, or ``None`` if it can't have children."""
        if parent in self._groups_by_parent:
            return self._groups_by_parent[parent]
        children = parent.get_children()
        groups = None if children is None else self.group_nodes(children)
        self._groups_by_parent[parent] = groups
        return groups

    def group_nodes(self, nodes: Iterable[ChildableNode]) -> tuple[Group, ...]:
        """Group *nodes* (non-recursively, uncached), one group per classifier."""
        buckets: dict[Classifier, list[ChildableNode]] = {}
        for node in nodes:
            for classifier in self.classifiers:
                if classifier(node):
                    buckets.setdefault(classifier, []).append(node)
                    break
        return tuple(Group(c, tuple(buckets[c])) for c in self.classifiers if c in buckets)


class StatisticsCalculator:
    """Aggregates group sizes per classifier over several parent nodes.

    E.g. for two parents whose children all match one classifier, the first
    holding two children and the second four, the resulting stats for that
    classifier are min 2, max 4, sum 6 over 2 groups (average 3).
    """

    def __init__(self, grouper: Grouper) -> None:
        self.grouper = grouper

    def get_stats(self, non_leaf_nodes: Sequence[ChildableNode]) -> dict[Classifier, GroupingStats]:
        result: dict[Classifier, GroupingStats] = {}
        for parent in non_leaf_nodes:
            for group in self.grouper.get_groups(parent) or ():
                stats = result.get(group.classifier)
                if stats is None:
                    stats = result[group.classifier] = GroupingStats.starting_with(group.size)
                stats.add_group_child_count(group.size)
        return result
