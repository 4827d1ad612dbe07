"""Structural fingerprints for nodes and groups.

A node's fingerprint is derived from the fingerprints of its groups, and a
group's fingerprint from its classifier and (depending on the configured
:class:`HashApproach`) the fingerprints of its members. Nodes and groups with
equal fingerprints are considered equivalent when merging.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Mapping, Sequence
from enum import Enum
from itertools import groupby

from treemerge.tree.classifiers import Classifier
from treemerge.tree.fingerprints import array_hash
from treemerge.tree.grouping import Group, Grouper
from treemerge.tree.identity import IdentityDict
from treemerge.tree.nodes import ChildableNode

logger = logging.getLogger(__name__)

# Fingerprint of nodes without structural information: leaves and parents
# whose children produced no groups.
NO_STRUCTURE_HASH = array_hash(())

NodeHashFilter = Callable[[int, Sequence[ChildableNode]], bool]


class HashApproach(str, Enum):
    """How much of a group's content contributes to its fingerprint.

    Consider ``dir1`` holding two txt files and ``dir2`` holding one:

    * ``EXACT_COUNT``: the txt groups differ (2 vs 1), so do the dirs.
    * ``DIFFERENCIATE_NONE_ONE_MULTIPLE``: "one" vs "multiple" still differ.
    * ``GROUP_EXISTENCE``: both groups exist, so they are equal.
    * ``PREDICATE_ONLY``: the group's content is ignored entirely.
    """

    PREDICATE_ONLY = "predicate_only"
    GROUP_EXISTENCE = "group_existence"
    DIFFERENCIATE_NONE_ONE_MULTIPLE = "differenciate_none_one_multiple"
    EXACT_COUNT = "exact_count"


class HashConsistencyError(RuntimeError):
    """Internal invariant of a hash reduction was violated."""


class UnknownHashApproachError(RuntimeError):
    """A group was configured with a value that is not a HashApproach."""

    def __init__(self, approach: object) -> None:
        self.approach = approach
        super().__init__(f"Unknown hash approach: {approach!r}")


def reduce_duplicates_to(hashes: Sequence[int], duplicate_max: int) -> list[int]:
    """Keep at most *duplicate_max* copies of each run of equal values.

    *hashes* is expected to be sorted, so runs hold all copies of a value.
    Relative order is preserved.
    """
    expected_length = sum(min(len(list(run)), duplicate_max) for _, run in groupby(hashes))
    reduced: list[int] = []
    previous: int | None = None
    run_length = 0
    for value in hashes:
        run_length = run_length + 1 if value == previous else 1
        if run_length <= duplicate_max:
            reduced.append(value)
        previous = value
    if len(reduced) != expected_length:
        raise HashConsistencyError(f"reduced to {len(reduced)} values, expected {expected_length}")
    return reduced


class Hasher(ABC):
    """Calculates fingerprints and keeps them for later retrieval.

    Besides the node -> fingerprint and group -> fingerprint caches, the
    instance keeps reverse indices from a fingerprint to every node and
    group it was calculated for. Nothing is ever evicted.

    Cyclic trees are not supported; hashing one recurses without end.
    """

    def __init__(self, grouper: Grouper) -> None:
        self.grouper = grouper
        self._node_hashes: IdentityDict[ChildableNode, int] = IdentityDict()
        self._group_hashes: IdentityDict[Group, int] = IdentityDict()
        self._nodes_by_hash: dict[int, list[ChildableNode]] = {}
        self._groups_by_hash: dict[int, list[Group]] = {}

    def get_hash(self, node: ChildableNode) -> int:
        """Fingerprint of *node*, calculated on first request."""
        cached = self._node_hashes.get(node)
        if cached is not None:
            return cached
        # calculate outside of the store step, the calculation re-enters
        # this method for the members of each group
        node_hash = self._calculate_node_hash(node)
        if node not in self._node_hashes:
            self._node_hashes[node] = node_hash
            self._nodes_by_hash.setdefault(node_hash, []).append(node)
            logger.debug("Hashed %s -> %d", node.name, node_hash)
        return self._node_hashes[node]

    def get_group_hash(self, group: Group) -> int:
        """Fingerprint of *group*, calculated on first request."""
        cached = self._group_hashes.get(group)
        if cached is not None:
            return cached
        group_hash = self._calculate_group_hash(group)
        if group not in self._group_hashes:
            self._group_hashes[group] = group_hash
            self._groups_by_hash.setdefault(group_hash, []).append(group)
        return self._group_hashes[group]

    def get_nodes(self, fingerprint: int) -> list[ChildableNode]:
        """Nodes known to have *fingerprint* (i.e. hashed by this instance)."""
        return list(self._nodes_by_hash.get(fingerprint, ()))

    def get_groups(self, fingerprint: int) -> list[Group]:
        """Groups known to have *fingerprint*."""
        return list(self._groups_by_hash.get(fingerprint, ()))

    def get_hash_to_node_mapping(
        self, filters: Iterable[NodeHashFilter] = ()
    ) -> dict[int, list[ChildableNode]]:
        """Reverse index entries passing every filter in *filters*.

        Each filter is called with the fingerprint and the nodes sharing it.
        """
        filters = tuple(filters)
        return {
            fingerprint: list(nodes)
            for fingerprint, nodes in self._nodes_by_hash.items()
            if all(f(fingerprint, nodes) for f in filters)
        }

    def _calculate_node_hash(self, node: ChildableNode) -> int:
        """Combine the fingerprints of the node's groups, in group order.

        Two nodes are only considered equal if their groups are; a rule like
        "any node with three groups" can't be expressed this way.
        """
        groups = self.grouper.get_groups(node) or ()
        return array_hash([self.get_group_hash(group) for group in groups])

    @abstractmethod
    def _calculate_group_hash(self, group: Group) -> int: ...


class GroupPredicateHasher(Hasher):
    """Hashes a group from its classifier and, per approach, its members.

    Classifiers without a configured approach use ``EXACT_COUNT``. With
    ``PREDICATE_ONLY`` on a classifier matching every directory, directory
    contents are ignored; with the other approaches the members are hashed
    recursively and their fingerprints feed into the group's.
    """

    def __init__(
        self,
        grouper: Grouper,
        approaches: Mapping[Classifier, HashApproach] | None = None,
        duplicate_max: int = 2,
    ) -> None:
        super().__init__(grouper)
        self.approaches: dict[Classifier, HashApproach] = dict(approaches or {})
        self.duplicate_max = duplicate_max

    def _calculate_group_hash(self, group: Group) -> int:
        approach = self.approaches.get(group.classifier, HashApproach.EXACT_COUNT)
        classifier_hash = group.classifier.fingerprint
        if approach == HashApproach.PREDICATE_ONLY:
            return classifier_hash

        member_hashes = sorted(self.get_hash(node) for node in group.nodes)
        if not member_hashes:
            return classifier_hash

        if approach == HashApproach.GROUP_EXISTENCE:
            reduced = list(dict.fromkeys(member_hashes))
        elif approach == HashApproach.DIFFERENCIATE_NONE_ONE_MULTIPLE:
            reduced = reduce_duplicates_to(member_hashes, self.duplicate_max)
        elif approach == HashApproach.EXACT_COUNT:
            reduced = member_hashes
        else:
            raise UnknownHashApproachError(approach)

        return array_hash((classifier_hash, array_hash(reduced)))
