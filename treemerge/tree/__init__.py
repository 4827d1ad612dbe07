"""Grouping, fingerprinting and merging of tree-shaped data."""

from treemerge.tree.classifiers import (
    CatchAllMatcher,
    Classifier,
    HasChildrenMatcher,
    NameMatcher,
    SuffixMatcher,
)
from treemerge.tree.grouping import Group, Grouper, GroupingStats, StatisticsCalculator
from treemerge.tree.hashing import (
    NO_STRUCTURE_HASH,
    GroupPredicateHasher,
    HashApproach,
    HashConsistencyError,
    Hasher,
    UnknownHashApproachError,
    reduce_duplicates_to,
)
from treemerge.tree.merging import Merger, NodeMerge, NodeSubMerge
from treemerge.tree.nodes import AbstractChildableNode, ChildableNode, ChildFilteringNode, TreeNode
from treemerge.tree.output import AbstractMergeOutputBuilder, TextMergeOutputBuilder

__all__ = [
    "AbstractChildableNode",
    "AbstractMergeOutputBuilder",
    "CatchAllMatcher",
    "ChildFilteringNode",
    "ChildableNode",
    "Classifier",
    "Group",
    "GroupPredicateHasher",
    "Grouper",
    "GroupingStats",
    "HasChildrenMatcher",
    "HashApproach",
    "HashConsistencyError",
    "Hasher",
    "Merger",
    "NO_STRUCTURE_HASH",
    "NameMatcher",
    "NodeMerge",
    "NodeSubMerge",
    "StatisticsCalculator",
    "SuffixMatcher",
    "TextMergeOutputBuilder",
    "TreeNode",
    "UnknownHashApproachError",
    "reduce_duplicates_to",
]
