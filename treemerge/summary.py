"""Wiring of grouper, hasher, merger and renderer into one summarizer."""

from __future__ import annotations

import logging

from treemerge.config import ClassifierSet, TreemergeConfig, create_classifier_set
from treemerge.tree.grouping import Grouper, StatisticsCalculator
from treemerge.tree.hashing import GroupPredicateHasher
from treemerge.tree.merging import Merger, NodeMerge
from treemerge.tree.nodes import ChildableNode
from treemerge.tree.output import TextMergeOutputBuilder

logger = logging.getLogger(__name__)


class TreeSummarizer:
    """Summarizes the children of a node into sorted merges and text.

    One instance shares its caches across calls, so it should be used for a
    single, unchanging tree.
    """

    def __init__(self, classifier_set: ClassifierSet, duplicate_max: int = 2, indentation: int = 2) -> None:
        self.classifier_set = classifier_set
        self.grouper = Grouper(classifier_set.classifiers)
        self.hasher = GroupPredicateHasher(self.grouper, classifier_set.approaches, duplicate_max=duplicate_max)
        self.merger = Merger(self.hasher)
        self.stats_calculator = StatisticsCalculator(self.grouper)
        self.indentation = indentation

    @classmethod
    def from_config(cls, config: TreemergeConfig) -> TreeSummarizer:
        return cls(
            create_classifier_set(config),
            duplicate_max=config.hashing.duplicate_max,
            indentation=config.output.indentation,
        )

    def merge_children(self, root: ChildableNode) -> list[NodeMerge]:
        """Sorted top-level merges of *root*'s children."""
        children = root.get_children()
        if children is None:
            raise ValueError(f"{root.name!r} can't have children")
        merges = sorted(self.merger.separate_and_merge(children))
        logger.info("Merged %d children of %s into %d merges", len(children), root.name, len(merges))
        return merges

    def render(self, merges: list[NodeMerge]) -> str:
        builder = TextMergeOutputBuilder(
            self.classifier_set.naming, self.stats_calculator, self.grouper, indentation=self.indentation
        )
        builder.add_merges(merges)
        return builder.build()

    def summarize(self, root: ChildableNode) -> str:
        return self.render(self.merge_children(root))
