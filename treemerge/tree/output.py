"""Conversion of merge trees into other representations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from functools import cmp_to_key

from treemerge.tree.classifiers import Classifier
from treemerge.tree.grouping import Group, Grouper, GroupingStats, StatisticsCalculator
from treemerge.tree.merging import NodeMerge


class AbstractMergeOutputBuilder(ABC):
    """Walks merges depth-first and emits them through formatting hooks.

    The traversal and the data selection are fixed here; subclasses only
    decide how names, groups, statistics and separators look.

    *classifier_naming* maps each classifier to its display name. Its order
    is significant: statistics are emitted in that order, and it decides
    the order of the groups shown for a merge.
    """

    def __init__(
        self,
        classifier_naming: Mapping[Classifier, str],
        stats_calculator: StatisticsCalculator,
        grouper: Grouper,
    ) -> None:
        self.classifier_naming = dict(classifier_naming)
        self.stats_calculator = stats_calculator
        self.grouper = grouper
        self._added_merges = 0

    def add_merge(self, merge: NodeMerge, count: int) -> None:
        """Add a top-level merge; *count* is the number of top-level merges."""
        self._added_merges += 1
        merge_name = self.get_merge_name(merge, self._added_merges, count, 0)
        self._add_merge(merge, 0, merge_name)
        self._add_merge_separator()

    def add_merges(self, merges: Iterable[NodeMerge]) -> None:
        """Add all *merges* as top-level merges, in their natural order.

        Each call starts a new listing, numbered from 1 again.
        """
        ordered = sorted(merges)
        self._added_merges = 0
        for merge in ordered:
            self.add_merge(merge, len(ordered))

    def get_merge_name(self, merge: NodeMerge, index: int, count: int, depth: int) -> str:
        return f"M{depth}-{index}/{count}"

    def display_name(self, classifier: Classifier) -> str:
        return self.classifier_naming.get(classifier, classifier.name)

    def _add_merge(self, merge: NodeMerge, depth: int, merge_name: str) -> None:
        self._add_merge_name(merge_name, depth)
        groups = sorted(self.grouper.group_nodes(merge.merged_nodes), key=cmp_to_key(self._compare_groups))
        self._add_merge_grouping(groups)

        non_leaves = merge.non_leaves
        child_count = sum(submerge.merged_nodes_count for submerge in merge.submerges)
        self._add_merge_children_infos(len(non_leaves), child_count, self.stats_calculator.get_stats(non_leaves))

        # childless parents only show up in non_leaves, not as a line of their own
        submerges = sorted(s for s in merge.submerges if s.merged_nodes_count > 0)
        depth += 1
        for index, submerge in enumerate(submerges, start=1):
            self._add_merge_separator()
            self._add_merge(submerge, depth, self.get_merge_name(submerge, index, len(submerges), depth))

    def _compare_groups(self, a: Group, b: Group) -> int:
        # the group whose classifier comes first in the naming sorts last
        for classifier in self.classifier_naming:
            if classifier is a.classifier:
                return 1
            if classifier is b.classifier:
                return -1
        return 0

    def _add_merge_grouping(self, groups: Iterable[Group]) -> None:
        for group in groups:
            self._add_merge_group_delimiter()
            self._add_merge_group(group.size, self.display_name(group.classifier))

    def _add_merge_children_infos(
        self, non_leaf_count: int, child_count: int, stats: Mapping[Classifier, GroupingStats]
    ) -> None:
        if non_leaf_count > 0 and child_count > 0:
            if stats:
                self._add_stats(stats)
            self._add_in_merge_delimiter()
            self._add_merge_child_info(child_count, non_leaf_count)

    def _add_stats(self, stats: Mapping[Classifier, GroupingStats]) -> None:
        self._add_children_stats_header()
        # iterate the naming rather than the stats for a predictable order
        for classifier, name in self.classifier_naming.items():
            stat = stats.get(classifier)
            if stat is not None:
                self._add_stat(name, stat.minimal_count, stat.maximal_count, stat)

    @abstractmethod
    def _add_merge_name(self, merge_name: str, depth: int) -> None: ...

    @abstractmethod
    def _add_merge_group_delimiter(self) -> None: ...

    @abstractmethod
    def _add_merge_group(self, size: int, name: str) -> None: ...

    @abstractmethod
    def _add_children_stats_header(self) -> None: ...

    @abstractmethod
    def _add_stat(self, classifier_name: str, minimum: int, maximum: int, stat: GroupingStats) -> None: ...

    @abstractmethod
    def _add_in_merge_delimiter(self) -> None: ...

    @abstractmethod
    def _add_merge_child_info(self, child_count: int, non_leaf_count: int) -> None: ...

    @abstractmethod
    def _add_merge_separator(self) -> None: ...


class TextMergeOutputBuilder(AbstractMergeOutputBuilder):
    """Renders merges as indented bullet lines, one merge per line."""

    bullet = "• "

    def __init__(
        self,
        classifier_naming: Mapping[Classifier, str],
        stats_calculator: StatisticsCalculator,
        grouper: Grouper,
        indentation: int = 2,
    ) -> None:
        super().__init__(classifier_naming, stats_calculator, grouper)
        self.indentation = indentation
        self._parts: list[str] = []

    def build(self) -> str:
        """Text added so far; the builder is not reset."""
        return "".join(self._parts)

    def _add_merge_name(self, merge_name: str, depth: int) -> None:
        self._parts.append(" " * (depth * self.indentation) + self.bullet + merge_name)

    def _add_merge_group_delimiter(self) -> None:
        self._parts.append(", ")

    def _add_merge_group(self, size: int, name: str) -> None:
        self._parts.append(f"{size}×{name}")

    def _add_children_stats_header(self) -> None:
        self._parts.append(" | Stats for children:")

    def _add_stat(self, classifier_name: str, minimum: int, maximum: int, stat: GroupingStats) -> None:
        self._parts.append(f" ({classifier_name}:⟦{minimum},{maximum}⟧")
        if minimum != maximum:
            self._parts.append(",")
            self._add_average(stat.child_sum, stat.group_count, stat.average)
        self._parts.append(")")

    def _add_average(self, child_sum: int, group_count: int, average: float) -> None:
        self._parts.append(f"x̄={child_sum}÷{group_count}={average}")

    def _add_in_merge_delimiter(self) -> None:
        self._parts.append("; ")

    def _add_merge_child_info(self, child_count: int, non_leaf_count: int) -> None:
        self._parts.append(f"{child_count} children in the {non_leaf_count} non-leaf nodes were merged as follows:")

    def _add_merge_separator(self) -> None:
        self._parts.append("\n")
