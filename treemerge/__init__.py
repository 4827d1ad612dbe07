"""treemerge - summarize trees by merging structurally similar siblings."""

from treemerge.config import TreemergeConfig, load_config
from treemerge.directory import FsNode, open_directory
from treemerge.summary import TreeSummarizer
from treemerge.tree import (
    Grouper,
    GroupPredicateHasher,
    HashApproach,
    Merger,
    NodeMerge,
    NodeSubMerge,
    StatisticsCalculator,
    TextMergeOutputBuilder,
    TreeNode,
)

__version__ = "0.1.0"

__all__ = [
    "FsNode",
    "GroupPredicateHasher",
    "Grouper",
    "HashApproach",
    "Merger",
    "NodeMerge",
    "NodeSubMerge",
    "StatisticsCalculator",
    "TextMergeOutputBuilder",
    "TreeNode",
    "TreeSummarizer",
    "TreemergeConfig",
    "load_config",
    "open_directory",
]
