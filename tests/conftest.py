"""Shared test fixtures for treemerge."""

import pytest

from treemerge.config import TreemergeConfig, create_classifier_set
from treemerge.tree import (
    GroupPredicateHasher,
    Grouper,
    Merger,
    StatisticsCalculator,
    TreeNode,
)


def _branch(name: str, sub_name: str, image_count: int) -> TreeNode:
    """A directory holding one archive and a subdirectory of images plus one text file."""
    sub_children = [TreeNode("image.png") for _ in range(image_count)] + [TreeNode("text.txt")]
    return TreeNode(name, [TreeNode("zip.zip"), TreeNode(sub_name, sub_children)])


@pytest.fixture
def sample_config():
    return TreemergeConfig()


@pytest.fixture
def classifier_set(sample_config):
    """ARCHIVE, IMAGE, TEXT, DIRECTORY, OTHER; IMAGE uses none/one/multiple."""
    return create_classifier_set(sample_config)


@pytest.fixture
def classifiers(classifier_set):
    """Configured classifiers keyed by name."""
    return {c.name: c for c in classifier_set.classifiers}


@pytest.fixture
def grouper(classifier_set):
    return Grouper(classifier_set.classifiers)


@pytest.fixture
def hasher(grouper, classifier_set):
    return GroupPredicateHasher(grouper, classifier_set.approaches)


@pytest.fixture
def merger(hasher):
    return Merger(hasher)


@pytest.fixture
def stats_calculator(grouper):
    return StatisticsCalculator(grouper)


@pytest.fixture
def none_one_multiple_tree():
    """Root whose directories differ by holding zero to five images."""
    return TreeNode("root", [
        _branch("dir A", "dir AA", 0),
        _branch("dir B1", "dir BA", 0),
        _branch("dir B2", "dir BA", 0),
        _branch("dir C", "dir CA", 1),
        _branch("dir D", "dir DA", 1),
        _branch("dir E", "dir EA", 2),
        _branch("dir F", "dir FA", 3),
        _branch("dir G", "dir GA", 4),
        _branch("dir H", "dir HA", 5),
    ])


@pytest.fixture
def twin_directories():
    """Two directories with one archive and a subdirectory of two images and one text."""
    return TreeNode("root", [_branch("dir A", "dir AA", 2), _branch("dir B", "dir BB", 2)])
