"""Tests for hash primitives, Hasher caching and GroupPredicateHasher approaches."""

from __future__ import annotations

import pytest

from treemerge.tree import (
    NO_STRUCTURE_HASH,
    GroupPredicateHasher,
    Grouper,
    HashApproach,
    Merger,
    TreeNode,
    UnknownHashApproachError,
    reduce_duplicates_to,
)
from treemerge.tree.fingerprints import array_hash, string_hash, to_int32


# ── Hash primitives ──────────────────────────────────────────────────


def test_to_int32_wraps():
    assert to_int32(2**31) == -(2**31)
    assert to_int32(2**32 + 5) == 5
    assert to_int32(-1) == -1


def test_array_hash_known_values():
    assert array_hash([]) == 1
    assert array_hash([1]) == 32
    assert array_hash([1, 2]) == 31 * 32 + 2


def test_array_hash_is_order_sensitive():
    assert array_hash([1, 2]) != array_hash([2, 1])


def test_array_hash_stays_in_32_bits():
    h = array_hash([2**31 - 1] * 10)
    assert -(2**31) <= h < 2**31


def test_string_hash_known_values():
    assert string_hash("") == 0
    assert string_hash("a") == 97
    assert string_hash("hello") == 99162322
    assert string_hash("polygenelubricants") == -(2**31)


def test_no_structure_hash_is_empty_array_hash():
    assert NO_STRUCTURE_HASH == array_hash(())


# ── reduce_duplicates_to ─────────────────────────────────────────────


@pytest.mark.parametrize(
    ("hashes", "duplicate_max", "expected"),
    [
        ([77], 2, [77]),
        ([77, 77], 2, [77, 77]),
        ([77, 77], 1, [77]),
        ([77, 88, 88], 1, [77, 88]),
        ([1, 1, 1, 2, 3, 3, 3, 3], 2, [1, 1, 2, 3, 3]),
        ([], 2, []),
    ],
)
def test_reduce_duplicates_to(hashes, duplicate_max, expected):
    assert reduce_duplicates_to(hashes, duplicate_max) == expected


def test_reduce_duplicates_is_idempotent():
    hashes = [-5, -5, -5, 0, 7, 7, 7, 7, 9]
    once = reduce_duplicates_to(hashes, 2)
    assert reduce_duplicates_to(once, 2) == once


def test_reduce_duplicates_handles_max_int_first():
    """The largest 32-bit value as first element is kept like any other."""
    assert reduce_duplicates_to([2**31 - 1, 2**31 - 1, 2**31 - 1], 2) == [2**31 - 1, 2**31 - 1]


# ── Hasher basics ────────────────────────────────────────────────────


def test_leaf_hash_is_no_structure_seed(hasher):
    assert hasher.get_hash(TreeNode("file.txt")) == NO_STRUCTURE_HASH


def test_empty_parent_hash_is_no_structure_seed(hasher):
    assert hasher.get_hash(TreeNode("empty", [])) == NO_STRUCTURE_HASH


def test_hash_is_deterministic(hasher, none_one_multiple_tree):
    first = [hasher.get_hash(n) for n in none_one_multiple_tree.get_children()]
    second = [hasher.get_hash(n) for n in none_one_multiple_tree.get_children()]
    assert first == second


def test_equivalent_trees_hash_equal(hasher):
    """Separately built trees with the same structure get the same fingerprint."""
    def build():
        return TreeNode("d", [TreeNode("a.zip"), TreeNode("s", [TreeNode("x.png"), TreeNode("y.txt")])])

    assert hasher.get_hash(build()) == hasher.get_hash(build())


def test_equivalent_trees_hash_equal_across_hashers(classifier_set):
    """Fingerprints don't depend on the instance that calculated them."""
    def fingerprint():
        hasher = GroupPredicateHasher(Grouper(classifier_set.classifiers), classifier_set.approaches)
        return hasher.get_hash(TreeNode("d", [TreeNode("a.txt"), TreeNode("b.txt")]))

    assert fingerprint() == fingerprint()


def test_exact_count_distinguishes_counts(hasher):
    two = TreeNode("two", [TreeNode("a.txt"), TreeNode("b.txt")])
    three = TreeNode("three", [TreeNode("a.txt"), TreeNode("b.txt"), TreeNode("c.txt")])
    assert hasher.get_hash(two) != hasher.get_hash(three)


def test_group_order_does_not_matter(hasher):
    """Groups are combined in classifier priority order, not sibling order."""
    a = TreeNode("a", [TreeNode("x.txt"), TreeNode("y.zip")])
    b = TreeNode("b", [TreeNode("y.zip"), TreeNode("x.txt")])
    assert hasher.get_hash(a) == hasher.get_hash(b)


def test_node_hash_combines_group_hashes(hasher, grouper):
    node = TreeNode("d", [TreeNode("a.txt"), TreeNode("b.zip")])
    group_hashes = [hasher.get_group_hash(g) for g in grouper.get_groups(node)]
    assert hasher.get_hash(node) == array_hash(group_hashes)


def test_exact_count_group_hash(hasher, grouper, classifiers):
    node = TreeNode("d", [TreeNode("a.txt"), TreeNode("b.txt")])
    (group,) = grouper.get_groups(node)
    expected = array_hash([
        classifiers["TEXT"].fingerprint,
        array_hash([NO_STRUCTURE_HASH, NO_STRUCTURE_HASH]),
    ])
    assert hasher.get_group_hash(group) == expected


# ── Reverse index ────────────────────────────────────────────────────


def test_node_registered_once(hasher):
    node = TreeNode("d", [TreeNode("a.txt")])
    h = hasher.get_hash(node)
    hasher.get_hash(node)
    assert [n for n in hasher.get_nodes(h) if n is node] == [node]


def test_group_reverse_index(hasher, grouper):
    node = TreeNode("d", [TreeNode("a.txt")])
    hasher.get_hash(node)
    (group,) = grouper.get_groups(node)
    assert group in hasher.get_groups(hasher.get_group_hash(group))


def test_unknown_fingerprint_has_no_entries(hasher):
    assert hasher.get_nodes(123456) == []
    assert hasher.get_groups(123456) == []


def test_hash_to_node_mapping_with_filters(hasher, merger, none_one_multiple_tree):
    """Only fingerprints shared by four nodes, one of them a parent."""
    merger.separate_and_merge(none_one_multiple_tree.get_children())
    mapping = hasher.get_hash_to_node_mapping([
        lambda _, nodes: len(nodes) >= 4,
        lambda _, nodes: any(n.get_children() is not None for n in nodes),
    ])
    names = sorted(n.name for nodes in mapping.values() for n in nodes)
    assert names == ["dir E", "dir EA", "dir F", "dir FA", "dir G", "dir GA", "dir H", "dir HA"]


def test_hash_to_node_mapping_without_filters(hasher):
    leaf = TreeNode("file")
    hasher.get_hash(leaf)
    assert leaf in hasher.get_hash_to_node_mapping()[NO_STRUCTURE_HASH]


# ── Approaches ───────────────────────────────────────────────────────


def _hasher_with(classifier_set, approach):
    grouper = Grouper(classifier_set.classifiers)
    return GroupPredicateHasher(grouper, {c: approach for c in classifier_set.classifiers})


def test_predicate_only_ignores_content(classifier_set, classifiers):
    hasher = _hasher_with(classifier_set, HashApproach.PREDICATE_ONLY)
    one = TreeNode("one", [TreeNode("a.txt")])
    many = TreeNode("many", [TreeNode(f"{i}.txt") for i in range(5)])
    assert hasher.get_hash(one) == hasher.get_hash(many)
    (group,) = hasher.grouper.get_groups(one)
    assert hasher.get_group_hash(group) == classifiers["TEXT"].fingerprint


def test_group_existence_collapses_counts(classifier_set):
    hasher = _hasher_with(classifier_set, HashApproach.GROUP_EXISTENCE)
    one = TreeNode("one", [TreeNode("a.txt")])
    many = TreeNode("many", [TreeNode(f"{i}.txt") for i in range(5)])
    assert hasher.get_hash(one) == hasher.get_hash(many)


def test_none_one_multiple_collapses_multiples_only(classifier_set):
    hasher = _hasher_with(classifier_set, HashApproach.DIFFERENCIATE_NONE_ONE_MULTIPLE)
    one = TreeNode("one", [TreeNode("a.txt")])
    two = TreeNode("two", [TreeNode("a.txt"), TreeNode("b.txt")])
    five = TreeNode("five", [TreeNode(f"{i}.txt") for i in range(5)])
    assert hasher.get_hash(one) != hasher.get_hash(two)
    assert hasher.get_hash(two) == hasher.get_hash(five)


def test_missing_approach_defaults_to_exact_count(classifier_set):
    hasher = GroupPredicateHasher(Grouper(classifier_set.classifiers))
    two = TreeNode("two", [TreeNode("a.png"), TreeNode("b.png")])
    three = TreeNode("three", [TreeNode("a.png"), TreeNode("b.png"), TreeNode("c.png")])
    assert hasher.get_hash(two) != hasher.get_hash(three)


def test_approaches_coarsen_monotonically(classifier_set, none_one_multiple_tree):
    """Coarser approaches never separate more top-level nodes than finer ones."""
    counts = []
    for approach in (
        HashApproach.PREDICATE_ONLY,
        HashApproach.GROUP_EXISTENCE,
        HashApproach.DIFFERENCIATE_NONE_ONE_MULTIPLE,
        HashApproach.EXACT_COUNT,
    ):
        merger = Merger(_hasher_with(classifier_set, approach))
        counts.append(len(merger.separate_and_merge(none_one_multiple_tree.get_children())))
    assert counts == [1, 2, 3, 6]
    assert counts == sorted(counts)


def test_unknown_approach_is_fatal(classifier_set, classifiers):
    grouper = Grouper(classifier_set.classifiers)
    hasher = GroupPredicateHasher(grouper, {classifiers["TEXT"]: "bogus"})
    with pytest.raises(UnknownHashApproachError):
        hasher.get_hash(TreeNode("d", [TreeNode("a.txt")]))


def test_approach_accepts_enum_values(classifier_set, classifiers):
    """Plain string values of the enum behave like the members."""
    grouper = Grouper(classifier_set.classifiers)
    by_value = GroupPredicateHasher(grouper, {classifiers["TEXT"]: "predicate_only"})
    by_member = GroupPredicateHasher(Grouper(classifier_set.classifiers), {classifiers["TEXT"]: HashApproach.PREDICATE_ONLY})
    node = TreeNode("d", [TreeNode("a.txt"), TreeNode("b.txt")])
    assert by_value.get_hash(node) == by_member.get_hash(node)
