"""Named classifiers used to sort sibling nodes into groups."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable

from treemerge.tree.fingerprints import string_hash
from treemerge.tree.nodes import ChildableNode


class Classifier(ABC):
    """A named, side-effect free rule deciding if a node belongs to a group.

    Classifiers compare and hash by identity: the same instance used twice
    is the same classifier, two instances are two classifiers even when they
    match the same nodes. The ``fingerprint`` is derived from the name so
    it is stable across runs; names must therefore be unique within one
    configuration (``Grouper`` enforces this).
    """

    def __init__(self, name: str) -> None:
        if not name.strip():
            raise ValueError("classifier name must not be empty")
        self.name = name
        self.fingerprint = string_hash(name)

    @abstractmethod
    def matches(self, node: ChildableNode) -> bool: ...

    def __call__(self, node: ChildableNode) -> bool:
        return self.matches(node)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class NameMatcher(Classifier):
    """Matches node names against prefixes and suffixes.

    With ``conjunction=False`` one matching suffix *or* prefix is enough;
    with ``conjunction=True`` at least one suffix *and* one prefix must
    match. An empty suffix (or prefix) set never matches.
    """

    def __init__(
        self,
        name: str,
        suffixes: Iterable[str] = (),
        prefixes: Iterable[str] = (),
        conjunction: bool = False,
    ) -> None:
        super().__init__(name)
        self.suffixes = tuple(suffixes)
        self.prefixes = tuple(prefixes)
        self.conjunction = conjunction

    def matches(self, node: ChildableNode) -> bool:
        value = self.get_string(node)
        if self.conjunction:
            return self._test_suffixes(value) and self._test_prefixes(value)
        return self._test_suffixes(value) or self._test_prefixes(value)

    def get_string(self, node: ChildableNode) -> str:
        """The string matched against; override to match something else."""
        return node.name

    def _test_suffixes(self, value: str) -> bool:
        return any(value.endswith(suffix) for suffix in self.suffixes)

    def _test_prefixes(self, value: str) -> bool:
        return any(value.startswith(prefix) for prefix in self.prefixes)


class SuffixMatcher(NameMatcher):
    """Matches node names ending with any of the given suffixes."""

    def __init__(self, name: str, *suffixes: str) -> None:
        super().__init__(name, suffixes=suffixes)


class HasChildrenMatcher(Classifier):
    """Matches nodes that can have children (even if they have none)."""

    def matches(self, node: ChildableNode) -> bool:
        return node.get_children() is not None


class CatchAllMatcher(Classifier):
    """Matches every node. Put it last to keep unmatched nodes from vanishing."""

    def matches(self, node: ChildableNode) -> bool:
        return True
