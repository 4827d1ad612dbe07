"""Nodes backed by files and directories on disk."""

from __future__ import annotations

import fnmatch
from collections.abc import Iterable
from pathlib import Path

from treemerge.tree.nodes import AbstractChildableNode, ChildableNode, ChildFilteringNode


class FsNode(AbstractChildableNode):
    """A single file or directory.

    Directories are parents, everything else is a leaf. Symlinks are never
    followed, so a symlinked directory is a leaf and links can't introduce
    cycles. Children are listed once, sorted by name, on first access.
    """

    def __init__(self, path: Path, parent: FsNode | None = None) -> None:
        self.path = path
        self.parent = parent
        self.name = path.name or str(path)
        self._children: list[FsNode] | None = None
        self._listed = False

    def get_children(self) -> list[ChildableNode] | None:
        if not self._listed:
            self._children = self._list_children()
            self._listed = True
        return self._children

    def _list_children(self) -> list[FsNode] | None:
        if self.path.is_symlink() or not self.path.is_dir():
            return None
        return [FsNode(child, self) for child in sorted(self.path.iterdir(), key=lambda p: p.name)]

    def __repr__(self) -> str:
        return f"FsNode({str(self.path)!r})"


def _matches_any(name: str, patterns: Iterable[str]) -> bool:
    """Check whether *name* matches one of the glob *patterns*."""
    return any(fnmatch.fnmatchcase(name, pattern) for pattern in patterns)


def open_directory(root_path: Path, ignore_patterns: Iterable[str] = ()) -> ChildableNode:
    """Node for *root_path*, hiding entries whose name matches *ignore_patterns*.

    Ignored directories are removed together with their whole subtree.
    """
    root = FsNode(root_path.resolve())
    patterns = tuple(ignore_patterns)
    if not patterns:
        return root
    return ChildFilteringNode(root, lambda node: not _matches_any(node.name, patterns), recursive=True)
