# Author: PB
# Maintainer: PB
# Original date: 2026.10.19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# layer-diff/src/layer_diff/filetree.py

"""Filesystem tree built from layer entries."""

from collections.abc import Iterator

from .errors import InvalidPathError
from .filenode import FileNode
from .types import DiffType, FileEntry, NodeKind


def split_path(path: str) -> list[str]:
    """Split an absolute path into its normalized segments."""
    if not isinstance(path, str) or not path:
        raise InvalidPathError("Path is empty")
    if not path.startswith("/"):
        raise InvalidPathError(f"Path is not absolute: {path!r}")
    segments = [s for s in path.split("/") if s and s != "."]
    if ".." in segments:
        raise InvalidPathError(f"Path escapes its parent: {path!r}")
    return segments


class FileTree:
    """Ownership tree of FileNode rooted at '/'."""

    def __init__(self, name: str | None = None):
        self.name = name
        self.root = FileNode("", NodeKind.DIRECTORY)

    def __repr__(self) -> str:
        return f"FileTree({self.name!r})"

    def __len__(self) -> int:
        return sum(1 for _ in self.root.walk())

    def __contains__(self, path: str) -> bool:
        return self.get_node(path) is not None

    @property
    def size(self) -> int:
        """Bytes held by File and Symlink nodes."""
        return sum(node.size for node in self.root.walk()
                   if node.kind.has_content)

    def insert(self, path: str, kind: NodeKind = NodeKind.FILE,
               size: int = 0, link_target: str | None = None,
               mode: int | None = None) -> FileNode:
        """Place a node at path, creating missing parent directories.

        An existing node at path gets the new metadata. Its children
        survive only if the new kind is a directory.
        """
        segments = split_path(path)
        if not segments:
            if kind is not NodeKind.DIRECTORY:
                raise InvalidPathError(f"Root must be a directory, not {kind.value}")
            return self.root

        node = self.root
        for name in segments[:-1]:
            child = node.children.get(name)
            if child is None:
                child = node.add_child(FileNode(name, NodeKind.DIRECTORY))
            elif child.kind is not NodeKind.DIRECTORY:
                # a later entry lives under what used to be a file
                child.set_info(NodeKind.DIRECTORY, mode=child.mode)
            node = child

        name = segments[-1]
        existing = node.children.get(name)
        if existing is not None:
            existing.set_info(kind, size, link_target, mode)
            return existing
        return node.add_child(FileNode(name, kind, size, link_target, mode))

    def insert_entry(self, entry: FileEntry) -> FileNode:
        return self.insert(entry.path, entry.kind, entry.size,
                           entry.link_target, entry.mode)

    def get_node(self, path: str) -> FileNode | None:
        node = self.root
        for name in split_path(path):
            node = node.children.get(name)
            if node is None:
                return None
        return node

    def remove(self, path: str) -> FileNode | None:
        """Detach and return the subtree at path, if present."""
        segments = split_path(path)
        if not segments:
            raise InvalidPathError("Cannot remove the root")
        parent = self.root
        for name in segments[:-1]:
            parent = parent.children.get(name)
            if parent is None:
                return None
        return parent.remove_child(segments[-1])

    def walk(self) -> Iterator[tuple[str, FileNode]]:
        """Yield (path, node) in pre-order, siblings sorted by name.

        The root itself is not yielded. Every call starts a fresh
        traversal.
        """
        stack = [("/" + child.name, child)
                 for child in reversed(self.root.sorted_children())]
        while stack:
            path, node = stack.pop()
            yield path, node
            for child in reversed(node.sorted_children()):
                stack.append((f"{path}/{child.name}", child))

    def copy(self) -> "FileTree":
        tree = FileTree(self.name)
        tree.root = self.root.copy()
        return tree

    def classify(self, other: "FileTree") -> None:
        """Label other's nodes as Added, Modified or Unmodified against self."""
        stack: list[tuple[FileNode, FileNode | None]] = [(other.root, self.root)]
        while stack:
            theirs, mine = stack.pop()
            for name, child in theirs.children.items():
                counterpart = mine.children.get(name) if mine is not None else None
                if counterpart is None:
                    child.diff_type = DiffType.ADDED
                elif counterpart.same_info(child):
                    child.diff_type = DiffType.UNMODIFIED
                else:
                    child.diff_type = DiffType.MODIFIED
                stack.append((child, counterpart))

    def compare(self, other: "FileTree") -> None:
        """Label both trees with the transition from self to other.

        Nodes only in other are Added, nodes only in self are Removed, and
        nodes in both share a label: Unmodified when kind, size and link
        target match, otherwise Modified.
        """
        self.classify(other)
        stack: list[tuple[FileNode, FileNode | None]] = [(self.root, other.root)]
        while stack:
            mine, theirs = stack.pop()
            for name, child in mine.children.items():
                counterpart = theirs.children.get(name) if theirs is not None else None
                child.diff_type = (DiffType.REMOVED if counterpart is None
                                   else counterpart.diff_type)
                stack.append((child, counterpart))
