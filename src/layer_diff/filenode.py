# Author: PB
# Maintainer: PB
# Original date: 2026.10.19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# layer-diff/src/layer_diff/filenode.py

"""A single path component in a layer filesystem tree."""

from collections.abc import Iterator

from .types import DiffType, NodeKind


class FileNode:
    """One named entry in a FileTree.

    A node owns its children. The parent attribute is a back-link set by
    the owning node and is only used to derive the node's path.
    """

    def __init__(self, name: str, kind: NodeKind = NodeKind.DIRECTORY,
                 size: int = 0, link_target: str | None = None,
                 mode: int | None = None):
        self.name = name
        self.parent: FileNode | None = None
        self.children: dict[str, FileNode] = {}
        self.diff_type = DiffType.UNMODIFIED
        self.set_info(kind, size, link_target, mode)

    def __repr__(self) -> str:
        return f"FileNode({self.path!r}, {self.kind.value}, size={self.size})"

    @property
    def path(self) -> str:
        """Absolute path, rebuilt from the ancestor chain."""
        parts = []
        node = self
        while node.parent is not None:
            parts.append(node.name)
            node = node.parent
        return "/" + "/".join(reversed(parts))

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def set_info(self, kind: NodeKind, size: int = 0,
                 link_target: str | None = None,
                 mode: int | None = None) -> None:
        """Replace this node's metadata.

        Kinds that cannot hold children drop the existing subtree.
        """
        match kind:
            case NodeKind.DIRECTORY:
                size = 0
                link_target = None
            case NodeKind.SYMLINK:
                size = 0
                self._drop_children()
            case NodeKind.FILE | NodeKind.WHITEOUT | NodeKind.OPAQUE_WHITEOUT:
                link_target = None
                self._drop_children()
        self.kind = kind
        self.size = size
        self.link_target = link_target
        self.mode = mode

    def same_info(self, other: "FileNode") -> bool:
        """Compare the metadata that identifies a write."""
        return (self.kind == other.kind
                and self.size == other.size
                and self.link_target == other.link_target)

    def add_child(self, child: "FileNode") -> "FileNode":
        if self.kind is not NodeKind.DIRECTORY:
            raise ValueError(f"Cannot add {child.name!r} under "
                             f"{self.kind.value} {self.path}")
        old = self.children.get(child.name)
        if old is not None:
            old.parent = None
        child.parent = self
        self.children[child.name] = child
        return child

    def remove_child(self, name: str) -> "FileNode | None":
        child = self.children.pop(name, None)
        if child is not None:
            child.parent = None
        return child

    def _drop_children(self) -> None:
        for child in self.children.values():
            child.parent = None
        self.children = {}

    def sorted_children(self) -> list["FileNode"]:
        return [self.children[name] for name in sorted(self.children)]

    def walk(self) -> Iterator["FileNode"]:
        """Pre-order over this node's descendants, children by name."""
        stack = list(reversed(self.sorted_children()))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.sorted_children()))

    def copy(self) -> "FileNode":
        """Deep copy of this subtree, detached from any parent."""
        clone = FileNode(self.name, self.kind, self.size, self.link_target,
                         self.mode)
        clone.diff_type = self.diff_type
        # iterative to survive deep trees
        stack = [(self, clone)]
        while stack:
            src, dst = stack.pop()
            for child in src.children.values():
                child_copy = FileNode(child.name, child.kind, child.size,
                                      child.link_target, child.mode)
                child_copy.diff_type = child.diff_type
                child_copy.parent = dst
                dst.children[child.name] = child_copy
                stack.append((child, child_copy))
        return clone
