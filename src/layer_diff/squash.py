# Author: PB
# Maintainer: PB
# Original date: 2026.10.19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# layer-diff/src/layer_diff/squash.py

"""Merge per-layer trees into the image's effective filesystem.

Whiteout handling follows the OCI layer format:
https://github.com/opencontainers/image-spec/blob/main/layer.md
"""

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from .errors import MergeError
from .filetree import FileTree
from .types import WHITEOUT_PREFIX, NodeKind

if TYPE_CHECKING:
    from .image import Layer

logger = logging.getLogger(__name__)


def check_layers(layers: Sequence["Layer"]) -> list["Layer"]:
    """Return layers in index order, or fail before anything is merged."""
    if not layers:
        raise MergeError("No layers to squash")
    ordered = sorted(layers, key=lambda layer: layer.index)
    indexes = [layer.index for layer in ordered]
    if indexes != list(range(len(ordered))):
        raise MergeError(f"Layer indexes must run contiguously from 0, got {indexes}")
    for layer in ordered:
        if layer.tree is None:
            raise MergeError(f"Layer {layer.index} has no tree; build it first")
    return ordered


def resolve_whiteouts(accumulator: FileTree, tree: FileTree) -> tuple[int, int]:
    """Delete from accumulator everything tree's whiteout markers hide.

    Returns the number of markers seen and the number of subtrees removed.
    """
    markers = 0
    removed = 0
    for path, node in tree.walk():
        match node.kind:
            case NodeKind.WHITEOUT:
                markers += 1
                parent, _, name = path.rpartition("/")
                hidden = name[len(WHITEOUT_PREFIX):]
                if not hidden:
                    logger.debug("ignoring whiteout with no target: %s", path)
                    continue
                if accumulator.remove(f"{parent}/{hidden}") is not None:
                    removed += 1
            case NodeKind.OPAQUE_WHITEOUT:
                markers += 1
                directory = accumulator.get_node(path.rpartition("/")[0] or "/")
                if directory is None:
                    continue
                for name in list(directory.children):
                    directory.remove_child(name)
                    removed += 1
            case NodeKind.FILE | NodeKind.DIRECTORY | NodeKind.SYMLINK:
                pass
    return markers, removed


def merge_tree(accumulator: FileTree, tree: FileTree) -> int:
    """Insert tree's regular entries into accumulator, keeping their labels."""
    merged = 0
    for path, node in tree.walk():
        if node.kind.is_whiteout:
            continue
        mode = node.mode
        existing = accumulator.get_node(path)
        # implied parents carry no mode of their own
        if (mode is None and node.kind is NodeKind.DIRECTORY
                and existing is not None
                and existing.kind is NodeKind.DIRECTORY):
            mode = existing.mode
        target = accumulator.insert(path, node.kind, node.size,
                                    node.link_target, mode)
        target.diff_type = node.diff_type
        merged += 1
    return merged


def squash(layers: Sequence["Layer"], top: int | None = None) -> FileTree:
    """Merge layer trees in index order into a new tree.

    With top set, only layers 0..top are merged. The layers' own trees
    are never modified; each one is copied before it is labelled.
    """
    ordered = check_layers(layers)
    if top is not None:
        if not 0 <= top < len(ordered):
            raise MergeError(f"Layer {top} out of range (0-{len(ordered) - 1})")
        ordered = ordered[:top + 1]

    accumulator = FileTree("squashed")
    for layer in ordered:
        working = layer.tree.copy()
        accumulator.classify(working)
        markers, removed = resolve_whiteouts(accumulator, working)
        merged = merge_tree(accumulator, working)
        logger.debug("layer %d: %d whiteouts, %d paths removed, %d merged",
                     layer.index, markers, removed, merged)
    return accumulator
