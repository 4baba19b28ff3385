# Author: PB
# Maintainer: PB
# Original date: 2026.10.19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# layer-diff/src/layer_diff/image.py

"""Image layers and the analyses run over them."""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field, replace

from .efficiency import analyze
from .errors import InvalidPathError, MergeError
from .filetree import FileTree
from .squash import squash
from .types import (
    OPAQUE_WHITEOUT,
    WHITEOUT_PREFIX,
    EfficiencyReport,
    FileEntry,
    NodeKind,
)

logger = logging.getLogger(__name__)


def entry_kind(entry: FileEntry) -> NodeKind:
    """Whiteouts are known only by the name of the last path segment."""
    name = entry.path.rstrip("/").rpartition("/")[2]
    if name == OPAQUE_WHITEOUT:
        return NodeKind.OPAQUE_WHITEOUT
    if name.startswith(WHITEOUT_PREFIX):
        return NodeKind.WHITEOUT
    return entry.kind


@dataclass
class Layer:
    """One changeset in an image's build history."""
    index: int
    id: str
    command: str = ""
    entries: list[FileEntry] = field(default_factory=list, repr=False)
    tree: FileTree | None = field(default=None, repr=False)

    @property
    def short_id(self) -> str:
        return self.id.rpartition(":")[2][:12]

    @property
    def size(self) -> int:
        return sum(entry.size for entry in self.entries
                   if entry_kind(entry) is NodeKind.FILE)

    def build_tree(self) -> FileTree:
        """Build this layer's tree from its raw entries."""
        tree = FileTree(self.id)
        for entry in self.entries:
            kind = entry_kind(entry)
            size = entry.size if kind is NodeKind.FILE else 0
            try:
                tree.insert_entry(replace(entry, kind=kind, size=size))
            except InvalidPathError as e:
                raise InvalidPathError(
                    f"Layer {self.index} ({self.short_id}): {e}") from e
        self.tree = tree
        logger.debug("layer %d: %d entries, %d nodes",
                     self.index, len(self.entries), len(tree))
        return tree


@dataclass
class Image:
    """An ordered stack of layers, base first."""
    name: str
    layers: list[Layer] = field(default_factory=list)

    def __post_init__(self):
        indexes = [layer.index for layer in self.layers]
        if indexes != list(range(len(self.layers))):
            raise MergeError(f"Image {self.name!r} layers must be indexed "
                             f"0..{len(self.layers) - 1} in order, got {indexes}")

    @property
    def size(self) -> int:
        return sum(layer.size for layer in self.layers)

    def build_trees(self, max_workers: int | None = None) -> None:
        """Build every missing layer tree on a thread pool.

        The first failure cancels the layers not yet started and is
        re-raised.
        """
        pending = [layer for layer in self.layers if layer.tree is None]
        if not pending:
            return
        with ThreadPoolExecutor(max_workers=max_workers or len(pending)) as executor:
            futures = {executor.submit(layer.build_tree): layer for layer in pending}
            for future in as_completed(futures):
                layer = futures[future]
                try:
                    future.result()
                except Exception as e:
                    logger.error("Failed to build tree for layer %d: %s", layer.index, e)
                    for other in futures:
                        other.cancel()
                    raise

    def squash(self, top: int | None = None) -> FileTree:
        self.build_trees()
        return squash(self.layers, top)

    def efficiency(self) -> EfficiencyReport:
        self.build_trees()
        return analyze(self.layers)

    def layer_changes(self, index: int) -> FileTree:
        """Copy of one layer's tree labelled against the layers below it."""
        if not 0 <= index < len(self.layers):
            raise MergeError(f"Layer {index} out of range for image {self.name!r}")
        self.build_trees()
        changes = self.layers[index].tree.copy()
        lower = squash(self.layers, index - 1) if index > 0 else FileTree()
        lower.classify(changes)
        return changes


@dataclass(frozen=True)
class ImageAnalysis:
    """Everything the report and tree views read."""
    image: Image
    squashed: FileTree
    efficiency: EfficiencyReport


def analyze_image(image: Image, max_workers: int | None = None) -> ImageAnalysis:
    """Build layer trees, then squash and scan them side by side."""
    image.build_trees(max_workers)
    with ThreadPoolExecutor(max_workers=2) as executor:
        squashed = executor.submit(squash, image.layers)
        efficiency = executor.submit(analyze, image.layers)
        return ImageAnalysis(image=image, squashed=squashed.result(),
                             efficiency=efficiency.result())
