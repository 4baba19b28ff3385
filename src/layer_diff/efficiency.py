# Author: PB
# Maintainer: PB
# Original date: 2026.10.19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# layer-diff/src/layer_diff/efficiency.py

"""Find bytes wasted by paths that more than one layer writes."""

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from .errors import AnalysisError
from .filenode import FileNode
from .types import EfficiencyData, EfficiencyReport

if TYPE_CHECKING:
    from .image import Layer

logger = logging.getLogger(__name__)


def efficiency_score(wasted_bytes: int, image_size: int) -> float:
    """Fraction of image bytes not superseded by a later write."""
    if image_size <= 0:
        return 1.0
    return max(0.0, min(1.0, 1 - wasted_bytes / image_size))


def analyze(layers: Sequence["Layer"]) -> EfficiencyReport:
    """Scan every layer's tree for paths written more than once.

    Only File and Symlink nodes count. Each duplicated path is charged
    the size of every write except the last one, which is what the
    image ships. The result is sorted by wasted bytes, then path.
    """
    if not layers:
        raise AnalysisError("No layers to analyze")
    ordered = sorted(layers, key=lambda layer: layer.index)
    for layer in ordered:
        if layer.tree is None:
            raise AnalysisError(f"Layer {layer.index} has no tree; build it first")

    writes: dict[str, list[FileNode]] = {}
    image_size = 0
    for layer in ordered:
        for path, node in layer.tree.walk():
            if not node.kind.has_content:
                continue
            writes.setdefault(path, []).append(node)
            image_size += node.size

    inefficiencies = [
        EfficiencyData(path=path, nodes=tuple(nodes),
                       cumulative_size=sum(node.size for node in nodes[:-1]))
        for path, nodes in writes.items()
        if len(nodes) > 1
    ]
    inefficiencies.sort(key=lambda data: (data.cumulative_size, data.path))
    wasted_bytes = sum(data.cumulative_size for data in inefficiencies)
    user_size = image_size - ordered[0].tree.size

    logger.debug("scanned %d paths across %d layers: %d rewritten, %d bytes wasted",
                 len(writes), len(ordered), len(inefficiencies), wasted_bytes)
    return EfficiencyReport(
        inefficiencies=inefficiencies,
        wasted_bytes=wasted_bytes,
        image_size=image_size,
        user_size=user_size,
        score=efficiency_score(wasted_bytes, image_size),
    )
