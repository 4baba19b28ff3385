# Author: PB
# Maintainer: PB
# Original date: 2026.10.19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# layer-diff/src/layer_diff/types.py

"""Type definitions for image layer analysis."""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Final, Literal

if TYPE_CHECKING:
    from .filenode import FileNode


WHITEOUT_PREFIX: Final = ".wh."
OPAQUE_WHITEOUT: Final = ".wh..wh..opq"

RuleStatus = Literal["pass", "fail", "skip"]


class NodeKind(Enum):
    """What a path in a layer holds."""
    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    WHITEOUT = "whiteout"
    OPAQUE_WHITEOUT = "opaque_whiteout"

    @property
    def is_whiteout(self) -> bool:
        return self in (NodeKind.WHITEOUT, NodeKind.OPAQUE_WHITEOUT)

    @property
    def has_content(self) -> bool:
        """True for kinds whose bytes count toward image size."""
        return self in (NodeKind.FILE, NodeKind.SYMLINK)


class DiffType(Enum):
    """Change classification of a node relative to a lower tree."""
    UNMODIFIED = "unmodified"
    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"


@dataclass(frozen=True)
class FileEntry:
    """One raw filesystem entry extracted from a layer archive."""
    path: str
    kind: NodeKind = NodeKind.FILE
    size: int = 0
    mode: int | None = None
    link_target: str | None = None


@dataclass(frozen=True)
class EfficiencyData:
    """A path written by more than one layer."""
    path: str
    nodes: tuple["FileNode", ...]
    cumulative_size: int

    @property
    def count(self) -> int:
        return len(self.nodes)


EfficiencySlice = list[EfficiencyData]


@dataclass(frozen=True)
class EfficiencyReport:
    """Result of scanning every layer for duplicate writes."""
    inefficiencies: EfficiencySlice = field(default_factory=list)
    wasted_bytes: int = 0
    image_size: int = 0
    user_size: int = 0
    score: float = 1.0

    @property
    def user_wasted_percent(self) -> float:
        if self.user_size == 0:
            return 0.0
        return self.wasted_bytes / self.user_size

    def to_dict(self) -> dict:
        return {
            'image_size': self.image_size,
            'user_size': self.user_size,
            'wasted_bytes': self.wasted_bytes,
            'score': self.score,
            'user_wasted_percent': self.user_wasted_percent,
            'inefficiencies': [
                {
                    'path': data.path,
                    'count': data.count,
                    'cumulative_size': data.cumulative_size,
                }
                for data in self.inefficiencies
            ],
        }


@dataclass(frozen=True)
class RuleResult:
    """Outcome of checking one CI rule."""
    name: str
    status: RuleStatus
    message: str = ""
