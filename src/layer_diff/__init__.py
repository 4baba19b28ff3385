# Author: PB
# Maintainer: PB
# Original date: 2026.10.19
# Copyright (C) 2026 HRDAG https://hrdag.org
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License along
# with this program; if not, see <https://www.gnu.org/licenses/>.
#
# ------
# layer-diff/src/layer_diff/__init__.py

"""Container image layer squashing and efficiency analysis."""

from .archive import read_docker_archive
from .ci import CIRules, evaluate
from .efficiency import analyze, efficiency_score
from .errors import (
    AnalysisError,
    ArchiveError,
    InvalidPathError,
    LayerDiffError,
    MergeError,
)
from .filenode import FileNode
from .filetree import FileTree
from .image import Image, ImageAnalysis, Layer, analyze_image
from .squash import squash
from .types import (
    DiffType,
    EfficiencyData,
    EfficiencyReport,
    EfficiencySlice,
    FileEntry,
    NodeKind,
    RuleResult,
)

__version__ = "0.1.0"

__all__ = [
    "AnalysisError",
    "ArchiveError",
    "CIRules",
    "DiffType",
    "EfficiencyData",
    "EfficiencyReport",
    "EfficiencySlice",
    "FileEntry",
    "FileNode",
    "FileTree",
    "Image",
    "ImageAnalysis",
    "InvalidPathError",
    "Layer",
    "LayerDiffError",
    "MergeError",
    "NodeKind",
    "RuleResult",
    "analyze",
    "analyze_image",
    "efficiency_score",
    "evaluate",
    "read_docker_archive",
    "squash",
]
