# Author: PB
# Maintainer: PB
# Original date: 2026.10.19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# layer-diff/src/layer_diff/errors.py

"""Exceptions raised by layer-diff."""


class LayerDiffError(Exception):
    """Base class for all layer-diff errors."""


class InvalidPathError(LayerDiffError, ValueError):
    """Path given to a tree is empty, relative, or malformed."""


class MergeError(LayerDiffError):
    """Layer sequence cannot be squashed."""


class AnalysisError(LayerDiffError):
    """Layer sequence cannot be analyzed."""


class ArchiveError(LayerDiffError):
    """Image archive is unreadable or malformed."""
