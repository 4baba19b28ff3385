# Author: PB
# Maintainer: PB
# Original date: 2026.10.19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# layer-diff/src/layer_diff/archive.py

"""Read images saved with `docker save`.

The archive holds a manifest.json naming the image config and the layer
tarballs in base-first order. Both the legacy `<id>/layer.tar` layout and
the OCI `blobs/sha256/<digest>` layout are accepted.
"""

import json
import logging
import posixpath
import tarfile
from pathlib import Path, PurePosixPath
from typing import IO

from .errors import ArchiveError
from .image import Image, Layer
from .types import FileEntry, NodeKind

logger = logging.getLogger(__name__)


def member_path(name: str) -> str | None:
    """Absolute path for a tar member name, or None for the archive root."""
    name = posixpath.normpath(name.lstrip("/"))
    if name in (".", ""):
        return None
    return "/" + name


def member_entry(member: tarfile.TarInfo) -> FileEntry | None:
    path = member_path(member.name)
    if path is None:
        return None
    if member.isdir():
        return FileEntry(path, NodeKind.DIRECTORY, 0, member.mode)
    if member.issym():
        return FileEntry(path, NodeKind.SYMLINK, 0, member.mode, member.linkname)
    if member.isfile() or member.islnk():
        return FileEntry(path, NodeKind.FILE, member.size, member.mode)
    # devices and fifos carry no bytes
    return FileEntry(path, NodeKind.FILE, 0, member.mode)


def read_layer_entries(fileobj: IO[bytes]) -> list[FileEntry]:
    """Decode one layer tarball, plain or compressed, into entries."""
    entries = []
    with tarfile.open(fileobj=fileobj, mode="r:*") as layer_tar:
        for member in layer_tar:
            entry = member_entry(member)
            if entry is not None:
                entries.append(entry)
    return entries


def layer_digest(layer_path: str) -> str:
    """Layer id taken from where the layer sits in the archive."""
    parts = PurePosixPath(layer_path).parts
    if len(parts) >= 3 and parts[-3] == "blobs":
        return f"{parts[-2]}:{parts[-1]}"
    if len(parts) >= 2 and parts[-1] == "layer.tar":
        return parts[-2]
    return layer_path


def layer_commands(config: dict) -> list[str]:
    """Build commands for history entries that produced a layer."""
    return [
        entry.get("created_by", "")
        for entry in config.get("history", [])
        if not entry.get("empty_layer", False)
    ]


def _load_json(archive: tarfile.TarFile, name: str):
    fileobj = archive.extractfile(name)
    if fileobj is None:
        raise ArchiveError(f"{name} is not a regular file")
    return json.load(fileobj)


def read_docker_archive(path: Path | str) -> Image:
    """Load an image, with raw entries for every layer, from a tarball."""
    path = Path(path)
    try:
        with tarfile.open(path, "r:*") as archive:
            manifest = _load_json(archive, "manifest.json")
            if not isinstance(manifest, list) or not manifest:
                raise ArchiveError(f"Empty manifest in {path}")
            image_manifest = manifest[0]
            config = _load_json(archive, image_manifest["Config"])
            commands = layer_commands(config)

            layers = []
            for index, layer_path in enumerate(image_manifest["Layers"]):
                fileobj = archive.extractfile(layer_path)
                if fileobj is None:
                    raise ArchiveError(f"Layer {layer_path} is not a regular file")
                layers.append(Layer(
                    index=index,
                    id=layer_digest(layer_path),
                    command=commands[index] if index < len(commands) else "",
                    entries=read_layer_entries(fileobj),
                ))
                logger.debug("read layer %d (%s): %d entries",
                             index, layer_path, len(layers[-1].entries))
    except (tarfile.TarError, OSError, KeyError, TypeError,
            json.JSONDecodeError) as e:
        raise ArchiveError(f"Cannot read image archive {path}: {e}") from e

    tags = image_manifest.get("RepoTags") or [path.name]
    return Image(name=tags[0], layers=layers)
