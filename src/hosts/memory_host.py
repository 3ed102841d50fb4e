from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Union

from core.errors import (
    NotADirError,
    NotAFileError,
    NotFoundError,
    VolumeGoneError,
    WatcherUnavailableError,
)
from core.interfaces import HostListener
from core.models import HostEntry, HostEvent
from core.paths import Segments, join_segments


"""In-memory HostVolumeAPI implementation.

Volumes are nested dictionaries: a dict is a directory, bytes (or str,
stored as UTF-8) is a file. Attach and detach are driven by calling
attach()/detach(), which notify subscribers synchronously.
"""

Tree = Mapping[str, Union["Tree", bytes, str]]
_Node = Union[Dict[str, "_Node"], bytes]


def _freeze(tree: Tree) -> Dict[str, _Node]:
    out: Dict[str, _Node] = {}
    for name, node in tree.items():
        if "/" in name or not name:
            raise ValueError(f"Invalid entry name: {name!r}")
        if isinstance(node, Mapping):
            out[name] = _freeze(node)
        elif isinstance(node, str):
            out[name] = node.encode("utf-8")
        else:
            out[name] = bytes(node)
    return out


class MemoryHost:
    # Dictionary-backed host, useful for tests and demos.

    def __init__(self, *, available: bool = True) -> None:
        self._available = available
        self._volumes: Dict[str, Dict[str, _Node]] = {}
        self._labels: Dict[str, str] = {}
        self._listeners: List[HostListener] = []

        self.mtime = 0.0

    # -- host control -------------------------------------------------

    def attach(self, volume_id: str, tree: Tree, *, label: Optional[str] = None) -> None:
        self._volumes[volume_id] = _freeze(tree)
        self._labels[volume_id] = label or volume_id
        self._emit(HostEvent(kind="attach", volume_id=volume_id, label=self._labels[volume_id]))

    def detach(self, volume_id: str) -> None:
        if self._volumes.pop(volume_id, None) is None:
            return
        label = self._labels.pop(volume_id, volume_id)
        self._emit(HostEvent(kind="detach", volume_id=volume_id, label=label))

    def _emit(self, event: HostEvent) -> None:
        for listener in list(self._listeners):
            listener(event)

    # -- HostVolumeAPI ------------------------------------------------

    async def subscribe(self, listener: HostListener) -> None:
        if not self._available:
            raise WatcherUnavailableError("USB subsystem not available")
        self._listeners.append(listener)

    async def unsubscribe(self, listener: HostListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def enumerate_volumes(self) -> List[HostEvent]:
        return [
            HostEvent(kind="attach", volume_id=vid, label=self._labels[vid])
            for vid in self._volumes
        ]

    def _node(self, volume_id: str, segments: Segments) -> _Node:
        root = self._volumes.get(volume_id)
        if root is None:
            raise VolumeGoneError(f"Volume not present: {volume_id}")

        node: _Node = root
        for i, seg in enumerate(segments):
            if not isinstance(node, dict):
                raise NotADirError(f"Not a directory: {join_segments(segments[:i])}")
            if seg not in node:
                raise NotFoundError(f"Not found: {join_segments(segments[: i + 1])}")
            node = node[seg]
        return node

    async def open_directory(self, volume_id: str, segments: Segments) -> List[HostEntry]:
        node = self._node(volume_id, segments)
        if not isinstance(node, dict):
            raise NotADirError(f"Not a directory: {join_segments(segments)}")

        return [
            HostEntry(
                name=name,
                is_directory=isinstance(child, dict),
                size=None if isinstance(child, dict) else len(child),
                modified_at=self.mtime,
            )
            for name, child in node.items()
        ]

    async def read_file(self, volume_id: str, segments: Segments, offset: int, length: int) -> bytes:
        node = self._node(volume_id, segments)
        if isinstance(node, dict):
            raise NotAFileError(f"Not a file: {join_segments(segments)}")
        return node[offset : offset + length]
