from __future__ import annotations

from typing import List

from core.errors import NotADirError, NotFoundError, VolumeGoneError, VolumeIOError
from core.interfaces import HostVolumeAPI
from core.logging_config import get_logger
from core.models import Entry, HostEntry, Volume
from core.paths import Segments, join_segments, split_volume_path


"""Namespace resolution: caller path -> Entry on a volume.

The walk goes one segment at a time through the host's directory
listings, so a non-terminal file is caught before descending and
nothing is ever looked up outside the volume root.
"""

log = get_logger(__name__)


async def open_directory(host: HostVolumeAPI, volume: Volume, segments: Segments) -> List[HostEntry]:
    """List one directory through the host under the volume's I/O lock."""
    volume.ensure_attached()
    try:
        async with volume.io_lock:
            volume.ensure_attached()
            children = await host.open_directory(volume.volume_id, segments)
    except OSError as e:
        if not volume.is_attached:
            raise VolumeGoneError(f"Volume detached: {volume.volume_id}") from e
        raise VolumeIOError(f"Failed to list {join_segments(segments) or '/'}: {e}") from e

    # A detach while the host was busy supersedes whatever it returned
    volume.ensure_attached()
    return children


class NamespaceResolver:
    def __init__(self, host: HostVolumeAPI) -> None:
        self._host = host

    async def resolve(self, volume: Volume, path: str) -> Entry:
        # Path-safety checks happen before any I/O
        segments = split_volume_path(path)
        volume.ensure_attached()

        current = Entry.root()
        for i, seg in enumerate(segments):
            if not current.is_directory:
                raise NotADirError(f"Not a directory: {current.full_path}")

            children = await open_directory(self._host, volume, current.path)
            match = next((c for c in children if c.name == seg), None)
            if match is None:
                raise NotFoundError(f"Not found: {join_segments(segments[: i + 1])}")

            current = Entry.from_host(current.path, match)

        log.debug(
            "path_resolved",
            volume_id=volume.volume_id,
            path=current.full_path,
            kind=current.kind.value,
        )
        return current
