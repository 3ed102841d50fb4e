"""Core protocol and interface definitions.

Defines the HostVolumeAPI protocol: the contract every host backend
(mount points, in-memory) fulfils so the service never depends on a
specific OS API.
"""

from __future__ import annotations

from typing import Callable, List, Protocol

from core.models import HostEntry, HostEvent
from core.paths import Segments


HostListener = Callable[[HostEvent], None]


class HostVolumeAPI(Protocol):
    """Contract for a host that exposes USB mass-storage volumes.

    Hosts raise VolumeGoneError when the volume vanished, NotFoundError /
    NotADirError / NotAFileError / PathEscapeError for namespace problems,
    and plain OSError for I/O failures.
    """

    async def enumerate_volumes(self) -> List[HostEvent]:
        ...

    async def open_directory(self, volume_id: str, segments: Segments) -> List[HostEntry]:
        ...

    async def read_file(
        self,
        volume_id: str,
        segments: Segments,
        offset: int,
        length: int,
    ) -> bytes:
        ...

    async def subscribe(self, listener: HostListener) -> None:
        ...

    async def unsubscribe(self, listener: HostListener) -> None:
        ...
