"""Service facade: the single entry point for callers.

UsbFileService composes the watcher, resolver, lister and reader and
exposes register / list_dir / read_as_text / exists. Errors propagate as
UsbFileError subclasses; nothing is retried.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional, Union

from core.errors import NotFoundError
from core.interfaces import HostVolumeAPI
from core.logging_config import get_logger
from core.models import Entry, Volume
from service.lister import DirectoryLister
from service.reader import DEFAULT_CHUNK_SIZE, DEFAULT_MAX_BYTES, FileReader
from service.resolver import NamespaceResolver
from service.watcher import VolumeWatcher, WatchSession

log = get_logger(__name__)

VolumeRef = Union[Volume, str, None]


class ServiceState(str, Enum):
    IDLE = "idle"
    WATCHING = "watching"


class UsbFileService:
    def __init__(
        self,
        host: HostVolumeAPI,
        *,
        max_read_bytes: int = DEFAULT_MAX_BYTES,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        fallback_encoding: str = "",
    ) -> None:
        self._host = host
        self._watcher = VolumeWatcher(host)
        self._resolver = NamespaceResolver(host)
        self._lister = DirectoryLister(host)
        self._reader = FileReader(
            host,
            max_bytes=max_read_bytes,
            chunk_size=chunk_size,
            fallback_encoding=fallback_encoding,
        )

    @property
    def state(self) -> ServiceState:
        return ServiceState.WATCHING if self._watcher.started else ServiceState.IDLE

    @property
    def watcher(self) -> VolumeWatcher:
        return self._watcher

    async def start(self) -> None:
        await self._watcher.start()

    async def close(self) -> None:
        await self._watcher.stop()

    async def register(self) -> WatchSession:
        """Begin (or join) observation and return a session of attached volumes."""
        return await self._watcher.register()

    def volumes(self) -> List[Volume]:
        return self._watcher.attached()

    def _target(self, volume: VolumeRef) -> Volume:
        # Fails before any host call when the target is not attached
        if isinstance(volume, Volume):
            volume.ensure_attached()
            return volume
        if volume is None or not str(volume).strip():
            return self._watcher.first()
        return self._watcher.get(str(volume).strip())

    async def list_dir(self, path: str = "", volume: VolumeRef = None) -> List[Entry]:
        target = self._target(volume)
        log.debug("list_dir", volume_id=target.volume_id, path=path)

        entry = await self._resolver.resolve(target, path)
        return await self._lister.list(target, entry)

    async def read_as_text(
        self,
        path: str,
        volume: VolumeRef = None,
        *,
        encoding: Optional[str] = None,
    ) -> str:
        target = self._target(volume)
        log.debug("read_as_text", volume_id=target.volume_id, path=path)

        entry = await self._resolver.resolve(target, path)
        return await self._reader.read_text(target, entry, encoding=encoding)

    async def exists(self, path: str, volume: VolumeRef = None) -> bool:
        target = self._target(volume)
        try:
            await self._resolver.resolve(target, path)
        except NotFoundError:
            return False
        return True
