"""Volume watcher: turns host attach/detach events into Volume objects.

The watcher owns every Volume. Each register() call returns a WatchSession,
an explicit session object that yields one Volume per attach cycle. Detach
invalidates the Volume so in-flight and later operations fail with
VolumeGoneError.
"""

from __future__ import annotations

import asyncio
from typing import Dict, List, Optional, Set

from core.errors import VolumeGoneError
from core.interfaces import HostVolumeAPI
from core.logging_config import get_logger
from core.models import HostEvent, Volume

log = get_logger(__name__)

_CLOSED = object()


class WatchSession:
    """An independent, infinite stream of attached volumes.

    Iterate with `async for`, or pull with next_volume(). Iteration ends
    only after close().
    """

    def __init__(self, watcher: "VolumeWatcher") -> None:
        self._watcher = watcher
        self._queue: "asyncio.Queue[object]" = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _deliver(self, volume: Volume) -> None:
        if not self._closed:
            self._queue.put_nowait(volume)

    async def next_volume(self, timeout: Optional[float] = None) -> Optional[Volume]:
        """Wait for the next attached volume; None on timeout or after close()."""
        if self._closed and self._queue.empty():
            return None
        try:
            item = await asyncio.wait_for(self._queue.get(), timeout)
        except asyncio.TimeoutError:
            return None
        if item is _CLOSED:
            return None
        return item  # type: ignore[return-value]

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._queue.put_nowait(_CLOSED)
        self._watcher._drop_session(self)

    def __aiter__(self) -> "WatchSession":
        return self

    async def __anext__(self) -> Volume:
        volume = await self.next_volume()
        if volume is None:
            raise StopAsyncIteration
        return volume

    async def __aenter__(self) -> "WatchSession":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()


class VolumeWatcher:
    # Owns volumes and fans attach notifications out to sessions

    def __init__(self, host: HostVolumeAPI) -> None:
        self._host = host
        self._volumes: Dict[str, Volume] = {}
        self._generations: Dict[str, int] = {}
        self._sessions: Set[WatchSession] = set()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._started = False
        self._start_lock = asyncio.Lock()

    @property
    def started(self) -> bool:
        return self._started

    async def start(self) -> None:
        async with self._start_lock:
            if self._started:
                return

            self._loop = asyncio.get_running_loop()
            # Subscribe before enumerating so nothing attached in between is missed.
            # Raises WatcherUnavailableError when the host cannot observe devices.
            await self._host.subscribe(self._on_host_event)
            self._started = True
            log.info("watcher_started")

            for event in await self._host.enumerate_volumes():
                self._dispatch(event)

    async def stop(self) -> None:
        async with self._start_lock:
            if not self._started:
                return
            await self._host.unsubscribe(self._on_host_event)
            self._started = False

            for session in list(self._sessions):
                session.close()
            for volume in self._volumes.values():
                volume.invalidate()
            self._volumes.clear()
            log.info("watcher_stopped")

    async def register(self) -> WatchSession:
        await self.start()

        session = WatchSession(self)
        self._sessions.add(session)
        for volume in self.attached():
            session._deliver(volume)

        log.debug("watch_session_opened", sessions=len(self._sessions))
        return session

    def _drop_session(self, session: WatchSession) -> None:
        self._sessions.discard(session)
        log.debug("watch_session_closed", sessions=len(self._sessions))

    def attached(self) -> List[Volume]:
        """Currently attached volumes, in attach order."""
        return [v for v in self._volumes.values() if v.is_attached]

    def get(self, volume_id: str) -> Volume:
        volume = self._volumes.get(volume_id)
        if volume is None or not volume.is_attached:
            raise VolumeGoneError(f"Volume not attached: {volume_id}")
        return volume

    def first(self) -> Volume:
        volumes = self.attached()
        if not volumes:
            raise VolumeGoneError("No USB volume attached")
        return volumes[0]

    # -- host events --------------------------------------------------

    def _on_host_event(self, event: HostEvent) -> None:
        # Hosts may call from a foreign thread; volume state is only touched on our loop.
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if self._loop is None or running is self._loop:
            self._dispatch(event)
        else:
            self._loop.call_soon_threadsafe(self._dispatch, event)

    def _dispatch(self, event: HostEvent) -> None:
        if event.kind == "attach":
            self._attach(event)
        elif event.kind == "detach":
            self._detach(event)
        else:
            log.warning("watcher_unknown_event", kind=event.kind, volume_id=event.volume_id)

    def _attach(self, event: HostEvent) -> None:
        current = self._volumes.get(event.volume_id)
        if current is not None and current.is_attached:
            # Same attach cycle reported twice
            return

        generation = self._generations.get(event.volume_id, 0) + 1
        self._generations[event.volume_id] = generation

        volume = Volume(
            volume_id=event.volume_id,
            label=event.label or event.volume_id,
            generation=generation,
        )
        # Re-insert so dict order reflects attach order
        self._volumes.pop(event.volume_id, None)
        self._volumes[event.volume_id] = volume
        log.info("volume_attached", volume_id=volume.volume_id, generation=generation)

        for session in list(self._sessions):
            session._deliver(volume)

    def _detach(self, event: HostEvent) -> None:
        volume = self._volumes.pop(event.volume_id, None)
        if volume is None:
            return
        volume.invalidate()
        log.info("volume_detached", volume_id=volume.volume_id, generation=volume.generation)
