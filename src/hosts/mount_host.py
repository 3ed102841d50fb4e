from __future__ import annotations

import asyncio
import errno
import os
from pathlib import Path
from typing import Callable, Dict, List, Optional, Set, TypeVar

from core.errors import (
    NotADirError,
    NotAFileError,
    NotFoundError,
    PathEscapeError,
    VolumeGoneError,
    WatcherUnavailableError,
)
from core.interfaces import HostListener
from core.logging_config import get_logger
from core.models import HostEntry, HostEvent
from core.paths import Segments, join_segments


"""Mount-point HostVolumeAPI implementation.

Every subdirectory of the media root (e.g. /media/<user>) is treated as
one mounted USB volume. Attach/detach is detected by polling the media
root; all filesystem access is confined to the volume's mount directory.
"""

log = get_logger(__name__)

T = TypeVar("T")


class MountPointHost:
    # Host backed by OS mount points under a media root.

    def __init__(
        self,
        *,
        media_root: Path,
        poll_interval: float = 2.0,
        require_mountpoint: bool = False,
    ) -> None:
        self._media_root = Path(media_root).resolve()
        self._poll_interval = max(0.05, float(poll_interval))
        self._require_mountpoint = bool(require_mountpoint)

        self._listeners: List[HostListener] = []
        self._known: Set[str] = set()
        self._poll_task: Optional[asyncio.Task] = None

    # -- discovery ----------------------------------------------------

    def _scan(self) -> Dict[str, str]:
        if not self._media_root.is_dir():
            return {}

        out: Dict[str, str] = {}
        with os.scandir(self._media_root) as it:
            for d in it:
                if not d.is_dir(follow_symlinks=False):
                    continue
                if self._require_mountpoint and not os.path.ismount(d.path):
                    continue
                out[d.name] = d.name
        return out

    async def enumerate_volumes(self) -> List[HostEvent]:
        found = await asyncio.to_thread(self._scan)
        return [HostEvent(kind="attach", volume_id=vid, label=label) for vid, label in sorted(found.items())]

    async def subscribe(self, listener: HostListener) -> None:
        if not self._media_root.is_dir():
            raise WatcherUnavailableError(f"Media root not available: {self._media_root}")

        self._listeners.append(listener)
        if self._poll_task is None:
            # Baseline snapshot: volumes already present are reported via enumerate_volumes().
            self._known = set((await asyncio.to_thread(self._scan)).keys())
            self._poll_task = asyncio.create_task(self._poll_loop())
            log.info("mount_host_polling_started", media_root=str(self._media_root))

    async def unsubscribe(self, listener: HostListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

        if not self._listeners and self._poll_task is not None:
            self._poll_task.cancel()
            try:
                await self._poll_task
            except asyncio.CancelledError:
                pass
            self._poll_task = None
            log.info("mount_host_polling_stopped", media_root=str(self._media_root))

    async def _poll_loop(self) -> None:
        while True:
            await asyncio.sleep(self._poll_interval)
            try:
                await self.poll_once()
            except OSError as e:
                # Transient failures (e.g. media root briefly unreadable); try again next tick.
                log.warning("mount_host_poll_failed", error=str(e))

    async def poll_once(self) -> None:
        """Diff the media root against the last snapshot and emit events."""
        found = await asyncio.to_thread(self._scan)
        current = set(found.keys())

        for vid in sorted(self._known - current):
            self._emit(HostEvent(kind="detach", volume_id=vid, label=vid))
        for vid in sorted(current - self._known):
            self._emit(HostEvent(kind="attach", volume_id=vid, label=found[vid]))

        self._known = current

    def _emit(self, event: HostEvent) -> None:
        for listener in list(self._listeners):
            listener(event)

    # -- namespace access ---------------------------------------------

    def _volume_dir(self, volume_id: str) -> Path:
        if not volume_id or "/" in volume_id or volume_id in (".", ".."):
            raise VolumeGoneError(f"Unknown volume: {volume_id!r}")
        p = self._media_root / volume_id
        if not p.is_dir():
            raise VolumeGoneError(f"Volume not present: {volume_id}")
        return p.resolve()

    def _resolve_under_volume(self, volume_id: str, segments: Segments) -> Path:
        base = self._volume_dir(volume_id)
        try:
            p = base.joinpath(*segments).resolve()
        except RuntimeError as e:
            # Symlink loop (raised as RuntimeError before Python 3.13)
            raise OSError(errno.ELOOP, str(e)) from e

        # Strong containment check: symlinks must not lead outside the mount point
        try:
            p.relative_to(base)
        except ValueError as e:
            raise PathEscapeError(f"Access outside volume root is not allowed: {join_segments(segments)}") from e

        return p

    async def open_directory(self, volume_id: str, segments: Segments) -> List[HostEntry]:
        def _do() -> List[HostEntry]:
            p = self._resolve_under_volume(volume_id, segments)
            if not p.exists():
                raise NotFoundError(f"Not found: {join_segments(segments)}")
            if not p.is_dir():
                raise NotADirError(f"Not a directory: {join_segments(segments)}")

            out: List[HostEntry] = []
            with os.scandir(p) as it:
                for d in it:
                    try:
                        st = d.stat()
                        is_dir = d.is_dir()
                    except OSError:
                        # Dangling link or symlink loop: report the link itself
                        st = d.stat(follow_symlinks=False)
                        is_dir = False
                    out.append(
                        HostEntry(
                            name=d.name,
                            is_directory=is_dir,
                            size=None if is_dir else st.st_size,
                            modified_at=st.st_mtime,
                            created_at=getattr(st, "st_birthtime", st.st_ctime),
                            accessed_at=st.st_atime,
                        )
                    )
            return out

        # Offload blocking filesystem IO to a thread to keep async loop responsive
        return await asyncio.to_thread(self._guard, volume_id, _do)

    async def read_file(self, volume_id: str, segments: Segments, offset: int, length: int) -> bytes:
        def _do() -> bytes:
            p = self._resolve_under_volume(volume_id, segments)
            if not p.exists():
                raise NotFoundError(f"Not found: {join_segments(segments)}")
            if not p.is_file():
                raise NotAFileError(f"Not a file: {join_segments(segments)}")

            with p.open("rb") as f:
                f.seek(offset)
                return f.read(length)

        return await asyncio.to_thread(self._guard, volume_id, _do)

    def _guard(self, volume_id: str, fn: Callable[[], T]) -> T:
        # An I/O error on a vanished mount point means the volume is gone, not a read failure
        try:
            return fn()
        except OSError as e:
            if not (self._media_root / volume_id).is_dir():
                raise VolumeGoneError(f"Volume removed during access: {volume_id}") from e
            raise
