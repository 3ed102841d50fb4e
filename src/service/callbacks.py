"""Success/error callback adapter over UsbFileService.

Mirrors the callback contract of native device-plugin bridges: every request
completes by invoking exactly one of its two callbacks, exactly once. The
register success callback instead fires once per attached volume until the
bridge is closed.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Optional, Set

from core.errors import UsbFileError, VolumeIOError
from core.logging_config import get_logger
from core.models import Volume
from service.facade import UsbFileService, VolumeRef

log = get_logger(__name__)

SuccessCallback = Callable[[Any], None]
ErrorCallback = Callable[[UsbFileError], None]


class CallbackBridge:
    def __init__(self, service: UsbFileService) -> None:
        self._service = service
        self._tasks: Set[asyncio.Task] = set()
        self._watch_tasks: Set[asyncio.Task] = set()

    def _spawn(self, coro: Awaitable[None], *, watch: bool = False) -> asyncio.Task:
        task = asyncio.ensure_future(coro)
        bucket = self._watch_tasks if watch else self._tasks
        bucket.add(task)
        task.add_done_callback(bucket.discard)
        return task

    def _complete(
        self,
        work: Callable[[], Awaitable[Any]],
        success: SuccessCallback,
        error: ErrorCallback,
    ) -> asyncio.Task:
        async def _run() -> None:
            try:
                result = await work()
            except UsbFileError as e:
                error(e)
                return
            except OSError as e:
                error(VolumeIOError(str(e)))
                return
            except Exception as e:
                log.exception("callback_request_failed", error=repr(e))
                error(VolumeIOError(f"Unexpected failure: {e}"))
                return
            success(result)

        return self._spawn(_run())

    def list_dir(
        self,
        path: str,
        success: SuccessCallback,
        error: ErrorCallback,
        *,
        volume: VolumeRef = None,
    ) -> asyncio.Task:
        async def work() -> Any:
            entries = await self._service.list_dir(path, volume)
            return [e.to_dict() for e in entries]

        return self._complete(work, success, error)

    def read_as_text(
        self,
        path: str,
        success: SuccessCallback,
        error: ErrorCallback,
        *,
        volume: VolumeRef = None,
        encoding: Optional[str] = None,
    ) -> asyncio.Task:
        async def work() -> Any:
            return await self._service.read_as_text(path, volume, encoding=encoding)

        return self._complete(work, success, error)

    def exists(
        self,
        path: str,
        success: SuccessCallback,
        error: ErrorCallback,
        *,
        volume: VolumeRef = None,
    ) -> asyncio.Task:
        return self._complete(lambda: self._service.exists(path, volume), success, error)

    def register(self, on_attach: Callable[[Volume], None], error: ErrorCallback) -> asyncio.Task:
        async def _run() -> None:
            try:
                session = await self._service.register()
            except UsbFileError as e:
                error(e)
                return

            async with session:
                async for volume in session:
                    on_attach(volume)

        return self._spawn(_run(), watch=True)

    async def drain(self) -> None:
        """Wait for all single-shot requests issued so far."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks))

    async def close(self) -> None:
        for task in list(self._watch_tasks):
            task.cancel()
        if self._watch_tasks:
            await asyncio.gather(*list(self._watch_tasks), return_exceptions=True)
        await self.drain()
        log.debug("callback_bridge_closed")
