"""Server bootstrap for the USB file MCP service.

Creates the FastMCP instance, wires the host backend and the service into
the tools, and starts the MCP server (stdio transport). The lifespan starts
volume observation and stops it on shutdown.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from mcp.server.fastmcp import FastMCP

from config import (
    FALLBACK_ENCODING,
    HOST_BACKEND,
    MAX_READ_BYTES,
    MEDIA_ROOT,
    POLL_INTERVAL,
    READ_CHUNK_SIZE,
    REQUIRE_MOUNTPOINT,
)
from core.errors import WatcherUnavailableError
from core.logging_config import get_logger
from hosts.host_factory import get_host_api
from service.facade import UsbFileService

from tools.exists import register as register_exists
from tools.list_dir import register as register_list_dir
from tools.read_as_text import register as register_read_as_text
from tools.volumes import register as register_volumes

log = get_logger(__name__)


def build_service() -> UsbFileService:
    host = get_host_api(
        HOST_BACKEND,
        media_root=MEDIA_ROOT,
        poll_interval=POLL_INTERVAL,
        require_mountpoint=REQUIRE_MOUNTPOINT,
    )
    return UsbFileService(
        host,
        max_read_bytes=MAX_READ_BYTES,
        chunk_size=READ_CHUNK_SIZE,
        fallback_encoding=FALLBACK_ENCODING,
    )


service = build_service()


@asynccontextmanager
async def lifespan(_server: FastMCP) -> AsyncIterator[None]:
    try:
        await service.start()
    except WatcherUnavailableError as e:
        # Keep serving; register() retries and reports WatcherUnavailable per call
        log.warning("usbfile_watcher_unavailable", error=str(e))
    log.info("usbfile_server_started", backend=HOST_BACKEND, media_root=str(MEDIA_ROOT))
    try:
        yield
    finally:
        await service.close()
        log.info("usbfile_server_stopped")


mcp = FastMCP("usbfile-mcp", lifespan=lifespan)


def register_tools() -> None:
    register_list_dir(mcp, service=service)
    register_read_as_text(mcp, service=service)
    register_exists(mcp, service=service)
    register_volumes(mcp, service=service)


register_tools()


def main() -> None:
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
