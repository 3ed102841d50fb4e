"""MCP tools for USB volume discovery.

Registers 'list_volumes' (currently attached volumes) and
'wait_for_volume', which opens a watch session and returns the first
volume it delivers.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from mcp.server.fastmcp import FastMCP

from core.errors import ValidationError
from service.facade import UsbFileService


def register(mcp: FastMCP, *, service: UsbFileService) -> None:
    @mcp.tool(name="list_volumes")
    async def list_volumes() -> List[Dict[str, Any]]:
        """List attached USB volumes in attach order."""
        return [v.to_dict() for v in service.volumes()]

    @mcp.tool(name="wait_for_volume")
    async def wait_for_volume(timeout_seconds: float = 30.0) -> Optional[Dict[str, Any]]:
        """Wait until a USB volume is attached.

        Returns an already-attached volume immediately. Otherwise waits up
        to `timeout_seconds` and returns None if nothing was attached.
        """
        if timeout_seconds <= 0:
            raise ValidationError("timeout_seconds must be positive")

        async with await service.register() as session:
            volume = await session.next_volume(timeout=timeout_seconds)

        return volume.to_dict() if volume is not None else None
