"""MCP tool that checks whether a path exists on an attached USB volume."""

from __future__ import annotations

from typing import Optional

from mcp.server.fastmcp import FastMCP

from core.errors import ValidationError
from service.facade import UsbFileService


def register(mcp: FastMCP, *, service: UsbFileService) -> None:
    @mcp.tool(name="exists")
    async def exists(path: str = "", volume_id: Optional[str] = None) -> bool:
        """Return True if `path` names a file or directory on the volume."""
        if not path or not path.strip():
            raise ValidationError("Missing path")

        return await service.exists(path, volume_id)
