"""MCP tool that reads a text file from an attached USB volume.

Registers the 'read_as_text' tool which validates inputs before
delegating to UsbFileService.read_as_text.
"""

from __future__ import annotations

from typing import Optional

from mcp.server.fastmcp import FastMCP

from core.errors import ValidationError
from service.facade import UsbFileService


def register(mcp: FastMCP, *, service: UsbFileService) -> None:
    @mcp.tool(name="read_as_text")
    async def read_as_text(
        path: str = "",
        volume_id: Optional[str] = None,
        encoding: Optional[str] = None,
    ) -> str:
        """Read a file on a USB volume and return it as text.

        Params:
          - path: file path relative to the volume root (required).
          - volume_id: volume to use (default: the first attached volume).
          - encoding: text encoding to decode with (default: UTF-8, with
            the configured fallback, then replacement characters).

        Returns:
          The complete decoded file contents.

        Raises:
          ValidationError for a missing path; VolumeGoneError, NotFoundError,
          NotAFileError, PathEscapeError, TooLargeError or VolumeIOError.
        """
        if not path or not path.strip():
            raise ValidationError("Missing file path")

        return await service.read_as_text(path, volume_id, encoding=encoding or None)
