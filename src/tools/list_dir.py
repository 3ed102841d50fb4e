"""MCP tool that lists a directory on an attached USB volume.

Registers the 'list_dir' tool which adapts UsbFileService.list_dir to the
MCP tool interface used by prompts and agents.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from mcp.server.fastmcp import FastMCP

from service.facade import UsbFileService


def register(mcp: FastMCP, *, service: UsbFileService) -> None:
    @mcp.tool(name="list_dir")
    async def list_dir(path: str = "", volume_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """List the immediate children of a directory on a USB volume.

        Params:
          - path: directory path relative to the volume root, segments
            separated by "/" (default: "" for the root). A leading "/" is ignored.
          - volume_id: volume to use (default: the first attached volume).

        Returns:
          Entries sorted by name, each with name, full_path, kind,
          is_directory, size (files only), last_modified, created_at and
          last_accessed.

        Raises:
          VolumeGoneError, NotFoundError, NotADirError, PathEscapeError or
          VolumeIOError.
        """
        entries = await service.list_dir(path, volume_id)
        return [e.to_dict() for e in entries]
