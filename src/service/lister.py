from __future__ import annotations

from typing import Dict, List

from core.errors import NotADirError
from core.interfaces import HostVolumeAPI
from core.logging_config import get_logger
from core.models import Entry, Volume
from service.resolver import open_directory

log = get_logger(__name__)


class DirectoryLister:
    # Immediate children of a directory, sorted by name

    def __init__(self, host: HostVolumeAPI) -> None:
        self._host = host

    async def list(self, volume: Volume, entry: Entry) -> List[Entry]:
        if not entry.is_directory:
            raise NotADirError(f"Not a directory: {entry.full_path}")

        children = await open_directory(self._host, volume, entry.path)

        # Hosts should not report a name twice; keep the first if one does
        by_name: Dict[str, Entry] = {}
        for child in children:
            by_name.setdefault(child.name, Entry.from_host(entry.path, child))

        out = [by_name[name] for name in sorted(by_name)]
        log.info(
            "directory_listed",
            volume_id=volume.volume_id,
            path=entry.full_path,
            count=len(out),
        )
        return out
