"""Factory for selecting the appropriate HostVolumeAPI implementation.

Exposes get_host_api which returns either a MountPointHost or a
MemoryHost based on the requested backend name.
"""

from __future__ import annotations

from pathlib import Path

from core.errors import ValidationError
from core.interfaces import HostVolumeAPI
from hosts.memory_host import MemoryHost
from hosts.mount_host import MountPointHost


def get_host_api(
    backend: str = "mount",
    *,
    media_root: Path,
    poll_interval: float = 2.0,
    require_mountpoint: bool = False,
) -> HostVolumeAPI:
    """
    Factory that returns the correct HostVolumeAPI implementation.

    - "mount"  -> MountPointHost polling `media_root` (default).
    - "memory" -> an empty MemoryHost; volumes are attached programmatically.
    """
    name = (backend or "mount").strip().lower()

    if name == "memory":
        return MemoryHost()

    if name == "mount":
        return MountPointHost(
            media_root=media_root,
            poll_interval=poll_interval,
            require_mountpoint=require_mountpoint,
        )

    raise ValidationError(f"Unknown host backend: {backend!r}")
