"""Data model shared by the hosts, the service and the MCP tools.

Volumes are mutable (they get detached); entries, host entries and host
events are immutable snapshots.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Literal, Optional

from core.errors import VolumeGoneError
from core.paths import Segments, join_segments


HostEventKind = Literal["attach", "detach"]


class VolumeState(str, Enum):
    ATTACHED = "attached"
    DETACHED = "detached"


class EntryKind(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class HostEvent:
    """Attach/detach notification emitted by a host."""

    kind: HostEventKind
    volume_id: str
    label: Optional[str] = None


@dataclass(frozen=True)
class HostEntry:
    """A directory child as reported by the host."""

    name: str
    is_directory: bool
    size: Optional[int] = None
    modified_at: Optional[float] = None
    created_at: Optional[float] = None
    accessed_at: Optional[float] = None


@dataclass(frozen=True)
class Entry:
    """A resolved file or directory on a volume.

    Field groups:
    - Location: path (segments relative to the volume root)
    - Kind: kind, size (files only)
    - Timestamps: modified_at, created_at, accessed_at (POSIX seconds)
    """

    path: Segments
    kind: EntryKind
    size: Optional[int] = None

    modified_at: Optional[float] = None
    created_at: Optional[float] = None
    accessed_at: Optional[float] = None

    @property
    def name(self) -> str:
        return self.path[-1] if self.path else ""

    @property
    def full_path(self) -> str:
        return join_segments(self.path)

    @property
    def is_directory(self) -> bool:
        return self.kind is EntryKind.DIRECTORY

    @classmethod
    def root(cls) -> "Entry":
        return cls(path=tuple(), kind=EntryKind.DIRECTORY)

    @classmethod
    def from_host(cls, parent: Segments, host_entry: HostEntry) -> "Entry":
        is_dir = host_entry.is_directory
        return cls(
            path=tuple(parent) + (host_entry.name,),
            kind=EntryKind.DIRECTORY if is_dir else EntryKind.FILE,
            size=None if is_dir else int(host_entry.size or 0),
            modified_at=host_entry.modified_at,
            created_at=host_entry.created_at,
            accessed_at=host_entry.accessed_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "name": self.name,
            "full_path": self.full_path,
            "kind": self.kind.value,
            "is_directory": self.is_directory,
            "last_modified": self.modified_at,
            "created_at": self.created_at,
            "last_accessed": self.accessed_at,
        }
        if not self.is_directory:
            out["size"] = self.size
        return out


@dataclass(eq=False)
class Volume:
    """An attached USB mass-storage volume.

    Created and invalidated only by the watcher. `io_lock` serializes host
    calls against this volume and is held for one call at a time.
    """

    volume_id: str
    label: str
    generation: int = 1
    state: VolumeState = VolumeState.ATTACHED
    attached_at: float = field(default_factory=time.time)
    io_lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    @property
    def is_attached(self) -> bool:
        return self.state is VolumeState.ATTACHED

    def ensure_attached(self) -> None:
        if self.state is not VolumeState.ATTACHED:
            raise VolumeGoneError(f"Volume detached: {self.volume_id}")

    def invalidate(self) -> None:
        self.state = VolumeState.DETACHED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "volume_id": self.volume_id,
            "label": self.label,
            "generation": self.generation,
            "state": self.state.value,
            "attached_at": self.attached_at,
        }
