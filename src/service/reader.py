"""File reading and text decoding.

Files are read in bounded chunks (one host call per chunk, each under the
volume's I/O lock) and only decoded once complete. Decoding policy, first
match wins:

1. the caller's encoding, strict;
2. UTF-8, strict, leading BOM removed;
3. the configured fallback encoding, strict (skipped when empty);
4. UTF-8 with U+FFFD replacement characters, leading BOM removed.

The result therefore depends only on the bytes and the configuration.
"""

from __future__ import annotations

import codecs
from typing import List, Optional

from core.errors import NotAFileError, TooLargeError, ValidationError, VolumeGoneError, VolumeIOError
from core.interfaces import HostVolumeAPI
from core.logging_config import get_logger
from core.models import Entry, Volume

log = get_logger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024
DEFAULT_MAX_BYTES = 10 * 1024 * 1024


def decode_text(data: bytes, *, encoding: Optional[str] = None, fallback_encoding: str = "") -> str:
    """Decode file bytes following the module's decoding policy."""
    if encoding:
        try:
            return data.decode(encoding)
        except LookupError as e:
            raise VolumeIOError(f"Unknown encoding: {encoding}") from e
        except UnicodeDecodeError as e:
            raise VolumeIOError(f"File is not valid {encoding}: {e}") from e

    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        pass

    if fallback_encoding:
        try:
            return data.decode(fallback_encoding)
        except (LookupError, UnicodeDecodeError):
            pass

    return data.decode("utf-8-sig", errors="replace")


class FileReader:
    def __init__(
        self,
        host: HostVolumeAPI,
        *,
        max_bytes: int = DEFAULT_MAX_BYTES,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        fallback_encoding: str = "",
    ) -> None:
        if int(max_bytes) <= 0:
            raise ValidationError("max_bytes must be positive")
        if int(chunk_size) <= 0:
            raise ValidationError("chunk_size must be positive")

        self._host = host
        self._max_bytes = int(max_bytes)
        self._chunk_size = int(chunk_size)
        self._fallback_encoding = self._check_fallback(fallback_encoding)

    @staticmethod
    def _check_fallback(name: str) -> str:
        name = (name or "").strip()
        if not name:
            return ""
        try:
            return codecs.lookup(name).name
        except LookupError as e:
            raise ValidationError(f"Unknown fallback encoding: {name}") from e

    async def read_bytes(self, volume: Volume, entry: Entry) -> bytes:
        if entry.is_directory:
            raise NotAFileError(f"Not a file: {entry.full_path}")
        if entry.size is not None and entry.size > self._max_bytes:
            raise TooLargeError(f"File too large: {entry.full_path} ({entry.size} > {self._max_bytes} bytes)")

        chunks: List[bytes] = []
        offset = 0
        while True:
            chunk = await self._read_chunk(volume, entry, offset)

            offset += len(chunk)
            if offset > self._max_bytes:
                # File grew past the limit after it was resolved
                raise TooLargeError(f"File too large: {entry.full_path} (> {self._max_bytes} bytes)")

            if chunk:
                chunks.append(chunk)
            if len(chunk) < self._chunk_size:
                break

        volume.ensure_attached()
        return b"".join(chunks)

    async def _read_chunk(self, volume: Volume, entry: Entry, offset: int) -> bytes:
        volume.ensure_attached()
        try:
            async with volume.io_lock:
                volume.ensure_attached()
                chunk = await self._host.read_file(volume.volume_id, entry.path, offset, self._chunk_size)
        except OSError as e:
            if not volume.is_attached:
                raise VolumeGoneError(f"Volume detached: {volume.volume_id}") from e
            raise VolumeIOError(f"Failed to read {entry.full_path}: {e}") from e

        # Detach during the host call wins over any bytes it produced
        volume.ensure_attached()
        return chunk

    async def read_text(self, volume: Volume, entry: Entry, encoding: Optional[str] = None) -> str:
        data = await self.read_bytes(volume, entry)
        text = decode_text(data, encoding=encoding, fallback_encoding=self._fallback_encoding)

        log.info(
            "file_read",
            volume_id=volume.volume_id,
            path=entry.full_path,
            bytes=len(data),
        )
        return text
