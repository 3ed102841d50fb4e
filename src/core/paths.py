from __future__ import annotations

from typing import Tuple

from core.errors import PathEscapeError

"""
Path utilities used across the project.

Volume paths are POSIX-style, relative to the volume root, and use '/'
as the only separator. Callers may send a leading '/', which is ignored.
"""

Segments = Tuple[str, ...]

_FORBIDDEN_SEGMENTS = frozenset({".", ".."})


def normalize_posix_relpath(p: str) -> str:
    """Normalize a user path to a clean POSIX relative path.

    Converts backslashes to '/', trims whitespace and removes leading '/'.
    """
    s = (p or "").strip()
    s = s.replace("\\", "/")        # Unify path separators across OSes.
    s = s.lstrip("/")               # Volume paths are always root-relative.
    return s


def split_posix(p: str) -> Segments:
    """Split a POSIX path into non-empty segments."""
    s = normalize_posix_relpath(p).strip("/")
    if not s:
        return tuple()
    return tuple(seg for seg in s.split("/") if seg)


def split_volume_path(p: str) -> Segments:
    """Split a caller path into validated volume segments.

    Empty segments are collapsed. '.' and '..' are rejected outright so a
    path can never walk above the volume root, whatever exists on the host.
    """
    segments = split_posix(p)
    for seg in segments:
        if seg in _FORBIDDEN_SEGMENTS:
            raise PathEscapeError(f"Path segment not allowed: {seg!r} in {p!r}")
    return segments


def join_segments(segments: Segments) -> str:
    return "/".join(segments)
