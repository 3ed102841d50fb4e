from __future__ import annotations


class UsbFileError(Exception):
    """Base error for the USB file service.

    `kind` is the stable tag reported on the caller's error channel.
    """

    kind = "UsbFileError"


class ValidationError(UsbFileError):
    """Raised when user input is invalid."""

    kind = "Validation"


class WatcherUnavailableError(UsbFileError):
    """Raised when the host cannot observe USB attach/detach events."""

    kind = "WatcherUnavailable"


class VolumeGoneError(UsbFileError):
    """Raised when the target volume is detached (or was never attached)."""

    kind = "VolumeGone"


class NotFoundError(UsbFileError):
    """Raised when a path segment does not exist on the volume."""

    kind = "NotFound"


class NotADirError(UsbFileError):
    """Raised when a directory was required but a file was found."""

    kind = "NotADirectory"


class NotAFileError(UsbFileError):
    """Raised when a file was required but a directory was found."""

    kind = "NotAFile"


class PathEscapeError(UsbFileError):
    """Raised when a path would resolve outside the volume root."""

    kind = "PathEscape"


class VolumeIOError(UsbFileError):
    """Raised when the host fails to read from the volume."""

    kind = "IOError"


class TooLargeError(UsbFileError):
    """Raised when a file exceeds the configured read limit."""

    kind = "TooLarge"
