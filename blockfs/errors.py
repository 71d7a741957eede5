"""Errors raised by block devices, partitions and file systems."""

from __future__ import annotations

import enum


class FsError(Exception):
    """Base class for every storage error."""


class EntryNotFound(FsError):
    """The file or directory was not found."""


class NotInSector(FsError):
    """The entry is not in the sector that was searched."""


class EndOfFile(FsError):
    """The end of the file or cluster chain was reached."""


class WriteZero(FsError):
    """A write stored no bytes because no space is left."""


class NotADirectory(FsError):
    """The entry is not a directory."""


class NotAFile(FsError):
    """The entry is not a file."""


class ReadOnly(FsError):
    """The file is read-only."""


class InvalidOperation(FsError):
    """The operation is not valid for this object."""


class NotSupported(FsError):
    """The operation is not supported."""


class BadCluster(FsError):
    """The cluster is marked as bad."""


class InvalidOffset(FsError):
    """The block offset lies outside the device."""


class InvalidPath(FsError):
    """The path cannot be used."""

    def __init__(self, path):
        super().__init__(f"invalid path: {path!r}")
        self.path = path


class FilenameErrorKind(enum.Enum):
    """Reasons a file name can be rejected."""

    INVALID_CHARACTER = "invalid character"
    FILENAME_EMPTY = "file name is empty"
    NAME_TOO_LONG = "name too long for the 8.3 format"
    MISPLACED_PERIOD = "misplaced period"
    UTF8_ERROR = "file name is not valid UTF-8"
    UNABLE_TO_PARSE = "unable to parse file entry"


class FilenameError(FsError):
    """The file name is invalid."""

    def __init__(self, kind):
        super().__init__(kind.value)
        self.kind = kind


class DeviceErrorKind(enum.Enum):
    """Reasons a device operation can fail."""

    BUSY = "device is busy"
    UNKNOWN_DEVICE = "unknown device"
    UNKNOWN = "unknown error"
    INVALID_OPERATION = "invalid operation"
    READ_ERROR = "read error"
    WRITE_ERROR = "write error"
    WITH_STATUS = "device error status"


class DeviceError(FsError):
    """The underlying device reported an error."""

    def __init__(self, kind, status=None):
        if kind is DeviceErrorKind.WITH_STATUS and status is None:
            raise ValueError("a status code is required for WITH_STATUS")
        message = kind.value if status is None else f"{kind.value}: {status}"
        super().__init__(message)
        self.kind = kind
        self.status = status