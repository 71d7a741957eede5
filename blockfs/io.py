"""Byte stream interfaces and open-file handles."""

from __future__ import annotations

import enum
import os
from abc import ABC, abstractmethod

from blockfs.errors import NotSupported, WriteZero

_READ_CHUNK = 512


class SeekFrom(enum.IntEnum):
    """Reference point for a seek."""

    START = os.SEEK_SET
    CURRENT = os.SEEK_CUR
    END = os.SEEK_END


def _refuse(stream, operation, detail=""):
    """Raise NotSupported naming the stream type and the refused operation."""
    message = f"{type(stream).__name__} does not support {operation}"
    if detail:
        message = f"{message} ({detail})"
    raise NotSupported(message)


class FileIO(ABC):
    """A readable, optionally writable and seekable byte stream."""

    @abstractmethod
    def read(self, size):
        """Return up to ``size`` bytes; an empty result means end of file."""

    def read_all(self):
        """Read until end of file and return everything read."""
        chunks = []
        while chunk := self.read(_READ_CHUNK):
            chunks.append(chunk)
        return b"".join(chunks)

    def write(self, data):
        """Write ``data`` and return how many bytes were stored."""
        _refuse(self, "write", f"{len(data)} bytes")

    def flush(self):
        """Push buffered data to its destination."""
        _refuse(self, "flush")

    def write_all(self, data):
        """Write all of ``data``, raising WriteZero if the stream stops taking it."""
        remaining = bytes(data)
        while remaining:
            written = self.write(remaining)
            if written == 0:
                raise WriteZero()
            remaining = remaining[written:]

    def seek(self, offset, whence=SeekFrom.START):
        """Move the position and return the new absolute offset."""
        _refuse(self, "seek", f"offset {offset} from {SeekFrom(whence).name}")


class FileHandle:
    """An open file together with its metadata."""

    def __init__(self, meta, file):
        self.meta = meta
        self.file = file

    def read(self, size=-1):
        if size < 0:
            return self.file.read_all()
        return self.file.read(size)

    def read_all(self):
        return self.file.read_all()

    def write(self, data):
        return self.file.write(data)

    def flush(self):
        return self.file.flush()

    def seek(self, offset, whence=SeekFrom.START):
        return self.file.seek(offset, whence)

    def __repr__(self):
        return f"FileHandle(meta={self.meta!r})"