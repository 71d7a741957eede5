"""FAT16 directory entries, short file names, clusters and directories."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from blockfs.errors import FilenameError, FilenameErrorKind
from blockfs.metadata import FileType, Metadata

_U32_MAX = 0xFFFF_FFFF
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Bytes that may not appear in a short file name.
_INVALID_NAME_BYTES = frozenset(range(0x00, 0x21)) | frozenset(
    {0x22, 0x2A, 0x2B, 0x2C, 0x2F, 0x3A, 0x3B, 0x3C, 0x3D, 0x3E, 0x3F, 0x5B, 0x5C, 0x5D, 0x7C}
)
_PERIOD = ord(".")
_PADDING = 0x20
_UNUSED_MARKER = 0xE5
_NAME_LEN = 8
_EXT_LEN = 3


@dataclass(frozen=True, repr=False)
class Cluster:
    """A cluster number on a FAT volume."""

    value: int

    def __post_init__(self):
        if not 0 <= self.value <= _U32_MAX:
            raise OverflowError(f"cluster number out of range: {self.value}")

    def __add__(self, other):
        if isinstance(other, Cluster):
            other = other.value
        if not isinstance(other, int):
            return NotImplemented
        return Cluster(self.value + other)

    def __str__(self):
        return f"0x{self.value:08X}"

    __repr__ = __str__


Cluster.INVALID = Cluster(0xFFFF_FFF6)
Cluster.BAD = Cluster(0xFFFF_FFF7)
Cluster.EMPTY = Cluster(0x0000_0000)
# The FAT16 root directory lives in a reserved region and has no real number.
Cluster.ROOT_DIR = Cluster(0xFFFF_FFFC)
Cluster.END_OF_FILE = Cluster(0xFFFF_FFFF)


class Attributes(enum.IntFlag):
    """Attribute bits of a directory entry."""

    READ_ONLY = 0x01
    HIDDEN = 0x02
    SYSTEM = 0x04
    VOLUME_ID = 0x08
    DIRECTORY = 0x10
    ARCHIVE = 0x20
    LFN = 0x0F

    @classmethod
    def from_bits_truncate(cls, bits):
        """Build the flags from ``bits``, dropping unknown bits."""
        return cls(bits & 0x3F)

    def contains(self, other):
        """Return True if every bit of ``other`` is set."""
        return (self & other) == other


def parse_datetime(time):
    """Decode a packed FAT date and time; invalid values give the Unix epoch."""
    year = (time >> 25) + 1980
    month = (time >> 21) & 0x0F
    day = (time >> 16) & 0x1F
    hour = (time >> 11) & 0x1F
    minute = (time >> 5) & 0x3F
    second = (time & 0x1F) * 2
    try:
        return datetime(year, month, day, hour, minute, second, tzinfo=timezone.utc)
    except ValueError:
        return _EPOCH


@dataclass(frozen=True)
class ShortFileName:
    """An 8.3 file name: eight name bytes and three extension bytes."""

    name: bytes
    ext: bytes

    def __init__(self, name, ext):
        name = bytes(name)
        ext = bytes(ext)
        if len(name) != _NAME_LEN or len(ext) != _EXT_LEN:
            raise ValueError("a short file name needs 8 name bytes and 3 extension bytes")
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "ext", ext)

    @classmethod
    def from_bytes(cls, buf):
        """Take the name from the first 11 bytes of ``buf``."""
        raw = bytes(buf[:_NAME_LEN + _EXT_LEN])
        if len(raw) != _NAME_LEN + _EXT_LEN:
            raise FilenameError(FilenameErrorKind.UNABLE_TO_PARSE)
        return cls(raw[:_NAME_LEN], raw[_NAME_LEN:])

    @staticmethod
    def _decode(raw):
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise FilenameError(FilenameErrorKind.UTF8_ERROR) from exc

    def basename(self):
        return self._decode(self.name)

    def extension(self):
        return self._decode(self.ext)

    def is_eod(self):
        """Return True if this marks the end of a directory listing."""
        return self.name[0] == 0x00 and self.ext[0] == 0x00

    def is_unused(self):
        """Return True if the entry has been deleted."""
        return self.name[0] == _UNUSED_MARKER

    def matches(self, other):
        return self.name == other.name and self.ext == other.ext

    @classmethod
    def parse(cls, name):
        """Parse a user-facing file name such as ``kernel.elf`` into 8.3 form."""
        base = bytearray([_PADDING] * _NAME_LEN)
        ext = bytearray([_PADDING] * _EXT_LEN)
        idx = 0
        seen_dot = False
        for ch in name.encode("utf-8"):
            if ch in _INVALID_NAME_BYTES:
                raise FilenameError(FilenameErrorKind.INVALID_CHARACTER)
            if ch == _PERIOD:
                if 1 <= idx <= _NAME_LEN:
                    seen_dot = True
                    idx = _NAME_LEN
                    continue
                raise FilenameError(FilenameErrorKind.MISPLACED_PERIOD)
            upper = bytes([ch]).upper()[0]
            if seen_dot:
                if not _NAME_LEN <= idx < _NAME_LEN + _EXT_LEN:
                    raise FilenameError(FilenameErrorKind.NAME_TOO_LONG)
                ext[idx - _NAME_LEN] = upper
            elif idx < _NAME_LEN:
                base[idx] = upper
            else:
                raise FilenameError(FilenameErrorKind.NAME_TOO_LONG)
            idx += 1
        if idx == 0:
            raise FilenameError(FilenameErrorKind.FILENAME_EMPTY)
        return cls(bytes(base), bytes(ext))

    def __str__(self):
        if self.ext[0] == _PADDING:
            return self.basename().rstrip()
        return f"{self.basename().rstrip()}.{self.extension().rstrip()}"


@dataclass(frozen=True)
class DirEntry:
    """A 32-byte FAT directory entry in the standard 8.3 format."""

    filename: ShortFileName
    modified_time: datetime
    created_time: datetime
    accessed_time: datetime
    cluster: Cluster
    attributes: Attributes
    size: int

    LEN = 0x20

    def is_valid(self):
        return not self.filename.is_eod() and not self.filename.is_unused()

    def is_long_name(self):
        return self.attributes.contains(Attributes.LFN)

    def is_directory(self):
        return self.attributes.contains(Attributes.DIRECTORY)

    def is_eod(self):
        return self.filename.is_eod()

    def display_name(self):
        """Return the printable name, or ``unknown`` for unusable or long-name entries."""
        if self.is_valid() and not self.is_long_name():
            return str(self.filename)
        return "unknown"

    @classmethod
    def parse(cls, data):
        """Parse an entry from 32 bytes."""
        raw = bytes(data[:cls.LEN])
        if len(raw) != cls.LEN:
            raise FilenameError(FilenameErrorKind.UNABLE_TO_PARSE)
        filename = ShortFileName.from_bytes(raw[:11])
        modified_time = parse_datetime(int.from_bytes(raw[22:26], "little"))
        created_time = parse_datetime(int.from_bytes(raw[14:18], "little"))
        accessed_time = parse_datetime((raw[18] << 16) | (raw[19] << 24))
        cluster = raw[26] | (raw[27] << 8) | (raw[20] << 16) | (raw[21] << 24)
        return cls(
            filename=filename,
            modified_time=modified_time,
            created_time=created_time,
            accessed_time=accessed_time,
            cluster=Cluster(cluster),
            attributes=Attributes.from_bits_truncate(raw[11]),
            size=int.from_bytes(raw[28:32], "little"),
        )

    def as_meta(self):
        return Metadata(
            name=self.display_name(),
            entry_type=FileType.DIRECTORY if self.is_directory() else FileType.FILE,
            length=self.size,
            created=self.created_time,
            modified=self.modified_time,
            accessed=self.accessed_time,
        )


class Directory:
    """A directory: its starting cluster and, except for the root, its entry."""

    def __init__(self, cluster, entry: Optional[DirEntry] = None):
        self.cluster = cluster
        self.entry = entry

    @classmethod
    def root(cls):
        return cls(Cluster.ROOT_DIR)

    @classmethod
    def from_entry(cls, entry):
        return cls(entry.cluster, entry)

    def __str__(self):
        return f"Directory(cluster: {self.cluster}, entry: {self.entry!r})"

    __repr__ = __str__