"""File entry metadata."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


class FileType(enum.Enum):
    """Kind of a file system entry."""

    FILE = "file"
    DIRECTORY = "directory"


@dataclass
class Metadata:
    """Name, kind, length and timestamps of an entry."""

    name: str
    entry_type: FileType
    length: int = 0
    created: Optional[datetime] = None
    modified: Optional[datetime] = None
    accessed: Optional[datetime] = None

    def is_file(self):
        return self.entry_type is FileType.FILE

    def is_dir(self):
        return self.entry_type is FileType.DIRECTORY