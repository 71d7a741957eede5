"""Master Boot Record partition tables."""

from __future__ import annotations

import logging

from blockfs.fields import U8Field, U32Field
from blockfs.partition import Partition, PartitionTable

logger = logging.getLogger(__name__)

ENTRY_SIZE = 16
TABLE_OFFSET = 0x1BE
ENTRY_COUNT = 4
ACTIVE_STATUS = 0x80


class MbrPartition:
    """One 16-byte partition entry of an MBR."""

    status = U8Field(0x00)
    begin_head = U8Field(0x01)
    partition_type = U8Field(0x04)
    end_head = U8Field(0x05)
    begin_lba = U32Field(0x08)
    total_lba = U32Field(0x0C)

    def __init__(self, data=None):
        raw = bytes(ENTRY_SIZE) if data is None else bytes(data)
        if len(raw) != ENTRY_SIZE:
            raise ValueError(f"partition entry needs {ENTRY_SIZE} bytes, got {len(raw)}")
        self.data = raw

    @classmethod
    def parse(cls, data):
        """Parse an entry from 16 bytes."""
        return cls(data)

    def is_active(self):
        return self.status == ACTIVE_STATUS

    def begin_sector(self):
        return self.data[2] & 0x3F

    def begin_cylinder(self):
        return ((self.data[2] >> 6) << 8) | self.data[3]

    def end_sector(self):
        return self.data[6] & 0x3F

    def end_cylinder(self):
        return ((self.data[6] >> 6) << 8) | self.data[7]

    def __repr__(self):
        return (
            "MbrPartition("
            f"active={self.is_active()}, "
            f"begin_head=0x{self.begin_head:02x}, "
            f"begin_sector=0x{self.begin_sector():04x}, "
            f"begin_cylinder=0x{self.begin_cylinder():04x}, "
            f"partition_type=0x{self.partition_type:02x}, "
            f"end_head=0x{self.end_head:02x}, "
            f"end_sector=0x{self.end_sector():04x}, "
            f"end_cylinder=0x{self.end_cylinder():04x}, "
            f"begin_lba=0x{self.begin_lba:08x}, "
            f"total_lba=0x{self.total_lba:08x})"
        )


class MbrTable(PartitionTable):
    """The four-entry partition table held in the first sector of a disk."""

    def __init__(self, inner, entries):
        entries = list(entries)
        if len(entries) != ENTRY_COUNT:
            raise ValueError(f"an MBR holds {ENTRY_COUNT} entries, got {len(entries)}")
        self.inner = inner
        self.entries = entries

    @classmethod
    def parse(cls, inner):
        sector = bytes(inner.read_block(0))
        entries = []
        for index in range(ENTRY_COUNT):
            start = TABLE_OFFSET + index * ENTRY_SIZE
            entry = MbrPartition.parse(sector[start:start + ENTRY_SIZE])
            if entry.is_active():
                logger.debug("Partition %d: %r", index, entry)
            entries.append(entry)
        return cls(inner, entries)

    def partitions(self):
        return [
            Partition(self.inner, entry.begin_lba, entry.total_lba)
            for entry in self.entries
            if entry.is_active()
        ]