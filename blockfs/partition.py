"""Partitions of a block device and the partition table interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from blockfs.block import BlockDevice
from blockfs.errors import InvalidOffset


class Partition(BlockDevice):
    """A contiguous run of blocks on another device, addressed from zero."""

    def __init__(self, inner, offset, size):
        self.inner = inner
        self.offset = offset
        self.size = size

    def block_count(self):
        return self.inner.block_count()

    def block_size(self):
        return self.inner.block_size()

    def _translate(self, offset):
        if offset < 0 or offset >= self.size:
            raise InvalidOffset(f"block {offset} outside partition of {self.size} blocks")
        return self.offset + offset

    def read_block(self, offset):
        return self.inner.read_block(self._translate(offset))

    def write_block(self, offset, block):
        return self.inner.write_block(self._translate(offset), block)

    def __repr__(self):
        return f"Partition(offset={self.offset}, size={self.size})"


class PartitionTable(ABC):
    """A table that describes the partitions of a device."""

    @classmethod
    @abstractmethod
    def parse(cls, inner):
        """Read the table from ``inner`` and return a new instance."""

    @abstractmethod
    def partitions(self):
        """Return the list of usable partitions."""