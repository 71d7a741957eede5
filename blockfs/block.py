"""Fixed-size blocks and the block device interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

SECTOR_SIZE = 512
PAGE_SIZE = 4096


class Block:
    """An immutable block of bytes of a fixed size."""

    def __init__(self, data=None, size=SECTOR_SIZE):
        if size <= 0:
            raise ValueError("block size must be positive")
        contents = bytes(size) if data is None else bytes(data)
        if len(contents) != size:
            raise ValueError(f"block needs {size} bytes, got {len(contents)}")
        self.size = size
        self._contents = contents

    def __bytes__(self):
        return self._contents

    def __len__(self):
        return self.size

    def __getitem__(self, index):
        return self._contents[index]

    def __str__(self):
        lines = ["Block:"]
        for start in range(0, self.size, 32):
            chunk = self._contents[start:start + 32]
            words = (
                f"{int.from_bytes(chunk[i:i + 8], 'big'):016x}"
                for i in range(0, len(chunk), 8)
            )
            lines.append("    " + " ".join(words))
        return "\n".join(lines) + "\n"


class BlockDevice(ABC):
    """A device addressed in whole blocks."""

    BLOCK_SIZE = SECTOR_SIZE

    @abstractmethod
    def block_count(self):
        """Return the number of blocks on the device."""

    @abstractmethod
    def read_block(self, offset):
        """Return the block at ``offset``."""

    @abstractmethod
    def write_block(self, offset, block):
        """Store ``block`` at ``offset``."""

    def block_size(self):
        """Return the size of one block in bytes."""
        return self.BLOCK_SIZE