"""A read-only FAT16 file system on top of a block device."""

from __future__ import annotations

import logging

from blockfs.bpb import Fat16Bpb
from blockfs.direntry import Cluster, DirEntry, Directory, ShortFileName
from blockfs.errors import (
    BadCluster,
    EndOfFile,
    EntryNotFound,
    InvalidOperation,
    NotADirectory,
    NotAFile,
    NotInSector,
)
from blockfs.filesystem import PATH_SEPARATOR, FileSystem
from blockfs.io import FileHandle, FileIO
from blockfs.metadata import FileType, Metadata

logger = logging.getLogger(__name__)

BLOCK_SIZE = 512

_FAT_ENTRY_SIZE = 2
_BAD_CLUSTER_MARK = 0xFFF7
_END_OF_CHAIN_MIN = 0xFFF8


class Fat16Impl:
    """The volume layout and the low-level operations of a FAT16 file system."""

    def __init__(self, inner):
        self.inner = inner
        self.bpb = Fat16Bpb(bytes(inner.read_block(0)))
        logger.debug("Loading Fat16 volume: %r", self.bpb)

        root_dir_bytes = self.bpb.root_entries_count * DirEntry.LEN
        root_dir_size = -(-root_dir_bytes // BLOCK_SIZE)
        self.fat_start = self.bpb.reserved_sector_count
        self.first_root_dir_sector = self.fat_start + self.bpb.fat_count * self.bpb.sectors_per_fat
        self.first_data_sector = self.first_root_dir_sector + root_dir_size

    def cluster_to_sector(self, cluster):
        """Return the first sector of ``cluster``."""
        if cluster == Cluster.ROOT_DIR:
            return self.first_root_dir_sector
        return (cluster.value - 2) * self.bpb.sectors_per_cluster + self.first_data_sector

    def next_cluster(self, cluster):
        """Look up the cluster that follows ``cluster`` in the FAT."""
        fat_offset = cluster.value * _FAT_ENTRY_SIZE
        fat_sector = self.fat_start + fat_offset // BLOCK_SIZE
        offset = fat_offset % BLOCK_SIZE
        sector = bytes(self.inner.read_block(fat_sector))
        fat_entry = int.from_bytes(sector[offset:offset + _FAT_ENTRY_SIZE], "little")
        if fat_entry == _BAD_CLUSTER_MARK:
            raise BadCluster(f"cluster {cluster} is followed by a bad cluster")
        if fat_entry >= _END_OF_CHAIN_MIN:
            raise EndOfFile(f"cluster {cluster} ends its chain")
        return Cluster(fat_entry)

    def _directory_sectors(self, directory):
        """Yield every sector that holds entries of ``directory``."""
        if directory.cluster == Cluster.ROOT_DIR:
            yield from range(self.first_root_dir_sector, self.first_data_sector)
            return
        cluster = directory.cluster
        while True:
            first = self.cluster_to_sector(cluster)
            yield from range(first, first + self.bpb.sectors_per_cluster)
            try:
                cluster = self.next_cluster(cluster)
            except (EndOfFile, BadCluster):
                return

    def _find_entry_in_sector(self, match_name, sector):
        data = bytes(self.inner.read_block(sector))
        for start in range(0, BLOCK_SIZE, DirEntry.LEN):
            try:
                entry = DirEntry.parse(data[start:start + DirEntry.LEN])
            except Exception as exc:
                raise InvalidOperation("unreadable directory entry") from exc
            if entry.filename.matches(match_name):
                return entry
        raise NotInSector()

    def find_directory_entry(self, directory, name):
        """Return the entry called ``name`` inside ``directory``."""
        match_name = ShortFileName.parse(name)
        for sector in self._directory_sectors(directory):
            try:
                return self._find_entry_in_sector(match_name, sector)
            except NotInSector:
                continue
        raise EntryNotFound(name)

    def get_parent_dir(self, path):
        """Walk ``path``: a directory resolves to itself, a file to its directory."""
        parts = iter(path.split(PATH_SEPARATOR))
        current = Directory.root()
        for part in parts:
            if not part:
                continue
            entry = self.find_directory_entry(current, part)
            if entry.is_directory():
                current = Directory.from_entry(entry)
            elif next(parts, None) is not None:
                raise NotADirectory(part)
            else:
                break
        return current

    def iterate_dir(self, directory):
        """Yield the valid short-name entries of ``directory``."""
        if directory.entry is not None:
            logger.debug("Iterating directory: %s", directory.entry.display_name())
        for sector in self._directory_sectors(directory):
            data = bytes(self.inner.read_block(sector))
            for start in range(0, BLOCK_SIZE, DirEntry.LEN):
                entry = DirEntry.parse(data[start:start + DirEntry.LEN])
                if entry.is_eod():
                    return
                if entry.is_valid() and not entry.is_long_name():
                    yield entry

    def get_dir_entry(self, path):
        """Return the entry named by the last component of ``path``."""
        parent = self.get_parent_dir(path)
        name = path.rsplit(PATH_SEPARATOR, 1)[-1]
        return self.find_directory_entry(parent, name)

    def _resolve(self, path):
        """Return the entry at ``path``, or None for the root directory."""
        parts = [part for part in path.split(PATH_SEPARATOR) if part]
        current = Directory.root()
        entry = None
        for index, part in enumerate(parts):
            entry = self.find_directory_entry(current, part)
            if index == len(parts) - 1:
                break
            if not entry.is_directory():
                raise NotADirectory(part)
            current = Directory.from_entry(entry)
        return entry

    def __repr__(self):
        return f"Fat16Impl(bpb={self.bpb!r})"


class Fat16(FileSystem):
    """A FAT16 volume exposed through the FileSystem interface."""

    def __init__(self, inner):
        self.handle = Fat16Impl(inner)

    def read_dir(self, path):
        directory = self.handle.get_parent_dir(path)
        entries = [entry.as_meta() for entry in self.handle.iterate_dir(directory)]
        return iter(entries)

    def open_file(self, path):
        entry = self.handle.get_dir_entry(path)
        if entry.is_directory():
            raise NotAFile(path)
        return FileHandle(entry.as_meta(), File(self.handle, entry))

    def metadata(self, path):
        entry = self.handle._resolve(path)
        if entry is None:
            return Metadata(name=PATH_SEPARATOR, entry_type=FileType.DIRECTORY)
        return entry.as_meta()

    def exists(self, path):
        try:
            self.handle._resolve(path)
        except (EntryNotFound, NotADirectory):
            return False
        return True

    def __repr__(self):
        return f"Fat16(bpb={self.handle.bpb!r})"


class File(FileIO):
    """A file on a FAT16 volume, read sequentially along its cluster chain."""

    def __init__(self, handle, entry):
        self.handle = handle
        self.entry = entry
        self.offset = 0
        self.current_cluster = entry.cluster

    def length(self):
        return self.entry.size

    def read(self, size=-1):
        remaining = self.length() - self.offset
        if remaining <= 0:
            return b""
        to_read = remaining if size is None or size < 0 else min(size, remaining)
        bytes_per_sector = self.handle.bpb.bytes_per_sector
        cluster_size = self.handle.bpb.sectors_per_cluster * bytes_per_sector
        chunks = []
        done = 0
        while done < to_read:
            offset_in_cluster = self.offset % cluster_size
            offset_in_sector = offset_in_cluster % bytes_per_sector
            count = min(
                to_read - done,
                BLOCK_SIZE - offset_in_sector,
                self.length() - self.offset,
            )
            sector = (
                self.handle.cluster_to_sector(self.current_cluster)
                + offset_in_cluster // bytes_per_sector
            )
            data = bytes(self.handle.inner.read_block(sector))
            chunks.append(data[offset_in_sector:offset_in_sector + count])
            self.offset += count
            done += count
            if self.offset % cluster_size == 0:
                try:
                    self.current_cluster = self.handle.next_cluster(self.current_cluster)
                except (EndOfFile, BadCluster):
                    break
        return b"".join(chunks)

    def __repr__(self):
        return f"File(entry={self.entry!r}, offset={self.offset})"