# blockfs

A small library with no dependencies for reading disk images. It parses MBR
partition tables and reads files and directories from FAT16 volumes on top of
any block device you provide.

## Install

    pip install blockfs

## Concepts

- `BlockDevice` (in `blockfs.block`) is the interface for storage. Implement
  `block_count()`, `read_block(offset)` and `write_block(offset, block)`.
  `read_block` returns a `Block`, which is an immutable run of bytes with a
  fixed size. The default size is 512 bytes, and `bytes(block)` gives the
  contents.
- `MbrTable` (in `blockfs.mbr`) reads the first sector of a disk with
  `MbrTable.parse(device)`. Its `partitions()` method returns the active
  entries as `Partition` objects (in `blockfs.partition`). These are block
  devices in their own right. Their block offsets count from the start of the
  partition, and an offset outside the partition raises `InvalidOffset`.
  `MbrPartition` exposes the raw fields of each entry.
- `Fat16` (in `blockfs.fat16`) is a `FileSystem` (in `blockfs.filesystem`)
  over a block device that holds a FAT16 volume:
  - `read_dir(path)` returns an iterator of `Metadata`.
  - `metadata(path)` returns the entry's `Metadata`. For `"/"` it returns the
    root directory.
  - `exists(path)` returns `True` or `False`.
  - `open_file(path)` returns a `FileHandle` (in `blockfs.io`) for reading.
- `Fat16Bpb` (in `blockfs.bpb`) decodes the boot sector.
- `DirEntry` and `ShortFileName` (in `blockfs.direntry`) decode directory
  entries and 8.3 names.
- `Metadata` (in `blockfs.metadata`) has the fields `name`, `entry_type` (a
  `FileType`), `length`, `created`, `modified` and `accessed`, plus the
  methods `is_file()` and `is_dir()`.
- `Mount` (in `blockfs.filesystem`) wraps a file system under a path prefix.
  It strips that prefix from every path before passing the call on.
- Failures raise subclasses of `FsError` (in `blockfs.errors`), such as
  `EntryNotFound`, `NotADirectory`, `NotAFile`, `InvalidOffset`,
  `FilenameError` or `NotSupported`.
- `Syscall` (in `blockfs.syscall`) is an `IntEnum` of system call numbers.
  Any number it does not know maps to `Syscall.UNKNOWN`.

## Example

    from blockfs.block import Block, BlockDevice
    from blockfs.mbr import MbrTable
    from blockfs.fat16 import Fat16

    class ImageDevice(BlockDevice):
        def __init__(self, data: bytes):
            self.data = data

        def block_count(self):
            return len(self.data) // 512

        def read_block(self, offset):
            start = offset * 512
            return Block(self.data[start:start + 512], 512)

        def write_block(self, offset, block):
            raise NotImplementedError

    with open("disk.img", "rb") as f:
        disk = ImageDevice(f.read())

    partition = MbrTable.parse(disk).partitions()[0]
    fs = Fat16(partition)

    for meta in fs.read_dir("/"):
        print(meta.name, meta.length, "dir" if meta.is_dir() else "file")

    handle = fs.open_file("/KERNEL.ELF")
    data = handle.read_all()

File names follow the FAT 8.3 short-name rules. Names are upper-cased before
they are matched.

## What it does not do

- FAT16 volumes are read-only. `create_file`, `remove_file`, `copy_file` and
  the other operations that change a volume raise `NotSupported`.
- Files opened on a FAT16 volume are read from the start to the end only.
  `write`, `flush` and `seek` on them raise `NotSupported`.
- Long file names are not supported. Entries that carry them are skipped when
  a directory is listed.
- There is no command-line tool. The package is a library only.

## Tests

    pip install blockfs[test]
    pytest