import struct
from datetime import datetime, timezone

import pytest

from blockfs.block import Block, BlockDevice
from blockfs.direntry import Cluster, Directory
from blockfs.errors import (
    BadCluster,
    EndOfFile,
    EntryNotFound,
    FilenameError,
    InvalidOffset,
    InvalidOperation,
    NotADirectory,
    NotAFile,
    NotSupported,
)
from blockfs.fat16 import Fat16, Fat16Impl, File
from blockfs.filesystem import Mount
from blockfs.partition import Partition

BPS = 512
SPC = 2
RESERVED = 1
FATS = 2
ROOT_ENTRIES = 16
SPF = 1
TOTAL = 32
STAMP = bytes.fromhex("0fbed050")

HELLO = b"Hello, FAT16!\n"
BIG = bytes(i % 251 for i in range(2500))
NESTED = b"nested"


class MemoryDevice(BlockDevice):
    def __init__(self, sectors):
        self.sectors = [bytes(s) for s in sectors]

    def block_count(self):
        return len(self.sectors)

    def read_block(self, offset):
        if not 0 <= offset < len(self.sectors):
            raise InvalidOffset(str(offset))
        return Block(self.sectors[offset])

    def write_block(self, offset, block):
        self.sectors[offset] = bytes(block)


def _bpb():
    data = bytearray(BPS)
    data[0:3] = b"\xeb\x3c\x90"
    data[3:11] = b"mkfs.fat"
    struct.pack_into("<HBHBHHBH", data, 0x0B, BPS, SPC, RESERVED, FATS,
                     ROOT_ENTRIES, TOTAL, 0xF8, SPF)
    data[0x36:0x3E] = b"FAT16   "
    data[510:512] = b"\x55\xaa"
    return data


def _entry(name, attr, cluster, size):
    raw = bytearray(32)
    raw[0:11] = name
    raw[11] = attr
    raw[14:18] = STAMP
    raw[18:20] = STAMP[2:]
    raw[22:26] = STAMP
    raw[20:22] = (cluster >> 16).to_bytes(2, "little")
    raw[26:28] = (cluster & 0xFFFF).to_bytes(2, "little")
    raw[28:32] = size.to_bytes(4, "little")
    return bytes(raw)


def _build_image():
    sectors = [bytearray(BPS) for _ in range(TOTAL)]
    sectors[0] = _bpb()

    fat = bytearray(BPS)
    for index, value in {0: 0xFFF8, 1: 0xFFFF, 2: 0xFFFF, 3: 5, 5: 4, 4: 0xFFFF,
                         6: 0xFFFF, 7: 0xFFFF, 8: 0xFFF7}.items():
        struct.pack_into("<H", fat, index * 2, value)
    for copy in range(FATS):
        sectors[RESERVED + copy] = bytearray(fat)

    root_sector = RESERVED + FATS * SPF
    root = b"".join([
        _entry(b"HELLO   TXT", 0x20, 2, len(HELLO)),
        _entry(b"\xe5LD     TXT", 0x20, 9, 10),
        _entry(b"ALONGNAMEXX", 0x0F, 0, 0),
        _entry(b"BIG     BIN", 0x20, 3, len(BIG)),
        _entry(b"SUB        ", 0x10, 6, 0),
    ])
    sectors[root_sector][:len(root)] = root
    data_start = root_sector + 1

    def write_cluster(number, payload):
        first = data_start + (number - 2) * SPC
        payload = payload.ljust(SPC * BPS, b"\x00")
        for i in range(SPC):
            sectors[first + i] = bytearray(payload[i * BPS:(i + 1) * BPS])

    write_cluster(2, HELLO)
    write_cluster(3, BIG[0:1024])
    write_cluster(5, BIG[1024:2048])
    write_cluster(4, BIG[2048:])
    write_cluster(6, b"".join([
        _entry(b".          ", 0x10, 6, 0),
        _entry(b"..         ", 0x10, 0, 0),
        _entry(b"NESTED  TXT", 0x20, 7, len(NESTED)),
    ]))
    write_cluster(7, NESTED)
    return sectors


@pytest.fixture
def device():
    return MemoryDevice(_build_image())


@pytest.fixture
def fs(device):
    return Fat16(device)


def test_layout_invariants(device):
    impl = Fat16Impl(device)
    assert impl.fat_start == RESERVED
    assert impl.cluster_to_sector(Cluster.ROOT_DIR) == impl.first_root_dir_sector
    assert impl.cluster_to_sector(Cluster(2)) == impl.first_data_sector
    assert impl.cluster_to_sector(Cluster(3)) - impl.cluster_to_sector(Cluster(2)) == SPC
    assert impl.first_data_sector > impl.first_root_dir_sector > impl.fat_start


def test_cluster_sector_holds_file_data(device):
    impl = Fat16Impl(device)
    sector = bytes(device.read_block(impl.cluster_to_sector(Cluster(2))))
    assert sector[:len(HELLO)] == HELLO


def test_next_cluster_follows_chain(device):
    impl = Fat16Impl(device)
    assert impl.next_cluster(Cluster(3)) == Cluster(5)
    assert impl.next_cluster(Cluster(5)) == Cluster(4)
    with pytest.raises(EndOfFile):
        impl.next_cluster(Cluster(4))
    with pytest.raises(BadCluster):
        impl.next_cluster(Cluster(8))


def test_not_a_fat_volume():
    sectors = _build_image()
    sectors[0][510:512] = b"\x00\x00"
    with pytest.raises(InvalidOperation):
        Fat16Impl(MemoryDevice(sectors))


def test_read_dir_root_skips_deleted_and_long_names(fs):
    names = [meta.name for meta in fs.read_dir("/")]
    assert names == ["HELLO.TXT", "BIG.BIN", "SUB"]


def test_read_dir_metadata(fs):
    metas = {meta.name: meta for meta in fs.read_dir("/")}
    assert metas["SUB"].is_dir()
    assert metas["BIG.BIN"].is_file()
    assert metas["BIG.BIN"].length == len(BIG)
    assert metas["HELLO.TXT"].created == datetime(2020, 6, 16, 23, 48, 30, tzinfo=timezone.utc)
    assert metas["HELLO.TXT"].accessed == datetime(2020, 6, 16, 0, 0, 0, tzinfo=timezone.utc)


def test_read_dir_subdirectory(fs):
    names = [meta.name for meta in fs.read_dir("/sub")]
    assert names == [".", "..", "NESTED.TXT"]


def test_get_parent_dir(device):
    impl = Fat16Impl(device)
    assert impl.get_parent_dir("/").cluster == Cluster.ROOT_DIR
    assert impl.get_parent_dir("/sub").cluster == Cluster(6)
    assert impl.get_parent_dir("/sub/nested.txt").cluster == Cluster(6)
    assert impl.get_parent_dir("/hello.txt").cluster == Cluster.ROOT_DIR


def test_get_parent_dir_through_file(device):
    impl = Fat16Impl(device)
    with pytest.raises(NotADirectory):
        impl.get_parent_dir("/hello.txt/more")


def test_find_directory_entry(device):
    impl = Fat16Impl(device)
    entry = impl.find_directory_entry(Directory.root(), "big.bin")
    assert entry.cluster == Cluster(3)
    assert entry.size == len(BIG)
    with pytest.raises(EntryNotFound):
        impl.find_directory_entry(Directory.root(), "nope.txt")


def test_iterate_dir_yields_entries(device):
    impl = Fat16Impl(device)
    entries = list(impl.iterate_dir(Directory.root()))
    assert [str(e.filename) for e in entries] == ["HELLO.TXT", "BIG.BIN", "SUB"]


def test_get_dir_entry(device):
    impl = Fat16Impl(device)
    entry = impl.get_dir_entry("/sub/nested.txt")
    assert entry.cluster == Cluster(7)
    assert entry.display_name() == "NESTED.TXT"


def test_open_file_reads_content(fs):
    handle = fs.open_file("/hello.txt")
    assert handle.meta.name == "HELLO.TXT"
    assert handle.read_all() == HELLO


def test_open_file_follows_cluster_chain(fs):
    assert fs.open_file("/BIG.BIN").read_all() == BIG


def test_chunked_reads_match_whole(fs):
    handle = fs.open_file("/big.bin")
    chunks = []
    while chunk := handle.read(100):
        assert len(chunk) <= 100
        chunks.append(chunk)
    assert b"".join(chunks) == BIG


def test_read_beyond_end(fs):
    handle = fs.open_file("/hello.txt")
    assert handle.read(1000) == HELLO
    assert handle.read(10) == b""


def test_nested_file(fs):
    assert fs.open_file("/sub/nested.txt").read_all() == NESTED


def test_metadata(fs):
    assert fs.metadata("/big.bin").length == len(BIG)
    assert fs.metadata("/big.bin").is_file()
    assert fs.metadata("/sub").is_dir()
    assert fs.metadata("/").is_dir()
    with pytest.raises(EntryNotFound):
        fs.metadata("/nothing")


def test_exists(fs):
    assert fs.exists("/hello.txt") is True
    assert fs.exists("/sub/nested.txt") is True
    assert fs.exists("/") is True
    assert fs.exists("/missing.txt") is False
    assert fs.exists("/hello.txt/x") is False


def test_file_object(device):
    impl = Fat16Impl(device)
    entry = impl.get_dir_entry("/hello.txt")
    file = File(impl, entry)
    assert file.length() == len(HELLO)
    assert file.read(5) == HELLO[:5]
    assert file.read_all() == HELLO[5:]
    with pytest.raises(NotSupported):
        file.write(b"x")
    with pytest.raises(NotSupported):
        file.seek(0)


def test_on_partition():
    image = _build_image()
    disk = MemoryDevice([bytes(BPS)] * 3 + image)
    fs = Fat16(Partition(disk, 3, len(image)))
    assert fs.open_file("/big.bin").read_all() == BIG


def test_through_mount(fs):
    mount = Mount(fs, "/mnt")
    assert mount.open_file("/mnt/hello.txt").read_all() == HELLO
    assert mount.exists("/mnt/sub") is True


def test_repr(fs):
    assert repr(fs).startswith("Fat16(")
    assert "mkfs.fat" in repr(fs.handle)