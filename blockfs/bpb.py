"""The FAT16 BIOS Parameter Block."""

from __future__ import annotations

from blockfs.errors import InvalidOperation
from blockfs.fields import BytesField, TextField, U8Field, U16Field, U32Field

BPB_SIZE = 512
BOOT_TRAIL = 0xAA55


class Fat16Bpb:
    """The first sector of a FAT16 volume, describing its layout."""

    oem_name = BytesField(0x03, 8)
    oem_name_str = TextField(0x03, 8)
    bytes_per_sector = U16Field(0x0B)
    sectors_per_cluster = U8Field(0x0D)
    reserved_sector_count = U16Field(0x0E)
    fat_count = U8Field(0x10)
    root_entries_count = U16Field(0x11)
    total_sectors_16 = U16Field(0x13)
    media_descriptor = U8Field(0x15)
    sectors_per_fat = U16Field(0x16)
    sectors_per_track = U16Field(0x18)
    track_count = U16Field(0x1A)
    hidden_sectors = U32Field(0x1C)
    total_sectors_32 = U32Field(0x20)
    drive_number = U8Field(0x24)
    reserved_flags = U8Field(0x25)
    boot_signature = U8Field(0x26)
    volume_id = U32Field(0x27)
    volume_label = BytesField(0x2B, 11)
    volume_label_str = TextField(0x2B, 11)
    system_identifier = BytesField(0x36, 8)
    system_identifier_str = TextField(0x36, 8)
    trail = U16Field(0x1FE)

    def __init__(self, data):
        raw = bytes(data)
        if len(raw) != BPB_SIZE:
            raise InvalidOperation(f"BPB needs {BPB_SIZE} bytes, got {len(raw)}")
        self.data = raw
        if self.trail != BOOT_TRAIL:
            raise InvalidOperation(f"bad boot sector trail 0x{self.trail:04x}")

    def total_sectors(self):
        """Return the sector count, using the 32-bit field when the 16-bit one is zero."""
        if self.total_sectors_16 == 0:
            return self.total_sectors_32
        return self.total_sectors_16

    def __repr__(self):
        return (
            "Fat16Bpb("
            f"oem_name={self.oem_name_str!r}, "
            f"bytes_per_sector={self.bytes_per_sector}, "
            f"sectors_per_cluster={self.sectors_per_cluster}, "
            f"reserved_sector_count={self.reserved_sector_count}, "
            f"fat_count={self.fat_count}, "
            f"root_entries_count={self.root_entries_count}, "
            f"total_sectors={self.total_sectors()}, "
            f"media_descriptor={self.media_descriptor}, "
            f"sectors_per_fat={self.sectors_per_fat}, "
            f"sectors_per_track={self.sectors_per_track}, "
            f"track_count={self.track_count}, "
            f"hidden_sectors={self.hidden_sectors}, "
            f"drive_number={self.drive_number}, "
            f"reserved_flags={self.reserved_flags}, "
            f"boot_signature={self.boot_signature}, "
            f"volume_id={self.volume_id}, "
            f"volume_label={self.volume_label_str!r}, "
            f"system_identifier={self.system_identifier_str!r}, "
            f"trail={self.trail})"
        )