"""Read MBR partition tables and FAT16 volumes from block devices."""

__version__ = "0.4.0"