"""Descriptors that read little-endian fields from a record's ``data`` bytes."""

from __future__ import annotations


def _read_int(data, offset, width):
    raw = bytes(data[offset:offset + width])
    if len(raw) != width:
        return 0
    return int.from_bytes(raw, "little")


def _read_span(data, offset, length):
    raw = bytes(data[offset:offset + length])
    return raw if len(raw) == length else None


class U8Field:
    """An unsigned byte; 0 when the offset is out of range."""

    def __init__(self, offset):
        self.offset = offset

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        return _read_int(instance.data, self.offset, 1)


class U16Field:
    """A little-endian unsigned 16-bit integer; 0 when out of range."""

    def __init__(self, offset):
        self.offset = offset

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        return _read_int(instance.data, self.offset, 2)


class U32Field:
    """A little-endian unsigned 32-bit integer; 0 when out of range."""

    def __init__(self, offset):
        self.offset = offset

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        return _read_int(instance.data, self.offset, 4)


class BytesField:
    """A run of raw bytes; zeros when the run is out of range."""

    def __init__(self, offset, length):
        self.offset = offset
        self.length = length

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        raw = _read_span(instance.data, self.offset, self.length)
        return bytes(self.length) if raw is None else raw


class TextField:
    """A run of bytes decoded as UTF-8; empty when it cannot be decoded."""

    def __init__(self, offset, length):
        self.offset = offset
        self.length = length

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        raw = _read_span(instance.data, self.offset, self.length)
        if raw is None:
            return ""
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError:
            return ""