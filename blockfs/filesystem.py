"""The file system interface and mount points."""

from __future__ import annotations

from abc import ABC, abstractmethod

from blockfs.errors import NotSupported

PATH_SEPARATOR = "/"


class FileSystem(ABC):
    """A hierarchical file system addressed by slash-separated paths."""

    @abstractmethod
    def read_dir(self, path):
        """Return an iterator over the metadata of the direct children of ``path``."""

    @abstractmethod
    def open_file(self, path):
        """Open the file at ``path`` for reading and return a FileHandle."""

    @abstractmethod
    def metadata(self, path):
        """Return the metadata of the entry at ``path``."""

    @abstractmethod
    def exists(self, path):
        """Return True if an entry exists at ``path``."""

    def _refuse(self, operation, *paths):
        """Raise NotSupported naming this file system, the operation and its paths."""
        targets = " -> ".join(repr(p) for p in paths)
        raise NotSupported(
            f"{type(self).__name__} does not support {operation}: {targets}"
        )

    def create_file(self, path):
        """Create a file at ``path`` for writing."""
        self._refuse("create_file", path)

    def append_file(self, path):
        """Open the file at ``path`` for appending."""
        self._refuse("append_file", path)

    def remove_file(self, path):
        """Remove the file at ``path``."""
        self._refuse("remove_file", path)

    def remove_dir(self, path):
        """Remove the directory at ``path``."""
        self._refuse("remove_dir", path)

    def copy_file(self, src, dst):
        """Copy ``src`` to ``dst`` within this file system."""
        self._refuse("copy_file", src, dst)

    def move_file(self, src, dst):
        """Move the file ``src`` to ``dst`` within this file system."""
        self._refuse("move_file", src, dst)

    def move_dir(self, src, dst):
        """Move the directory ``src`` to ``dst`` within this file system."""
        self._refuse("move_dir", src, dst)


class Mount(FileSystem):
    """A file system attached at a mount point; the point is stripped from paths."""

    def __init__(self, fs, mount_point):
        self.fs = fs
        self.mount_point = mount_point

    def _trim(self, path):
        prefix = self.mount_point
        if not prefix:
            return path
        while path.startswith(prefix):
            path = path[len(prefix):]
        return path

    def read_dir(self, path):
        return self.fs.read_dir(self._trim(path))

    def open_file(self, path):
        return self.fs.open_file(self._trim(path))

    def metadata(self, path):
        return self.fs.metadata(self._trim(path))

    def exists(self, path):
        return self.fs.exists(self._trim(path))

    def __repr__(self):
        return f"Mount(mount_point={self.mount_point!r}, fs={self.fs!r})"