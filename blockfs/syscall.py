"""System call numbers."""

from __future__ import annotations

import enum


class Syscall(enum.IntEnum):
    """System call numbers; unknown numbers map to UNKNOWN."""

    READ = 0
    WRITE = 1
    OPEN = 2
    CLOSE = 3
    BRK = 12
    GET_PID = 39
    FORK = 58
    SPAWN = 59
    EXIT = 60
    WAIT_PID = 61
    SEM = 66
    LIST_APP = 65531
    STAT = 65532
    ALLOCATE = 65533
    DEALLOCATE = 65534
    UNKNOWN = 65535
    LIST_DIR = 114514

    @classmethod
    def _missing_(cls, value):
        return cls.UNKNOWN