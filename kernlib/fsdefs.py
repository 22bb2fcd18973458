"""File types, open flags, seek codes and directory entries of the file system interface."""

from dataclasses import dataclass
from enum import IntEnum, IntFlag

__all__ = [
    "S_IFMT",
    "FileType",
    "OpenFlags",
    "Whence",
    "Stat",
    "DirEntry",
    "file_type",
    "s_isreg",
    "s_isdir",
    "s_islnk",
    "s_ischr",
    "s_isblk",
    "O_ACCMODE",
    "NO_FD",
    "FS_MAX_DNAME_LEN",
    "FS_MAX_FNAME_LEN",
    "FS_MAX_FPATH_LEN",
    "EXEC_MAX_ARG_NUM",
    "EXEC_MAX_ARG_LEN",
]

S_IFMT = 0o70000

T_SYSCALL = 0x80

SYS_exit = 1
SYS_fork = 2
SYS_wait = 3
SYS_exec = 4
SYS_clone = 5
SYS_yield = 10
SYS_sleep = 11
SYS_kill = 12
SYS_gettime = 17
SYS_getpid = 18
SYS_mmap = 20
SYS_munmap = 21
SYS_shmem = 22
SYS_putc = 30
SYS_pgdir = 31
SYS_open = 100
SYS_close = 101
SYS_read = 102
SYS_write = 103
SYS_seek = 104
SYS_fstat = 110
SYS_fsync = 111
SYS_getcwd = 121
SYS_getdirentry = 128
SYS_dup = 130
SYS_lab6_set_priority = 255

CLONE_VM = 0x00000100
CLONE_THREAD = 0x00000200
CLONE_FS = 0x00000800

O_ACCMODE = 3
NO_FD = -0x9527

FS_MAX_DNAME_LEN = 31
FS_MAX_FNAME_LEN = 255
FS_MAX_FPATH_LEN = 4095

EXEC_MAX_ARG_NUM = 32
EXEC_MAX_ARG_LEN = 4095


class FileType(IntEnum):
    """The file type bits of a mode."""

    REGULAR = 0o10000
    DIRECTORY = 0o20000
    SYMLINK = 0o30000
    CHAR_DEVICE = 0o40000
    BLOCK_DEVICE = 0o50000


def file_type(mode):
    """Return the :class:`FileType` encoded in ``mode``."""
    try:
        return FileType(int(mode) & S_IFMT)
    except ValueError:
        raise ValueError(f"unknown file type in mode {int(mode):#o}") from None


def s_isreg(mode):
    """True if ``mode`` describes a regular file."""
    return int(mode) & S_IFMT == FileType.REGULAR


def s_isdir(mode):
    """True if ``mode`` describes a directory."""
    return int(mode) & S_IFMT == FileType.DIRECTORY


def s_islnk(mode):
    """True if ``mode`` describes a symbolic link."""
    return int(mode) & S_IFMT == FileType.SYMLINK


def s_ischr(mode):
    """True if ``mode`` describes a character device."""
    return int(mode) & S_IFMT == FileType.CHAR_DEVICE


def s_isblk(mode):
    """True if ``mode`` describes a block device."""
    return int(mode) & S_IFMT == FileType.BLOCK_DEVICE


class OpenFlags(IntFlag):
    """Flags for opening a file: one access mode, or-ed with modifiers."""

    RDONLY = 0
    WRONLY = 1
    RDWR = 2
    CREAT = 0x00000004
    EXCL = 0x00000008
    TRUNC = 0x00000010
    APPEND = 0x00000020

    @property
    def access_mode(self):
        """The access-mode part of the flags."""
        return OpenFlags(int(self) & O_ACCMODE)


class Whence(IntEnum):
    """Reference point for seeking."""

    SET = 0
    CUR = 1
    END = 2


@dataclass
class Stat:
    """File status as reported by the file system."""

    mode: int
    nlinks: int = 0
    blocks: int = 0
    size: int = 0

    @property
    def type(self):
        """The file type encoded in :attr:`mode`."""
        return file_type(self.mode)


@dataclass(frozen=True)
class DirEntry:
    """One directory entry: its offset in the directory and its name."""

    offset: int
    name: str

    def __post_init__(self):
        if "\0" in self.name:
            raise ValueError("directory entry name contains a NUL character")
        if len(self.name.encode()) > FS_MAX_FNAME_LEN:
            raise ValueError(f"directory entry name longer than {FS_MAX_FNAME_LEN} bytes")